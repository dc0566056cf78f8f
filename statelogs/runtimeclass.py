"""Log entries for runtime classes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import BaseHandler, InformerFactory, LogEntryMetadata, build_metadata


@dataclass(kw_only=True)
class RuntimeClassData(LogEntryMetadata):
    """State of one runtime class."""

    handler: str


class RuntimeClassHandler(BaseHandler):
    """Collects runtime classes from the cache."""

    KIND = "RuntimeClass"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        """Attach the runtime class informer; resyncing is left to the factory."""
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[RuntimeClassData]:
        """Every cached runtime class; they are cluster scoped, so no namespace filter applies."""
        runtime_classes = list(self.objects_of_kind(self.KIND))
        seen_at = datetime.now(timezone.utc)
        entries = [self.create_log_entry(rc) for rc in runtime_classes]
        for entry in entries:
            entry.timestamp = seen_at
        return entries

    def create_log_entry(self, rc: Mapping[str, Any]) -> RuntimeClassData:
        return RuntimeClassData(**vars(build_metadata(rc, "runtimeclass")), handler=rc.get("handler", ""))