"""Log entries for priority classes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import BaseHandler, InformerFactory, LogEntryMetadata, build_metadata


@dataclass(kw_only=True)
class PriorityClassData(LogEntryMetadata):
    """State of one priority class."""

    value: int = 0
    global_default: bool = False
    description: str = ""
    preemption_policy: str = ""


class PriorityClassHandler(BaseHandler):
    """Collects priority classes from the cache."""

    KIND = "PriorityClass"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        """Attach the priority class informer; resyncing is left to the factory."""
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[PriorityClassData]:
        """Every cached priority class; they are cluster scoped, so no namespace filter applies."""
        classes = list(self.objects_of_kind(self.KIND))
        taken_at = datetime.now(timezone.utc)
        return [self._stamped(pc, taken_at) for pc in classes]

    def _stamped(self, pc: Mapping[str, Any], taken_at: datetime) -> PriorityClassData:
        entry = self.create_log_entry(pc)
        entry.timestamp = taken_at
        return entry

    def create_log_entry(self, pc: Mapping[str, Any]) -> PriorityClassData:
        return PriorityClassData(
            **vars(build_metadata(pc, "priorityclass")),
            value=pc.get("value", 0),
            global_default=bool(pc.get("globalDefault", False)),
            description=pc.get("description", ""),
            preemption_policy=pc.get("preemptionPolicy") or "",
        )