"""Log entries for secrets; only key names are recorded, never values."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    should_include_namespace,
)


@dataclass(kw_only=True)
class SecretData(LogEntryMetadata):
    """State of one secret."""

    type: str = ""
    data_keys: list[str] = field(default_factory=list)


class SecretHandler(BaseHandler):
    """Collects secrets from the cache."""

    KIND = "Secret"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[SecretData]:
        wanted = list(namespaces or ())
        list_time = datetime.now(timezone.utc)
        entries = []
        for secret in self.objects_of_kind(self.KIND):
            namespace = (secret.get("metadata") or {}).get("namespace", "")
            if not should_include_namespace(wanted, namespace):
                continue
            entry = self.create_log_entry(secret)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, secret: Mapping[str, Any]) -> SecretData:
        keys = list(secret.get("data") or {}) + list(secret.get("stringData") or {})
        return SecretData(
            **vars(build_metadata(secret, "secret")),
            type=secret.get("type", ""),
            data_keys=sorted(keys),
        )