"""Log entries for resource quotas."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    quantity_value,
    should_include_namespace,
)


def resource_list_to_int_map(resources: Mapping[str, Any] | None) -> dict[str, int]:
    """Turn a resource list into integer values, rounding quantities up."""
    return {name: quantity_value(amount) for name, amount in (resources or {}).items()}


@dataclass(kw_only=True)
class ResourceQuotaData(LogEntryMetadata):
    """State of one resource quota."""

    hard: dict[str, int] = field(default_factory=dict)
    used: dict[str, int] = field(default_factory=dict)
    scopes: list[str] = field(default_factory=list)


class ResourceQuotaHandler(BaseHandler):
    """Collects resource quotas from the cache."""

    KIND = "ResourceQuota"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[ResourceQuotaData]:
        wanted = list(namespaces or ())
        list_time = datetime.now(timezone.utc)
        entries = []
        for quota in self.objects_of_kind(self.KIND):
            namespace = (quota.get("metadata") or {}).get("namespace", "")
            if not should_include_namespace(wanted, namespace):
                continue
            entry = self.create_log_entry(quota)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, quota: Mapping[str, Any]) -> ResourceQuotaData:
        spec = quota.get("spec") or {}
        status = quota.get("status") or {}
        return ResourceQuotaData(
            **vars(build_metadata(quota, "resourcequota")),
            hard=resource_list_to_int_map(spec.get("hard")),
            used=resource_list_to_int_map(status.get("used")),
            scopes=list(spec.get("scopes") or []),
        )