"""Log entries for persistent volume claims."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    condition_status,
    quantity_string,
    should_include_namespace,
)

_CLAIM_CONDITIONS = ("Pending", "Bound", "Lost")


@dataclass(kw_only=True)
class PersistentVolumeClaimData(LogEntryMetadata):
    """State of one persistent volume claim."""

    access_modes: list[str] = field(default_factory=list)
    storage_class_name: str | None = None
    volume_name: str = ""
    phase: str = ""
    capacity: dict[str, str] = field(default_factory=dict)
    condition_pending: bool | None = None
    condition_bound: bool | None = None
    condition_lost: bool | None = None
    request_storage: str = ""
    used_storage: str = ""
    conditions: dict[str, bool | None] = field(default_factory=dict)


class PersistentVolumeClaimHandler(BaseHandler):
    """Collects persistent volume claims from the cache."""

    KIND = "PersistentVolumeClaim"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        """Attach the claim informer; resyncing is left to the factory."""
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[PersistentVolumeClaimData]:
        """Cached claims in the wanted namespaces, or in all of them when none are named."""
        wanted = list(namespaces or ())
        claims = [
            pvc
            for pvc in self.objects_of_kind(self.KIND)
            if should_include_namespace(wanted, (pvc.get("metadata") or {}).get("namespace", ""))
        ]
        listed_at = datetime.now(timezone.utc)
        entries = [self.create_log_entry(pvc) for pvc in claims]
        for entry in entries:
            entry.timestamp = listed_at
        return entries

    def create_log_entry(self, pvc: Mapping[str, Any]) -> PersistentVolumeClaimData:
        spec = pvc.get("spec") or {}
        status = pvc.get("status") or {}
        status_capacity = status.get("capacity") or {}
        requests = (spec.get("resources") or {}).get("requests") or {}

        by_type = {
            condition.get("type", ""): condition_status(condition.get("status"))
            for condition in status.get("conditions") or []
        }

        return PersistentVolumeClaimData(
            **vars(build_metadata(pvc, "persistentvolumeclaim")),
            access_modes=list(spec.get("accessModes") or []),
            storage_class_name=spec.get("storageClassName"),
            volume_name=spec.get("volumeName", ""),
            phase=status.get("phase", ""),
            capacity={name: quantity_string(amount) for name, amount in status_capacity.items()},
            condition_pending=by_type.get("Pending"),
            condition_bound=by_type.get("Bound"),
            condition_lost=by_type.get("Lost"),
            request_storage=quantity_string(requests["storage"]) if "storage" in requests else "",
            used_storage=quantity_string(status_capacity["storage"]) if "storage" in status_capacity else "",
            conditions={kind: value for kind, value in by_type.items() if kind not in _CLAIM_CONDITIONS},
        )