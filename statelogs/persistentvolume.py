"""Log entries for persistent volumes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    quantity_value,
)

# Volume source keys in the order they are checked, with the reported plugin name.
_PLUGIN_SOURCES = (
    ("awsElasticBlockStore", "awsElasticBlockStore"),
    ("azureDisk", "azureDisk"),
    ("azureFile", "azureFile"),
    ("cephfs", "cephFS"),
    ("cinder", "cinder"),
    ("fc", "fc"),
    ("flexVolume", "flexVolume"),
    ("flocker", "flocker"),
    ("gcePersistentDisk", "gcePersistentDisk"),
    ("glusterfs", "glusterfs"),
    ("hostPath", "hostPath"),
    ("iscsi", "iscsi"),
    ("local", "local"),
    ("nfs", "nfs"),
    ("photonPersistentDisk", "photonPersistentDisk"),
    ("portworxVolume", "portworxVolume"),
    ("quobyte", "quobyte"),
    ("rbd", "rbd"),
    ("scaleIO", "scaleIO"),
    ("storageos", "storageOS"),
    ("vsphereVolume", "vsphereVolume"),
)


def volume_plugin_name(spec: Mapping[str, Any]) -> str:
    """Name the volume plugin that backs a persistent volume spec."""
    return next((name for key, name in _PLUGIN_SOURCES if spec.get(key) is not None), "unknown")


@dataclass(kw_only=True)
class PersistentVolumeData(LogEntryMetadata):
    """State of one persistent volume."""

    capacity_bytes: int
    access_modes: str
    reclaim_policy: str
    status: str
    storage_class_name: str
    volume_mode: str
    volume_plugin_name: str
    persistent_volume_source: str
    is_default_class: bool = False


class PersistentVolumeHandler(BaseHandler):
    """Collects persistent volumes from the cache."""

    KIND = "PersistentVolume"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[PersistentVolumeData]:
        """Persistent volumes are cluster scoped, so the namespace filter is ignored."""
        list_time = datetime.now(timezone.utc)
        entries = []
        for pv in self.objects_of_kind(self.KIND):
            entry = self.create_log_entry(pv)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, pv: Mapping[str, Any]) -> PersistentVolumeData:
        """Raises ValueError when the volume has no access mode or no volume mode."""
        spec = pv.get("spec") or {}
        status = pv.get("status") or {}

        access_modes = list(spec.get("accessModes") or [])
        if not access_modes:
            raise ValueError("persistent volume has no access modes")
        volume_mode = spec.get("volumeMode")
        if volume_mode is None:
            raise ValueError("persistent volume has no volume mode")

        capacity = spec.get("capacity") or {}
        capacity_bytes = quantity_value(capacity["storage"]) if "storage" in capacity else 0
        plugin = volume_plugin_name(spec)

        return PersistentVolumeData(
            **vars(build_metadata(pv, "persistentvolume")),
            capacity_bytes=capacity_bytes,
            access_modes=access_modes[0],
            reclaim_policy=spec.get("persistentVolumeReclaimPolicy", ""),
            status=status.get("phase", ""),
            storage_class_name=spec.get("storageClassName") or "",
            volume_mode=volume_mode,
            volume_plugin_name=plugin,
            persistent_volume_source=plugin,
            is_default_class=False,
        )