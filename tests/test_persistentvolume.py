import pytest

from statelogs.common import InformerFactory
from statelogs.persistentvolume import (
    PersistentVolumeData,
    PersistentVolumeHandler,
    volume_plugin_name,
)

CREATED = "2024-01-01T00:00:00Z"
HOST_PATH = {"hostPath": {"path": "/data"}}


def _pv(name, capacity="1Gi", access_modes=("ReadWriteOnce",), reclaim="Retain", phase="Available",
        source=HOST_PATH, volume_mode="Filesystem", spec_extra=None, **extra_meta):
    spec = {
        "capacity": {"storage": capacity},
        "accessModes": list(access_modes),
        "persistentVolumeReclaimPolicy": reclaim,
        **source,
        **(spec_extra or {}),
    }
    if volume_mode is not None:
        spec["volumeMode"] = volume_mode
    return {
        "kind": "PersistentVolume",
        "metadata": {"name": name, "creationTimestamp": CREATED, **extra_meta},
        "spec": spec,
        "status": {"phase": phase},
    }


PV1 = _pv("pv1", capacity="10Gi", spec_extra={"storageClassName": "fast"},
          labels={"env": "prod"}, annotations={"purpose": "test"})
PV2 = _pv("pv2", capacity="20Gi", access_modes=["ReadOnlyMany"], reclaim="Delete", phase="Bound",
          source={"nfs": {"server": "nfs.example.com", "path": "/exports"}})
PV_OWNED = _pv("owned-pv", capacity="5Gi", access_modes=["ReadWriteMany"], reclaim="Recycle", phase="Failed",
               source={"awsElasticBlockStore": {"volumeID": "vol-123"}},
               ownerReferences=[{"kind": "StorageClass", "name": "my-sc"}])


def _pv_handler(objects):
    handler = PersistentVolumeHandler(client=None)
    handler.setup_informer(InformerFactory(objects), None, 3600)
    return handler


@pytest.mark.parametrize(
    "objects, names, fields",
    [
        ([PV1, PV2], {"pv1", "pv2"}, {}),
        ([PV_OWNED], {"owned-pv"}, {
            "created_by_kind": "StorageClass",
            "created_by_name": "my-sc",
            "volume_plugin_name": "awsElasticBlockStore",
            "persistent_volume_source": "awsElasticBlockStore",
            "reclaim_policy": "Recycle",
            "volume_mode": "Filesystem",
            "is_default_class": False,
        }),
        ([PV1], {"pv1"}, {
            "access_modes": "ReadWriteOnce",
            "storage_class_name": "fast",
            "status": "Available",
            "volume_plugin_name": "hostPath",
            "capacity_bytes": 10737418240,
        }),
        ([PV2], {"pv2"}, {
            "access_modes": "ReadOnlyMany",
            "status": "Bound",
            "volume_plugin_name": "nfs",
            "capacity_bytes": 21474836480,
        }),
        ([_pv("test-pv-1"), _pv("test-pv-2", phase="Bound")], {"test-pv-1", "test-pv-2"}, {}),
    ],
)
def test_persistent_volume_collect(objects, names, fields):
    entries = _pv_handler(objects).collect([])
    assert {entry.name for entry in entries} == names
    assert len(entries) == len(objects)
    for key, expected in fields.items():
        assert getattr(entries[0], key) == expected
    for entry in entries:
        assert isinstance(entry, PersistentVolumeData)
        assert entry.resource_type == "persistentvolume"
        assert entry.created_timestamp != 0
        assert entry.access_modes
        assert entry.status


@pytest.mark.parametrize("strays", [[], [{"kind": "Pod", "metadata": {}}]])
def test_persistent_volume_nothing_to_collect(strays):
    handler = _pv_handler([])
    for obj in strays:
        handler.get_informer().add(obj)
    assert handler.collect([]) == []


@pytest.mark.parametrize(
    "spec, expected",
    [({}, "unknown"), ({"storageos": {}}, "storageOS"), ({"nfs": {}, "azureDisk": {}}, "azureDisk")],
)
def test_volume_plugin_name(spec, expected):
    assert volume_plugin_name(spec) == expected


@pytest.mark.parametrize(
    "pv",
    [_pv("no-modes", access_modes=[]), _pv("no-mode", volume_mode=None)],
)
def test_persistent_volume_incomplete_spec_raises(pv):
    with pytest.raises(ValueError):
        PersistentVolumeHandler(client=None).create_log_entry(pv)