from statelogs.common import InformerFactory
from statelogs.replicationcontroller import ReplicationControllerHandler

CREATED = "2024-01-01T00:00:00Z"


def _rc(name, namespace, replicas=3):
    spec = {"selector": {"app": "test-app"}}
    if replicas is not None:
        spec["replicas"] = replicas
    return {
        "kind": "ReplicationController",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {"app": name},
            "annotations": {"description": "test replication controller"},
            "creationTimestamp": CREATED,
        },
        "spec": spec,
        "status": {
            "replicas": 3,
            "fullyLabeledReplicas": 3,
            "readyReplicas": 3,
            "availableReplicas": 3,
        },
    }


def _handler(objects):
    handler = ReplicationControllerHandler(None)
    handler.setup_informer(InformerFactory(objects), None, 3600)
    return handler


def test_collect():
    entries = _handler([_rc("test-rc-1", "default"), _rc("test-rc-2", "kube-system")]).collect([])
    assert len(entries) == 2
    assert {e.name for e in entries} == {"test-rc-1", "test-rc-2"}
    assert {e.namespace for e in entries} == {"default", "kube-system"}


def test_empty_cache():
    assert _handler([]).collect([]) == []


def test_invalid_object_is_skipped():
    handler = _handler([])
    handler.get_informer().add({"kind": "Pod", "metadata": {"name": "p"}})
    assert handler.collect([]) == []


def test_namespace_filter():
    entries = _handler([_rc("a", "default"), _rc("b", "kube-system")]).collect(["kube-system"])
    assert [e.name for e in entries] == ["b"]


def test_create_log_entry_fields():
    entry = ReplicationControllerHandler(None).create_log_entry(_rc("test-rc", "default"))
    assert entry.resource_type == "replicationcontroller"
    assert entry.desired_replicas == 3
    assert entry.current_replicas == 3
    assert entry.ready_replicas == 3
    assert entry.available_replicas == 3
    assert entry.fully_labeled_replicas == 3
    assert entry.observed_generation == 0
    assert entry.annotations == {"description": "test replication controller"}


def test_desired_replicas_defaults_to_one():
    entry = ReplicationControllerHandler(None).create_log_entry(_rc("x", "default", None))
    assert entry.desired_replicas == 1