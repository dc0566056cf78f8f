from statelogs.common import InformerFactory
from statelogs.replicaset import ReplicaSetHandler

CREATED = "2024-01-01T00:00:00Z"


def _rs(name, namespace, replicas=3, conditions=None):
    spec = {"selector": {"matchLabels": {"app": name}}}
    if replicas is not None:
        spec["replicas"] = replicas
    return {
        "kind": "ReplicaSet",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {"app": name, "version": "v1"},
            "annotations": {"description": "test replicaset"},
            "creationTimestamp": CREATED,
            "generation": 1,
        },
        "spec": spec,
        "status": {
            "replicas": 3,
            "readyReplicas": 2,
            "availableReplicas": 2,
            "fullyLabeledReplicas": 3,
            "observedGeneration": 1,
            "conditions": conditions
            if conditions is not None
            else [{"type": "ReplicaFailure", "status": "False", "reason": "ReplicaSetAvailable"}],
        },
    }


def _handler(objects):
    handler = ReplicaSetHandler(None)
    handler.setup_informer(InformerFactory(objects), None, 3600)
    return handler


def test_setup_informer():
    handler = _handler([])
    assert handler.get_informer().kind == "ReplicaSet"


def test_collect_and_namespace():
    handler = _handler([_rs("test-replicaset-1", "default", 3), _rs("test-replicaset-2", "kube-system", 2)])
    assert len(handler.collect([])) == 2
    entries = handler.collect(["default"])
    assert len(entries) == 1
    assert entries[0].namespace == "default"


def test_create_log_entry():
    entry = ReplicaSetHandler(None).create_log_entry(_rs("test-replicaset", "default", 3))
    assert entry.resource_type == "replicaset"
    assert entry.name == "test-replicaset"
    assert entry.namespace == "default"
    assert entry.desired_replicas == 3
    assert entry.current_replicas == 3
    assert entry.ready_replicas == 2
    assert entry.available_replicas == 2
    assert entry.fully_labeled_replicas == 3
    assert entry.observed_generation == 1
    assert entry.condition_available is None
    assert entry.condition_progressing is None
    assert entry.condition_replica_failure is False
    assert entry.labels["app"] == "test-replicaset"
    assert entry.annotations["description"] == "test replicaset"


def test_create_log_entry_with_owner_reference():
    rs = _rs("test-replicaset", "default")
    rs["metadata"]["ownerReferences"] = [
        {"apiVersion": "apps/v1", "kind": "Deployment", "name": "test-deployment", "uid": "test-uid"}
    ]
    entry = ReplicaSetHandler(None).create_log_entry(rs)
    assert entry.created_by_kind == "Deployment"
    assert entry.created_by_name == "test-deployment"


def test_namespace_filtering_multiple():
    handler = _handler([
        _rs("test-replicaset-1", "default", 3),
        _rs("test-replicaset-2", "kube-system", 2),
        _rs("test-replicaset-3", "monitoring", 1),
    ])
    entries = handler.collect(["default", "monitoring"])
    assert {e.namespace for e in entries} == {"default", "monitoring"}


def test_zero_replicas_skipped_and_missing_defaults_to_one():
    handler = _handler([_rs("zero", "default", 0), _rs("unset", "default", None)])
    entries = handler.collect([])
    assert [e.name for e in entries] == ["unset"]
    assert entries[0].desired_replicas == 1


def test_unknown_conditions_go_to_map():
    rs = _rs("c", "default", conditions=[
        {"type": "Available", "status": "True"},
        {"type": "Custom", "status": "Unknown"},
    ])
    entry = ReplicaSetHandler(None).create_log_entry(rs)
    assert entry.condition_available is True
    assert entry.conditions == {"Custom": None}


def test_invalid_object_is_skipped():
    handler = _handler([])
    handler.get_informer().add({"kind": "Pod", "metadata": {"name": "p"}})
    assert handler.collect([]) == []