from statelogs.common import InformerFactory
from statelogs.role import PolicyRule, RoleHandler

CREATED = "2024-01-01T00:00:00Z"


def make_role(name, namespace):
    return {
        "kind": "Role",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {"app": name},
            "annotations": {"description": "test role"},
            "creationTimestamp": CREATED,
        },
        "rules": [
            {"apiGroups": [""], "resources": ["pods"], "verbs": ["get", "list", "watch"]},
        ],
    }


def setup(objects=()):
    factory = InformerFactory(objects)
    handler = RoleHandler(client="client")
    handler.setup_informer(factory, object(), 0)
    return handler, factory


def test_new_handler_keeps_client():
    handler = RoleHandler(client="client")
    assert handler.client == "client"
    assert handler.get_informer() is None


def test_setup_informer_uses_factory_informer():
    handler, factory = setup()
    assert handler.get_informer() is factory.informer("Role")


def test_collect_all():
    handler, _ = setup([make_role("test-role-1", "default"), make_role("test-role-2", "kube-system")])
    entries = handler.collect([])
    assert len(entries) == 2
    assert {e.name for e in entries} == {"test-role-1", "test-role-2"}
    assert all(e.namespace for e in entries)
    assert all(e.resource_type == "role" for e in entries)


def test_collect_namespace_filter():
    handler, _ = setup([make_role("a", "default"), make_role("b", "kube-system")])
    entries = handler.collect(["kube-system"])
    assert [e.name for e in entries] == ["b"]


def test_empty_cache():
    handler, _ = setup()
    assert handler.collect([]) == []


def test_invalid_object_skipped():
    handler, _ = setup()
    handler.get_informer().add({"kind": "Pod", "metadata": {"name": "p"}})
    assert handler.collect([]) == []


def test_create_log_entry_rules_and_metadata():
    handler = RoleHandler()
    entry = handler.create_log_entry(make_role("r", "default"))
    assert entry.rules == [
        PolicyRule(api_groups=[""], resources=["pods"], resource_names=[], verbs=["get", "list", "watch"])
    ]
    assert entry.labels == {"app": "r"}
    assert entry.annotations["description"] == "test role"
    assert entry.created_timestamp == 1704067200


def test_create_log_entry_owner_reference():
    role = make_role("r", "default")
    role["metadata"]["ownerReferences"] = [{"kind": "Project", "name": "my-project"}]
    entry = RoleHandler().create_log_entry(role)
    assert (entry.created_by_kind, entry.created_by_name) == ("Project", "my-project")