# statelogs

`statelogs` turns the state of Kubernetes objects into flat, structured log
records. Each resource kind has a handler. The handler reads objects from an
in-memory informer cache and returns one dataclass entry per object. Every
entry carries the shared metadata: timestamp, resource type, name, namespace,
creation time in Unix seconds, labels, annotations and the kind and name of
the first owner reference. It also carries the fields that matter for its kind.

The objects are plain dictionaries shaped like the Kubernetes API's JSON, each
with a `"kind"` key. You can feed the handlers from any source: API responses,
saved manifests or test fixtures.

## Installation

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install ".[test]"
pytest
```

## Supported resources

| Module                            | Handler                        | Entry type                   |
|-----------------------------------|--------------------------------|------------------------------|
| `statelogs.persistentvolume`      | `PersistentVolumeHandler`      | `PersistentVolumeData`       |
| `statelogs.persistentvolumeclaim` | `PersistentVolumeClaimHandler` | `PersistentVolumeClaimData`  |
| `statelogs.pod`                   | `PodHandler`                   | `PodData`                    |
| `statelogs.poddisruptionbudget`   | `PodDisruptionBudgetHandler`   | `PodDisruptionBudgetData`    |
| `statelogs.priorityclass`         | `PriorityClassHandler`         | `PriorityClassData`          |
| `statelogs.replicaset`            | `ReplicaSetHandler`            | `ReplicaSetData`             |
| `statelogs.replicationcontroller` | `ReplicationControllerHandler` | `ReplicationControllerData`  |
| `statelogs.resourcequota`         | `ResourceQuotaHandler`         | `ResourceQuotaData`          |
| `statelogs.role`                  | `RoleHandler`                  | `RoleData`                   |
| `statelogs.rolebinding`           | `RoleBindingHandler`           | `RoleBindingData`            |
| `statelogs.runtimeclass`          | `RuntimeClassHandler`          | `RuntimeClassData`           |
| `statelogs.secret`                | `SecretHandler`                | `SecretData`                 |
| `statelogs.service`               | `ServiceHandler`               | `ServiceData`                |

## Usage

```python
from statelogs.common import InformerFactory
from statelogs.pod import PodHandler

pod = {
    "kind": "Pod",
    "metadata": {
        "name": "web-1",
        "namespace": "default",
        "creationTimestamp": "2024-01-01T00:00:00Z",
        "labels": {"app": "web"},
    },
    "spec": {"nodeName": "node-a", "restartPolicy": "Always"},
    "status": {"phase": "Running", "podIP": "10.0.0.5"},
}

factory = InformerFactory([pod])
handler = PodHandler(client=None)
handler.setup_informer(factory, logger=None, resync_period=3600)

for entry in handler.collect(["default"]):
    print(entry.name, entry.phase, entry.qos_class)  # web-1 Running BestEffort
```

### The cache

- `InformerFactory(objects)` holds a view of the cluster. `informer(kind)`
  returns one shared `Informer` per kind, filled with the matching objects.
  `add(obj)` adds an object to the view and to any informer already watching
  its kind.
- `Informer.add(obj)` puts any object into the cache, `list()` returns a
  snapshot of it, and `has_synced()` is always true, because the cache is
  filled when it is made.
- Handlers store the client and logger they are given but do not use them.
  The `resync_period` argument of `setup_informer` is accepted and ignored.

### Handlers

`collect(namespaces)` returns a list of entries. It skips cached objects of
any other kind. An empty namespace list means every namespace.
Cluster-scoped kinds (persistent volumes, priority classes and runtime
classes) ignore the namespace filter. All entries from one call carry the
same timestamp.

`create_log_entry(obj)` builds a single entry straight from an object, with
no informer involved.

### Quantities

Resource quantities use the Kubernetes notation ("10Gi", "500m", "1.5e3").
`statelogs.common` handles them:

- `parse_quantity` parses a quantity into an exact `Fraction`.
- `quantity_value` gives the integer value, rounded up away from zero.
- `quantity_string` gives the canonical text form, keeping binary, decimal
  or exponent notation.

Each raises `ValueError` on text that is not a quantity.

### Notes on specific kinds

- A persistent volume must have at least one access mode and a volume mode;
  `PersistentVolumeHandler.create_log_entry` raises `ValueError` otherwise.
  Only the first access mode is recorded. `volume_plugin_name(spec)` names
  the plugin backing a volume, or returns `"unknown"`.
- Pod disruption budgets given as percentages record 0 for
  `min_available` or `max_unavailable`.
- Replica sets with zero desired replicas are left out, so old rollout
  revisions do not fill the logs. A replica set or replication controller
  without `spec.replicas` counts as wanting 1.
- Resource quotas record hard and used amounts as integers
  (`resource_list_to_int_map`).
- A service's endpoint count comes from the `Endpoints` objects in the same
  factory. `ServiceHandler.count_endpoints_for_service(namespace, name)`
  gives that count directly. Named target ports are not resolved and are
  recorded as 0.
- A secret entry lists only its data key names, sorted. It never includes
  the values.

## What this package does not do

`statelogs` only turns objects you give it into entries. It does not connect
to a cluster, watch for changes, run on a schedule, or write entries
anywhere. It has no command-line program. Fetching objects and shipping the
resulting entries to a log is up to the caller.