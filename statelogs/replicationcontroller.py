"""Log entries for replication controllers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    should_include_namespace,
)

# Field name in the log entry, key in the controller's status.
_STATUS_COUNTS = {
    "current_replicas": "replicas",
    "ready_replicas": "readyReplicas",
    "available_replicas": "availableReplicas",
    "fully_labeled_replicas": "fullyLabeledReplicas",
    "observed_generation": "observedGeneration",
}


@dataclass(kw_only=True)
class ReplicationControllerData(LogEntryMetadata):
    """State of one replication controller."""

    desired_replicas: int = 1
    current_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    fully_labeled_replicas: int = 0
    observed_generation: int = 0


class ReplicationControllerHandler(BaseHandler):
    """Collects replication controllers from the cache."""

    KIND = "ReplicationController"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        """Attach the replication controller informer; resyncing is left to the factory."""
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[ReplicationControllerData]:
        """Cached controllers in the wanted namespaces, or in all of them when none are named."""
        wanted = list(namespaces or ())
        controllers = [
            rc
            for rc in self.objects_of_kind(self.KIND)
            if should_include_namespace(wanted, (rc.get("metadata") or {}).get("namespace", ""))
        ]
        observed = datetime.now(timezone.utc)
        entries = [self.create_log_entry(rc) for rc in controllers]
        for entry in entries:
            entry.timestamp = observed
        return entries

    def create_log_entry(self, rc: Mapping[str, Any]) -> ReplicationControllerData:
        replicas = (rc.get("spec") or {}).get("replicas")
        status = rc.get("status") or {}
        return ReplicationControllerData(
            **vars(build_metadata(rc, "replicationcontroller")),
            desired_replicas=1 if replicas is None else replicas,
            **{name: status.get(key, 0) for name, key in _STATUS_COUNTS.items()},
        )