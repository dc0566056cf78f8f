"""Log entries for replica sets."""

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
    should_include_namespace,
)


@dataclass(kw_only=True)
class ReplicaSetData(LogEntryMetadata):
    """State of one replica set."""

    desired_replicas: int = 1
    current_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    fully_labeled_replicas: int = 0
    observed_generation: int = 0
    condition_available: bool | None = None
    condition_progressing: bool | None = None
    condition_replica_failure: bool | None = None
    conditions: dict[str, bool | None] = field(default_factory=dict)


def _is_current_revision(rs: Mapping[str, Any]) -> bool:
    """Replica sets scaled to zero are old revisions."""
    replicas = (rs.get("spec") or {}).get("replicas")
    return replicas is None or replicas > 0


class ReplicaSetHandler(BaseHandler):
    """Collects replica sets from the cache."""

    KIND = "ReplicaSet"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        """Attach the replica set informer; resyncing is left to the factory."""
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[ReplicaSetData]:
        """Live replica sets in the wanted namespaces, or in all of them when none are named."""
        wanted = list(namespaces or ())
        moment = datetime.now(timezone.utc)
        selected = (
            rs
            for rs in self.objects_of_kind(self.KIND)
            if should_include_namespace(wanted, (rs.get("metadata") or {}).get("namespace", ""))
            and _is_current_revision(rs)
        )
        entries = list(map(self.create_log_entry, selected))
        for entry in entries:
            entry.timestamp = moment
        return entries

    def create_log_entry(self, rs: Mapping[str, Any]) -> ReplicaSetData:
        spec = rs.get("spec") or {}
        status = rs.get("status") or {}
        replicas = spec.get("replicas")

        remaining: dict[str, bool | None] = {}
        for condition in status.get("conditions") or []:
            remaining[condition.get("type", "")] = condition_status(condition.get("status"))
        available = remaining.pop("Available", None)
        progressing = remaining.pop("Progressing", None)
        replica_failure = remaining.pop("ReplicaFailure", None)

        return ReplicaSetData(
            **vars(build_metadata(rs, "replicaset")),
            desired_replicas=1 if replicas is None else replicas,
            current_replicas=status.get("replicas", 0),
            ready_replicas=status.get("readyReplicas", 0),
            available_replicas=status.get("availableReplicas", 0),
            fully_labeled_replicas=status.get("fullyLabeledReplicas", 0),
            observed_generation=status.get("observedGeneration", 0),
            condition_available=available,
            condition_progressing=progressing,
            condition_replica_failure=replica_failure,
            conditions=remaining,
        )