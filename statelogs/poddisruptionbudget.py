"""Log entries for pod disruption budgets."""

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

# Field name in the log entry, key in the budget's status.
_HEALTH_FIELDS = (
    ("current_healthy", "currentHealthy"),
    ("desired_healthy", "desiredHealthy"),
    ("expected_pods", "expectedPods"),
    ("disruptions_allowed", "disruptionsAllowed"),
)


def _int_value(value: Any) -> int:
    """Integer part of an int-or-string field; percentages count as 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


@dataclass(kw_only=True)
class PodDisruptionBudgetData(LogEntryMetadata):
    """State of one pod disruption budget."""

    min_available: int = 0
    max_unavailable: int = 0
    current_healthy: int = 0
    desired_healthy: int = 0
    expected_pods: int = 0
    disruptions_allowed: int = 0
    total_replicas: int = 0
    disruption_allowed: bool = False
    status_current_healthy: int = 0
    status_desired_healthy: int = 0
    status_expected_pods: int = 0
    status_disruptions_allowed: int = 0
    status_total_replicas: int = 0
    status_disruption_allowed: bool = False


class PodDisruptionBudgetHandler(BaseHandler):
    """Collects pod disruption budgets from the cache."""

    KIND = "PodDisruptionBudget"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        """Attach the budget informer; resyncing is left to the factory."""
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[PodDisruptionBudgetData]:
        """Cached budgets in the wanted namespaces, or in all of them when none are named."""
        wanted = list(namespaces or ())
        stamp = datetime.now(timezone.utc)
        entries = []
        for pdb in self.objects_of_kind(self.KIND):
            if should_include_namespace(wanted, (pdb.get("metadata") or {}).get("namespace", "")):
                entry = self.create_log_entry(pdb)
                entry.timestamp = stamp
                entries.append(entry)
        return entries

    def create_log_entry(self, pdb: Mapping[str, Any]) -> PodDisruptionBudgetData:
        spec = pdb.get("spec") or {}
        status = pdb.get("status") or {}
        health = {name: status.get(key, 0) for name, key in _HEALTH_FIELDS}
        allowed = health["disruptions_allowed"] > 0
        return PodDisruptionBudgetData(
            **vars(build_metadata(pdb, "poddisruptionbudget")),
            min_available=_int_value(spec.get("minAvailable")),
            max_unavailable=_int_value(spec.get("maxUnavailable")),
            **health,
            **{f"status_{name}": value for name, value in health.items()},
            disruption_allowed=allowed,
            status_disruption_allowed=allowed,
        )