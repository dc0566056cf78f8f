"""Log entries for namespaced RBAC roles."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    should_include_namespace,
)


@dataclass
class PolicyRule:
    """One rule of a role: which verbs apply to which resources."""

    api_groups: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)
    resource_names: list[str] = field(default_factory=list)
    verbs: list[str] = field(default_factory=list)


@dataclass(kw_only=True)
class RoleData(LogEntryMetadata):
    """State of one role."""

    rules: list[PolicyRule] = field(default_factory=list)


class RoleHandler(BaseHandler):
    """Collects roles from the cache."""

    KIND = "Role"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[RoleData]:
        wanted = list(namespaces or ())
        list_time = datetime.now(timezone.utc)
        entries = []
        for role in self.objects_of_kind(self.KIND):
            namespace = (role.get("metadata") or {}).get("namespace", "")
            if not should_include_namespace(wanted, namespace):
                continue
            entry = self.create_log_entry(role)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, role: Mapping[str, Any]) -> RoleData:
        rules = [
            PolicyRule(
                api_groups=list(rule.get("apiGroups") or []),
                resources=list(rule.get("resources") or []),
                resource_names=list(rule.get("resourceNames") or []),
                verbs=list(rule.get("verbs") or []),
            )
            for rule in role.get("rules") or []
        ]
        return RoleData(**vars(build_metadata(role, "role")), rules=rules)