"""Log entries for namespaced RBAC role bindings."""

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
class RoleRef:
    """The role a binding grants."""

    api_group: str = ""
    kind: str = ""
    name: str = ""


@dataclass
class Subject:
    """A user, group or service account a binding applies to."""

    kind: str = ""
    name: str = ""
    namespace: str = ""
    api_group: str = ""


@dataclass(kw_only=True)
class RoleBindingData(LogEntryMetadata):
    """State of one role binding."""

    role_ref: RoleRef = field(default_factory=RoleRef)
    subjects: list[Subject] = field(default_factory=list)


class RoleBindingHandler(BaseHandler):
    """Collects role bindings from the cache."""

    KIND = "RoleBinding"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[RoleBindingData]:
        wanted = list(namespaces or ())
        list_time = datetime.now(timezone.utc)
        entries = []
        for rb in self.objects_of_kind(self.KIND):
            namespace = (rb.get("metadata") or {}).get("namespace", "")
            if not should_include_namespace(wanted, namespace):
                continue
            entry = self.create_log_entry(rb)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, rb: Mapping[str, Any]) -> RoleBindingData:
        ref = rb.get("roleRef") or {}
        role_ref = RoleRef(
            api_group=ref.get("apiGroup", ""),
            kind=ref.get("kind", ""),
            name=ref.get("name", ""),
        )
        subjects = [
            Subject(
                kind=subject.get("kind", ""),
                name=subject.get("name", ""),
                namespace=subject.get("namespace", ""),
                api_group=subject.get("apiGroup", ""),
            )
            for subject in rb.get("subjects") or []
        ]
        return RoleBindingData(
            **vars(build_metadata(rb, "rolebinding")),
            role_ref=role_ref,
            subjects=subjects,
        )