"""Log entries for pods."""

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
    parse_quantity,
    quantity_string,
    should_include_namespace,
)

_READY = "Ready"
_INITIALIZED = "Initialized"
_SCHEDULED = "PodScheduled"
_CONTAINERS_READY = "ContainersReady"
_KNOWN_CONDITIONS = (_READY, _INITIALIZED, _SCHEDULED, _CONTAINERS_READY)


def _parse_time(value: Any) -> datetime | None:
    """Turn a timestamp into an aware datetime; empty values give None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, timezone.utc)
    else:
        raise ValueError(f"invalid timestamp: {value!r}")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass
class TolerationData:
    """One toleration of a pod."""

    key: str = ""
    value: str = ""
    effect: str = ""
    operator: str = ""
    toleration_seconds: str = ""


@dataclass
class PVCData:
    """A persistent volume claim mounted by a pod."""

    claim_name: str
    read_only: bool = False


@dataclass(kw_only=True)
class PodData(LogEntryMetadata):
    """State of one pod."""

    node_name: str = ""
    host_ip: str = ""
    pod_ip: str = ""
    phase: str = ""
    qos_class: str = ""
    priority_class: str = ""
    ready: bool | None = None
    initialized: bool | None = None
    scheduled: bool | None = None
    containers_ready: bool | None = None
    pod_scheduled: bool | None = None
    conditions: dict[str, bool | None] = field(default_factory=dict)
    restart_count: int = 0
    deletion_timestamp: datetime | None = None
    start_time: datetime | None = None
    initialized_time: datetime | None = None
    ready_time: datetime | None = None
    scheduled_time: datetime | None = None
    status_reason: str = ""
    unschedulable: bool | None = None
    restart_policy: str = ""
    service_account: str = ""
    scheduler_name: str = ""
    overhead_cpu_cores: str = ""
    overhead_memory_bytes: str = ""
    runtime_class_name: str = ""
    pod_ips: list[str] = field(default_factory=list)
    tolerations: list[TolerationData] = field(default_factory=list)
    node_selectors: dict[str, str] = field(default_factory=dict)
    persistent_volume_claims: list[PVCData] = field(default_factory=list)
    completion_time: datetime | None = None


def _status_reason(status: Mapping[str, Any], conditions: list, container_statuses: list) -> str:
    if status.get("reason"):
        return status["reason"]
    for condition in conditions:
        if condition.get("status") == "False" and condition.get("reason"):
            return condition["reason"]
    for cs in container_statuses:
        terminated = (cs.get("state") or {}).get("terminated")
        if terminated and terminated.get("reason"):
            return terminated["reason"]
    return ""


def _mounted_read_only(spec: Mapping[str, Any], volume_name: str) -> bool:
    containers = list(spec.get("containers") or []) + list(spec.get("initContainers") or [])
    return any(
        mount.get("name") == volume_name and mount.get("readOnly", False)
        for container in containers
        for mount in container.get("volumeMounts") or []
    )


def _overhead(overhead: Mapping[str, Any], resource: str) -> str:
    amount = overhead.get(resource)
    if amount is None or parse_quantity(amount) == 0:
        return ""
    return quantity_string(amount)


def _completion_time(container_statuses: list) -> datetime:
    latest: datetime | None = None
    for cs in container_statuses:
        terminated = (cs.get("state") or {}).get("terminated")
        if not terminated:
            continue
        finished = _parse_time(terminated.get("finishedAt"))
        if finished is not None and (latest is None or finished > latest):
            latest = finished
    return latest if latest is not None else datetime.now(timezone.utc)


class PodHandler(BaseHandler):
    """Collects pods from the cache."""

    KIND = "Pod"

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)

    def collect(self, namespaces: Iterable[str]) -> list[PodData]:
        wanted = list(namespaces or ())
        list_time = datetime.now(timezone.utc)
        entries = []
        for pod in self.objects_of_kind(self.KIND):
            namespace = (pod.get("metadata") or {}).get("namespace", "")
            if not should_include_namespace(wanted, namespace):
                continue
            entry = self.create_log_entry(pod)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, pod: Mapping[str, Any]) -> PodData:
        meta = pod.get("metadata") or {}
        spec = pod.get("spec") or {}
        status = pod.get("status") or {}
        conditions = list(status.get("conditions") or [])
        container_statuses = list(status.get("containerStatuses") or [])

        known: dict[str, bool | None] = {}
        others: dict[str, bool | None] = {}
        transition_times: dict[str, datetime] = {}
        for condition in conditions:
            kind = condition.get("type", "")
            value = condition_status(condition.get("status"))
            if kind in _KNOWN_CONDITIONS:
                known[kind] = value
            else:
                others[kind] = value
            if kind in (_INITIALIZED, _READY, _SCHEDULED) and condition.get("status") == "True":
                moment = _parse_time(condition.get("lastTransitionTime"))
                if moment is not None:
                    transition_times[kind] = moment

        unschedulable = True if any(
            c.get("type") == _SCHEDULED and c.get("status") == "False" for c in conditions
        ) else None

        pod_ips = [status["podIP"]] if status.get("podIP") else []
        pod_ips.extend(entry["ip"] for entry in status.get("podIPs") or [] if entry.get("ip"))

        tolerations = [
            TolerationData(
                key=t.get("key", ""),
                value=t.get("value", ""),
                effect=t.get("effect", ""),
                operator=t.get("operator", ""),
                toleration_seconds=(
                    str(t["tolerationSeconds"]) if t.get("tolerationSeconds") is not None else ""
                ),
            )
            for t in spec.get("tolerations") or []
        ]

        pvcs = [
            PVCData(
                claim_name=volume["persistentVolumeClaim"].get("claimName", ""),
                read_only=_mounted_read_only(spec, volume.get("name", "")),
            )
            for volume in spec.get("volumes") or []
            if volume.get("persistentVolumeClaim") is not None
        ]

        overhead = spec.get("overhead") or {}
        scheduled = known.get(_SCHEDULED)
        phase = status.get("phase", "")

        return PodData(
            **vars(build_metadata(pod, "pod")),
            node_name=spec.get("nodeName", ""),
            host_ip=status.get("hostIP", ""),
            pod_ip=status.get("podIP", ""),
            phase=phase,
            qos_class=status.get("qosClass") or "BestEffort",
            priority_class=spec.get("priorityClassName") or "",
            ready=known.get(_READY),
            initialized=known.get(_INITIALIZED),
            scheduled=scheduled,
            containers_ready=known.get(_CONTAINERS_READY),
            pod_scheduled=scheduled,
            conditions=others,
            restart_count=sum(cs.get("restartCount", 0) for cs in container_statuses),
            deletion_timestamp=_parse_time(meta.get("deletionTimestamp")),
            start_time=_parse_time(status.get("startTime")),
            initialized_time=transition_times.get(_INITIALIZED),
            ready_time=transition_times.get(_READY),
            scheduled_time=transition_times.get(_SCHEDULED),
            status_reason=_status_reason(status, conditions, container_statuses),
            unschedulable=unschedulable,
            restart_policy=spec.get("restartPolicy", ""),
            service_account=spec.get("serviceAccountName", ""),
            scheduler_name=spec.get("schedulerName", ""),
            overhead_cpu_cores=_overhead(overhead, "cpu"),
            overhead_memory_bytes=_overhead(overhead, "memory"),
            runtime_class_name=spec.get("runtimeClassName") or "",
            pod_ips=pod_ips,
            tolerations=tolerations,
            node_selectors=dict(spec.get("nodeSelector") or {}),
            persistent_volume_claims=pvcs,
            completion_time=_completion_time(container_statuses) if phase == "Succeeded" else None,
        )