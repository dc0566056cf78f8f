"""Log entries for services, including their endpoint counts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from statelogs.common import (
    BaseHandler,
    Informer,
    InformerFactory,
    LogEntryMetadata,
    build_metadata,
    should_include_namespace,
)


@dataclass
class ServicePortData:
    """One port exposed by a service."""

    name: str = ""
    protocol: str = ""
    port: int = 0
    target_port: int = 0
    node_port: int = 0


@dataclass
class LoadBalancerIngressData:
    """One ingress point of a load balancer service."""

    ip: str = ""
    hostname: str = ""


@dataclass(kw_only=True)
class ServiceData(LogEntryMetadata):
    """State of one service."""

    type: str = ""
    cluster_ip: str = ""
    external_ip: str = ""
    load_balancer_ip: str = ""
    ports: list[ServicePortData] = field(default_factory=list)
    selector: dict[str, str] = field(default_factory=dict)
    endpoints_count: int = 0
    load_balancer_ingress: list[LoadBalancerIngressData] = field(default_factory=list)
    session_affinity: str = ""
    external_name: str = ""
    external_traffic_policy: str = ""
    session_affinity_client_ip_timeout_seconds: int = 0
    allocate_load_balancer_node_ports: bool | None = None
    load_balancer_class: str | None = None
    load_balancer_source_ranges: list[str] = field(default_factory=list)


def _target_port(value: Any) -> int:
    """Numeric target port; named ports are not resolved and count as 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


class ServiceHandler(BaseHandler):
    """Collects services from the cache."""

    KIND = "Service"
    ENDPOINTS_KIND = "Endpoints"

    def __init__(self, client: Any = None) -> None:
        super().__init__(client)
        self.endpoints_informer: Informer | None = None

    def setup_informer(self, factory: InformerFactory, logger: Any, resync_period: Any) -> None:
        self.setup_base_informer(factory.informer(self.KIND), logger)
        self.endpoints_informer = factory.informer(self.ENDPOINTS_KIND)

    def collect(self, namespaces: Iterable[str]) -> list[ServiceData]:
        wanted = list(namespaces or ())
        list_time = datetime.now(timezone.utc)
        entries = []
        for service in self.objects_of_kind(self.KIND):
            namespace = (service.get("metadata") or {}).get("namespace", "")
            if not should_include_namespace(wanted, namespace):
                continue
            entry = self.create_log_entry(service)
            entry.timestamp = list_time
            entries.append(entry)
        return entries

    def create_log_entry(self, service: Mapping[str, Any]) -> ServiceData:
        meta = service.get("metadata") or {}
        spec = service.get("spec") or {}
        status = service.get("status") or {}
        service_type = spec.get("type", "")

        ports = [
            ServicePortData(
                name=port.get("name", ""),
                protocol=port.get("protocol", ""),
                port=port.get("port", 0),
                target_port=_target_port(port.get("targetPort")),
                node_port=port.get("nodePort", 0),
            )
            for port in spec.get("ports") or []
        ]

        external_ips = spec.get("externalIPs") or []
        ingress = (status.get("loadBalancer") or {}).get("ingress")
        load_balancer_ingress = []
        if service_type == "LoadBalancer" and ingress is not None:
            load_balancer_ingress = [
                LoadBalancerIngressData(ip=item.get("ip", ""), hostname=item.get("hostname", ""))
                for item in ingress
            ]

        client_ip = (spec.get("sessionAffinityConfig") or {}).get("clientIP") or {}
        timeout = client_ip.get("timeoutSeconds")

        return ServiceData(
            **vars(build_metadata(service, "service")),
            type=service_type,
            cluster_ip=spec.get("clusterIP", ""),
            external_ip=external_ips[0] if external_ips else "",
            load_balancer_ip=spec.get("loadBalancerIP", ""),
            ports=ports,
            selector=dict(spec.get("selector") or {}),
            endpoints_count=self.count_endpoints_for_service(
                meta.get("namespace", ""), meta.get("name", "")
            ),
            load_balancer_ingress=load_balancer_ingress,
            session_affinity=spec.get("sessionAffinity", ""),
            external_name=spec.get("externalName", ""),
            external_traffic_policy=spec.get("externalTrafficPolicy", ""),
            session_affinity_client_ip_timeout_seconds=0 if timeout is None else timeout,
            allocate_load_balancer_node_ports=spec.get("allocateLoadBalancerNodePorts"),
            load_balancer_class=spec.get("loadBalancerClass"),
            load_balancer_source_ranges=list(spec.get("loadBalancerSourceRanges") or []),
        )

    def count_endpoints_for_service(self, namespace: str, service_name: str) -> int:
        """Count addresses over all subsets of the service's endpoints object."""
        if self.endpoints_informer is None:
            return 0
        for endpoints in self.endpoints_informer.list():
            if not isinstance(endpoints, Mapping) or endpoints.get("kind") != self.ENDPOINTS_KIND:
                continue
            meta = endpoints.get("metadata") or {}
            if meta.get("namespace", "") == namespace and meta.get("name", "") == service_name:
                return sum(len(subset.get("addresses") or []) for subset in endpoints.get("subsets") or [])
        return 0