"""Deployment specification produced by the translator."""

from __future__ import annotations

import json
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

# Node id -> ids of the nodes it requires at startup.
DependencyMap = dict[str, list[str]]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ResourceSpec(_Frozen):
    cpu_cores: float | None = None
    memory_mb: int | None = None
    disk_gb: int | None = None


class HealthCheckSpec(_Frozen):
    endpoint: str
    interval_seconds: int
    timeout_seconds: int
    retries: int


class RateLimitSpec(_Frozen):
    requests_per_second: int
    burst_size: int


class ServiceSpec(_Frozen):
    """Service specification."""

    name: str
    command: str
    args: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)
    port: int | None = None
    health_check: HealthCheckSpec | None = None
    resources: ResourceSpec | None = None
    dependencies: list[str] = Field(default_factory=list)


class DatabaseSpec(_Frozen):
    """Database specification. Port 0 means no network port."""

    name: str
    engine: str
    version: str
    port: int
    persistent: bool
    backup_schedule: str | None = None
    resources: ResourceSpec | None = None


class AgentSpec(_Frozen):
    name: str
    capabilities: list[str] = Field(default_factory=list)
    subscriptions: list[str] = Field(default_factory=list)
    nats_url: str
    rate_limit: RateLimitSpec | None = None
    resources: ResourceSpec | None = None


class TopicSpec(_Frozen):
    name: str
    partitions: int | None = None
    replication_factor: int | None = None
    retention_hours: int | None = None


class MessageBusSpec(_Frozen):
    name: str
    bus_type: str
    cluster_size: int
    persistence: bool
    ports: list[int] = Field(default_factory=list)
    topics: list[TopicSpec] = Field(default_factory=list)


class BackendSpec(_Frozen):
    """Backend specification for load balancers."""

    service: str
    port: int
    weight: int | None = None


class LoadBalancerSpec(_Frozen):
    name: str
    strategy: str
    weights: dict[str, int] = Field(default_factory=dict)
    backends: list[BackendSpec] = Field(default_factory=list)
    health_check_interval: int


class MountSpec(_Frozen):
    service: str
    path: str
    read_only: bool


class StorageSpec(_Frozen):
    name: str
    storage_type: str
    size: str
    access_mode: str
    mount_paths: list[MountSpec] = Field(default_factory=list)


class NetworkConnection(_Frozen):
    """Network connection between two nodes."""

    from_: str = Field(alias="from")
    to: str
    protocol: str
    port: int
    encrypted: bool

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class NetworkTopology(_Frozen):
    connections: list[NetworkConnection] = Field(default_factory=list)
    exposed_ports: dict[str, list[int]] = Field(default_factory=dict)


class NixDeploymentSpec(_Frozen):
    """
    Complete deployment specification.

    Built once per successful translation. Fragments appear in
    deployment order within each collection.
    """

    services: list[ServiceSpec] = Field(default_factory=list)
    databases: list[DatabaseSpec] = Field(default_factory=list)
    agents: list[AgentSpec] = Field(default_factory=list)
    message_buses: list[MessageBusSpec] = Field(default_factory=list)
    load_balancers: list[LoadBalancerSpec] = Field(default_factory=list)
    storage_volumes: list[StorageSpec] = Field(default_factory=list)
    dependencies: DependencyMap = Field(default_factory=dict)
    network_topology: NetworkTopology = Field(default_factory=NetworkTopology)

    def is_empty(self) -> bool:
        return not (
            self.services
            or self.databases
            or self.agents
            or self.message_buses
            or self.load_balancers
            or self.storage_volumes
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
