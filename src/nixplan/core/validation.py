"""Validation rules for deployment topologies."""

from __future__ import annotations

from collections import defaultdict

from nixplan.config.logging import get_logger
from nixplan.config.models import PlannerConfig
from nixplan.core.errors import (
    CyclicDependency,
    InvalidEdge,
    InvalidNodeConfig,
    MissingDependency,
    OrphanedNode,
    PortConflict,
    ResourceLimitExceeded,
    StorageConflict,
)
from nixplan.core.schema import (
    DatabaseNode,
    DependsOnEdge,
    LoadBalancerNode,
    MessageBusNode,
    MountsVolumeEdge,
    ServiceNode,
)
from nixplan.core.topology import Topology

logger = get_logger(__name__)


class Validator:
    """
    Pass/fail gate for a deployment topology.

    Runs the core checks in a fixed order and raises the first
    DeploymentError found. Checks enabled through PlannerConfig run
    after the core ones.
    """

    def __init__(self, config: PlannerConfig | None = None) -> None:
        self._config = config or PlannerConfig()

    @property
    def config(self) -> PlannerConfig:
        return self._config

    def validate(self, topology: Topology) -> None:
        """Validate a topology, raising DeploymentError on the first violation."""
        self.check_cycles(topology)
        self.check_dependencies(topology)
        self.check_port_conflicts(topology)
        self.check_resource_limits(topology)
        self.check_storage_conflicts(topology)
        self.check_node_configurations(topology)

        if self._config.strict_backends:
            self.check_load_balancer_backends(topology)
        if self._config.reject_orphans:
            self.check_orphans(topology)

        logger.debug("topology valid", nodes=len(topology), edges=len(topology.edges))

    def check_cycles(self, topology: Topology) -> None:
        """Depth-first search over startup edges, tracking the nodes on the current path."""
        visited: set[str] = set()

        for root in sorted(topology.node_ids()):
            if root in visited:
                continue
            visited.add(root)
            path = [root]
            on_path = {root}
            stack = [iter(topology.startup_dependencies(root))]

            while stack:
                target = next(stack[-1], None)
                if target is None:
                    stack.pop()
                    on_path.discard(path.pop())
                    continue
                if target in on_path:
                    cycle = path[path.index(target):] + [target]
                    raise CyclicDependency(" -> ".join(cycle))
                if target in visited or target not in topology:
                    continue
                visited.add(target)
                path.append(target)
                on_path.add(target)
                stack.append(iter(topology.startup_dependencies(target)))

    def check_dependencies(self, topology: Topology) -> None:
        """Every edge starts at a node; required dependencies and load balancer targets must exist."""
        for edge in topology.edges:
            if edge.source not in topology:
                raise InvalidEdge(
                    f"Edge {edge.source} -> {edge.target} starts at an unknown node '{edge.source}'"
                )
            schema = edge.schema
            required = isinstance(schema, DependsOnEdge) and schema.required
            if (required or edge.is_load_balances) and edge.target not in topology:
                raise MissingDependency(edge.source, edge.target)

    def check_port_conflicts(self, topology: Topology) -> None:
        port_usage: dict[int, list[str]] = defaultdict(list)
        for node in topology:
            for port in node.exposed_ports:
                port_usage[port].append(node.name)

        for port in sorted(port_usage):
            services = port_usage[port]
            if len(services) > 1:
                raise PortConflict(port, services)

    def check_resource_limits(self, topology: Topology) -> None:
        total_cpu = 0.0
        total_memory_mb = 0
        total_disk_gb = 0

        for node in topology:
            resources = node.resources
            if resources is None:
                continue
            total_cpu += resources.cpu_cores or 0.0
            total_memory_mb += resources.memory_mb or 0
            total_disk_gb += resources.disk_gb or 0

        limits = self._config.limits
        if total_cpu > limits.max_cpu_cores:
            raise ResourceLimitExceeded(
                f"Total CPU cores ({total_cpu:g}) exceeds limit ({limits.max_cpu_cores:g})"
            )
        if total_memory_mb > limits.max_memory_mb:
            raise ResourceLimitExceeded(
                f"Total memory ({total_memory_mb}MB) exceeds limit ({limits.max_memory_mb}MB)"
            )
        if total_disk_gb > limits.max_disk_gb:
            raise ResourceLimitExceeded(
                f"Total disk ({total_disk_gb}GB) exceeds limit ({limits.max_disk_gb}GB)"
            )

    def check_storage_conflicts(self, topology: Topology) -> None:
        """At most one node may mount a given path writable."""
        writers: dict[str, list[str]] = defaultdict(list)
        for edge in topology.edges:
            schema = edge.schema
            if isinstance(schema, MountsVolumeEdge) and not schema.read_only:
                if edge.source not in writers[schema.mount_path]:
                    writers[schema.mount_path].append(edge.source)

        for path, services in writers.items():
            if len(services) > 1:
                raise StorageConflict(path, services)

    def check_node_configurations(self, topology: Topology) -> None:
        for node in topology:
            schema = node.schema
            if not schema.name:
                raise InvalidNodeConfig(f"Node '{node.id}' has an empty name")

            if isinstance(schema, ServiceNode) and not schema.command:
                raise InvalidNodeConfig(f"Service '{schema.name}' has empty command")
            if isinstance(schema, DatabaseNode) and not schema.version:
                raise InvalidNodeConfig(f"Database '{schema.name}' has no version specified")
            if isinstance(schema, MessageBusNode) and schema.cluster_size < 1:
                raise InvalidNodeConfig(
                    f"Message bus '{schema.name}' cluster size must be at least 1"
                )
            if isinstance(schema, LoadBalancerNode) and not schema.backends:
                raise InvalidNodeConfig(
                    f"Load balancer '{schema.name}' must have at least one backend"
                )

    def check_load_balancer_backends(self, topology: Topology) -> None:
        """Every backend named by a load balancer must be a service node."""
        for node in topology:
            schema = node.schema
            if not isinstance(schema, LoadBalancerNode):
                continue
            for backend in schema.backends:
                target = topology.get(backend)
                if target is None or not target.is_service:
                    raise InvalidEdge(
                        f"Load balancer '{schema.name}' backend '{backend}' is not a service"
                    )

    def check_orphans(self, topology: Topology) -> None:
        if len(topology) < 2:
            return
        connected: set[str] = set()
        for edge in topology.edges:
            connected.add(edge.source)
            connected.add(edge.target)
        for node_id in topology.node_ids():
            if node_id not in connected:
                raise OrphanedNode(node_id)


def validate_topology(topology: Topology, config: PlannerConfig | None = None) -> None:
    """Validate a topology with the given (or default) configuration."""
    Validator(config).validate(topology)
