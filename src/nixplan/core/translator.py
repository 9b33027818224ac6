"""Translation of a validated topology into a deployment specification."""

from __future__ import annotations

from nixplan.config.logging import get_logger
from nixplan.config.models import PlannerConfig
from nixplan.core.nodes import DeploymentNode
from nixplan.core.ordering import deployment_order
from nixplan.core.schema import (
    DATABASE_PORTS,
    MESSAGE_BUS_PORTS,
    NATS_CLIENT_PORT,
    AgentNode,
    ConnectsToEdge,
    DatabaseNode,
    LoadBalancerNode,
    MessageBusNode,
    MessageBusType,
    MountsVolumeEdge,
    NodeKind,
    ResourceRequirements,
    ServiceNode,
    StorageNode,
)
from nixplan.core.spec import (
    AgentSpec,
    BackendSpec,
    DatabaseSpec,
    DependencyMap,
    HealthCheckSpec,
    LoadBalancerSpec,
    MessageBusSpec,
    MountSpec,
    NetworkConnection,
    NetworkTopology,
    NixDeploymentSpec,
    RateLimitSpec,
    ResourceSpec,
    ServiceSpec,
    StorageSpec,
    TopicSpec,
)
from nixplan.core.topology import Topology
from nixplan.core.validation import Validator

logger = get_logger(__name__)


def _resource_spec(resources: ResourceRequirements) -> ResourceSpec:
    return ResourceSpec(
        cpu_cores=resources.cpu_cores,
        memory_mb=resources.memory_mb,
        disk_gb=resources.disk_gb,
    )


class Translator:
    """
    Lowers a deployment topology into a NixDeploymentSpec.

    The topology is validated first; any DeploymentError propagates
    unchanged and no specification is produced.
    """

    def __init__(self, config: PlannerConfig | None = None) -> None:
        self._config = config or PlannerConfig()
        self._validator = Validator(self._config)

    def translate(self, topology: Topology) -> NixDeploymentSpec:
        """Validate, order and lower a topology."""
        self._validator.validate(topology)
        order = deployment_order(topology)

        services: list[ServiceSpec] = []
        databases: list[DatabaseSpec] = []
        agents: list[AgentSpec] = []
        message_buses: list[MessageBusSpec] = []
        load_balancers: list[LoadBalancerSpec] = []
        storage_volumes: list[StorageSpec] = []

        nats_url = self.find_nats_url(topology)

        for node_id in order:
            node = topology.get_node(node_id)
            schema = node.schema
            if isinstance(schema, ServiceNode):
                services.append(self.translate_service(node, topology))
            elif isinstance(schema, DatabaseNode):
                databases.append(self.translate_database(schema))
            elif isinstance(schema, AgentNode):
                agents.append(self.translate_agent(schema, nats_url))
            elif isinstance(schema, MessageBusNode):
                message_buses.append(self.translate_message_bus(schema))
            elif isinstance(schema, LoadBalancerNode):
                load_balancers.append(self.translate_load_balancer(schema, topology))
            elif isinstance(schema, StorageNode):
                storage_volumes.append(self.translate_storage(node, topology))

        spec = NixDeploymentSpec(
            services=services,
            databases=databases,
            agents=agents,
            message_buses=message_buses,
            load_balancers=load_balancers,
            storage_volumes=storage_volumes,
            dependencies=self.extract_dependencies(topology),
            network_topology=self.extract_network_topology(topology),
        )
        logger.info("topology translated", nodes=len(order), services=len(services))
        return spec

    def extract_services(self, topology: Topology) -> list[ServiceSpec]:
        """Lower every service node, in topology order, without validating."""
        return [
            self.translate_service(node, topology)
            for node in topology.nodes_of_kind(NodeKind.SERVICE)
        ]

    def extract_dependencies(self, topology: Topology) -> DependencyMap:
        dependencies: DependencyMap = {}
        for edge in topology.startup_edges():
            targets = dependencies.setdefault(edge.source, [])
            if edge.target not in targets:
                targets.append(edge.target)
        return dependencies

    def extract_network_topology(self, topology: Topology) -> NetworkTopology:
        connections = []
        for edge in topology.edges:
            schema = edge.schema
            if isinstance(schema, ConnectsToEdge):
                connections.append(
                    NetworkConnection(
                        from_=edge.source,
                        to=edge.target,
                        protocol=schema.protocol.value,
                        port=schema.port,
                        encrypted=schema.encrypted,
                    )
                )

        exposed_ports = {node.id: node.exposed_ports for node in topology if node.exposed_ports}
        return NetworkTopology(connections=connections, exposed_ports=exposed_ports)

    def translate_service(self, node: DeploymentNode, topology: Topology) -> ServiceSpec:
        schema = node.schema
        health_check = None
        if schema.health_check is not None:
            health_check = HealthCheckSpec(**schema.health_check.model_dump())

        return ServiceSpec(
            name=schema.name,
            command=schema.command,
            args=list(schema.args),
            environment=dict(schema.environment),
            port=schema.port,
            health_check=health_check,
            resources=_resource_spec(schema.resources),
            dependencies=topology.startup_dependencies(node.id),
        )

    def translate_database(self, schema: DatabaseNode) -> DatabaseSpec:
        ports = DATABASE_PORTS[schema.engine]
        return DatabaseSpec(
            name=schema.name,
            engine=schema.engine.value,
            version=schema.version,
            port=ports[0] if ports else 0,
            persistent=schema.persistent,
            backup_schedule=schema.backup_schedule,
            resources=_resource_spec(schema.resources),
        )

    def translate_agent(self, schema: AgentNode, nats_url: str) -> AgentSpec:
        rate_limit = None
        if schema.rate_limit is not None:
            rate_limit = RateLimitSpec(**schema.rate_limit.model_dump())

        return AgentSpec(
            name=schema.name,
            capabilities=list(schema.capabilities),
            subscriptions=list(schema.subscriptions),
            nats_url=nats_url,
            rate_limit=rate_limit,
            resources=_resource_spec(schema.resources),
        )

    def translate_message_bus(self, schema: MessageBusNode) -> MessageBusSpec:
        return MessageBusSpec(
            name=schema.name,
            bus_type=schema.bus_type.value,
            cluster_size=schema.cluster_size,
            persistence=schema.persistence,
            ports=list(MESSAGE_BUS_PORTS[schema.bus_type]),
            topics=[TopicSpec(**topic.model_dump()) for topic in schema.topics],
        )

    def translate_load_balancer(self, schema: LoadBalancerNode, topology: Topology) -> LoadBalancerSpec:
        return LoadBalancerSpec(
            name=schema.name,
            strategy=schema.strategy.value,
            weights=dict(schema.weights),
            backends=self.resolve_backends(schema, topology),
            health_check_interval=schema.health_check_interval,
        )

    def translate_storage(self, node: DeploymentNode, topology: Topology) -> StorageSpec:
        schema = node.schema
        mounts = []
        for edge in topology.edges_to(node.id):
            if isinstance(edge.schema, MountsVolumeEdge):
                mounts.append(
                    MountSpec(
                        service=edge.source,
                        path=edge.schema.mount_path,
                        read_only=edge.schema.read_only,
                    )
                )

        return StorageSpec(
            name=schema.name,
            storage_type=schema.storage_type.value,
            size=schema.size,
            access_mode=schema.access_mode.value,
            mount_paths=mounts,
        )

    def resolve_backends(self, schema: LoadBalancerNode, topology: Topology) -> list[BackendSpec]:
        """
        Resolve backend references to service endpoints.

        A backend is looked up by node id, then by name. Backends that do
        not resolve to a service are left out.
        """
        backends = []
        for backend in schema.backends:
            target = topology.get(backend)
            if target is None or not isinstance(target.schema, ServiceNode):
                logger.warning(
                    "dropping unresolved load balancer backend",
                    load_balancer=schema.name,
                    backend=backend,
                )
                continue
            port = target.schema.port
            backends.append(
                BackendSpec(
                    service=backend,
                    port=port if port is not None else self._config.default_backend_port,
                )
            )
        return backends

    def find_nats_url(self, topology: Topology) -> str:
        """URL of the NATS bus with the smallest node id, or the configured default."""
        for node in sorted(topology.nodes_of_kind(NodeKind.MESSAGE_BUS), key=lambda n: n.id):
            if node.schema.bus_type == MessageBusType.NATS:
                return f"nats://{node.name}:{NATS_CLIENT_PORT}"
        return self._config.default_nats_url


def translate_graph(topology: Topology, config: PlannerConfig | None = None) -> NixDeploymentSpec:
    """Translate a topology with the given (or default) configuration."""
    return Translator(config).translate(topology)
