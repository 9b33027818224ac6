"""Pydantic schemas for deployment node and edge payloads."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


# --- Node Schemas ---


class NodeKind(str, Enum):
    """Discriminant for deployment node payloads."""

    SERVICE = "service"
    AGENT = "agent"
    DATABASE = "database"
    MESSAGE_BUS = "message_bus"
    LOAD_BALANCER = "load_balancer"
    STORAGE = "storage"


class DatabaseEngine(str, Enum):
    """Supported database engines."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MONGODB = "mongodb"
    REDIS = "redis"
    SQLITE = "sqlite"


class MessageBusType(str, Enum):
    """Supported message bus implementations."""

    NATS = "nats"
    KAFKA = "kafka"
    RABBITMQ = "rabbitmq"
    REDIS = "redis"


class LoadBalancingStrategy(str, Enum):
    """Load balancing strategies."""

    ROUND_ROBIN = "round_robin"
    LEAST_CONNECTIONS = "least_connections"
    IP_HASH = "ip_hash"
    RANDOM = "random"
    WEIGHTED = "weighted"


class StorageType(str, Enum):
    """Storage backends."""

    LOCAL_DISK = "local_disk"
    NETWORK_FS = "network_fs"
    OBJECT_STORE = "object_store"
    BLOCK_STORAGE = "block_storage"


class AccessMode(str, Enum):
    """Storage access modes."""

    READ_WRITE_ONCE = "read_write_once"
    READ_ONLY_MANY = "read_only_many"
    READ_WRITE_MANY = "read_write_many"


# Well-known ports. SQLite has no network port.
DATABASE_PORTS: dict[DatabaseEngine, list[int]] = {
    DatabaseEngine.POSTGRESQL: [5432],
    DatabaseEngine.MYSQL: [3306],
    DatabaseEngine.MONGODB: [27017],
    DatabaseEngine.REDIS: [6379],
    DatabaseEngine.SQLITE: [],
}

MESSAGE_BUS_PORTS: dict[MessageBusType, list[int]] = {
    MessageBusType.NATS: [4222, 6222, 8222],
    MessageBusType.KAFKA: [9092],
    MessageBusType.RABBITMQ: [5672, 15672],
    MessageBusType.REDIS: [6379],
}

NATS_CLIENT_PORT = 4222


class ResourceRequirements(BaseModel):
    """Resource footprint of a node. Missing values count as zero."""

    cpu_cores: float | None = None
    memory_mb: int | None = None
    disk_gb: int | None = None


class HealthCheck(BaseModel):
    """Health check configuration for a service."""

    endpoint: str
    interval_seconds: int = 30
    timeout_seconds: int = 5
    retries: int = 3


class RateLimit(BaseModel):
    """Rate limiting configuration for an agent."""

    requests_per_second: int
    burst_size: int


class TopicConfig(BaseModel):
    """Topic configuration for message buses."""

    name: str
    partitions: int | None = None
    replication_factor: int | None = None
    retention_hours: int | None = None


class ServiceNode(BaseModel):
    """A long-running service unit."""

    type: Literal["service"] = "service"
    name: str
    command: str
    args: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)
    port: int | None = None
    health_check: HealthCheck | None = None
    resources: ResourceRequirements = Field(default_factory=ResourceRequirements)


class AgentNode(BaseModel):
    """An agent that processes tasks from the message bus."""

    type: Literal["agent"] = "agent"
    name: str
    capabilities: list[str] = Field(default_factory=list)
    subscriptions: list[str] = Field(default_factory=list)
    rate_limit: RateLimit | None = None
    resources: ResourceRequirements = Field(default_factory=ResourceRequirements)


class DatabaseNode(BaseModel):
    """A database server."""

    type: Literal["database"] = "database"
    name: str
    engine: DatabaseEngine
    version: str
    persistent: bool = True
    backup_schedule: str | None = None
    resources: ResourceRequirements = Field(default_factory=ResourceRequirements)


class MessageBusNode(BaseModel):
    """A message bus for inter-service communication."""

    type: Literal["message_bus"] = "message_bus"
    name: str
    bus_type: MessageBusType
    # Not constrained here: a zero size is reported by validation.
    cluster_size: int = 1
    persistence: bool = False
    topics: list[TopicConfig] = Field(default_factory=list)


class LoadBalancerNode(BaseModel):
    """A load balancer in front of one or more services."""

    type: Literal["load_balancer"] = "load_balancer"
    name: str
    strategy: LoadBalancingStrategy = LoadBalancingStrategy.ROUND_ROBIN
    weights: dict[str, int] = Field(default_factory=dict)  # For weighted strategy
    health_check_interval: int = 30  # Seconds
    backends: list[str] = Field(default_factory=list)  # Service node ids or names


class StorageNode(BaseModel):
    """A storage volume."""

    type: Literal["storage"] = "storage"
    name: str
    storage_type: StorageType = StorageType.LOCAL_DISK
    size: str  # "10Gi", "1Ti", etc.
    mount_path: str
    access_mode: AccessMode = AccessMode.READ_WRITE_ONCE


NodeSchema = Annotated[
    Union[ServiceNode, AgentNode, DatabaseNode, MessageBusNode, LoadBalancerNode, StorageNode],
    Field(discriminator="type"),
]

node_adapter: TypeAdapter[NodeSchema] = TypeAdapter(NodeSchema)


# --- Edge Schemas ---


class EdgeKind(str, Enum):
    """Discriminant for deployment edge payloads."""

    DEPENDS_ON = "depends_on"
    CONNECTS_TO = "connects_to"
    DATA_FLOW = "data_flow"
    LOAD_BALANCES = "load_balances"
    MOUNTS_VOLUME = "mounts_volume"
    PUBLISHES_TO = "publishes_to"
    SUBSCRIBES_TO = "subscribes_to"
    MANAGES = "manages"


class DependencyType(str, Enum):
    """How strongly an edge binds its source to its target."""

    HARD = "hard"  # Target must exist and be started first
    SOFT = "soft"  # Source can start without the target
    RUNTIME = "runtime"  # Only needed during operation


class NetworkProtocol(str, Enum):
    """Network protocols for connections."""

    HTTP = "http"
    HTTPS = "https"
    TCP = "tcp"
    UDP = "udp"
    GRPC = "grpc"
    WEBSOCKET = "websocket"


class DataFlowDirection(str, Enum):
    PUSH = "push"
    PULL = "pull"
    BIDIRECTIONAL = "bidirectional"


class DataFormat(str, Enum):
    JSON = "json"
    PROTOBUF = "protobuf"
    MESSAGEPACK = "messagepack"
    AVRO = "avro"
    XML = "xml"
    BINARY = "binary"


class ManagementPermission(str, Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    CONFIGURE = "configure"
    MONITOR = "monitor"
    SCALE = "scale"
    DEPLOY = "deploy"


class DataVolume(BaseModel):
    """Data volume estimate for a data flow."""

    messages_per_second: float
    average_size_bytes: int
    peak_multiplier: float = 1.0


class DependsOnEdge(BaseModel):
    """Startup dependency: the target must be running before the source."""

    type: Literal["depends_on"] = "depends_on"
    required: bool = True
    startup_delay: float | None = None  # Seconds


class ConnectsToEdge(BaseModel):
    """Runtime network connection between nodes."""

    type: Literal["connects_to"] = "connects_to"
    protocol: NetworkProtocol = NetworkProtocol.TCP
    port: int
    encrypted: bool = False


class DataFlowEdge(BaseModel):
    type: Literal["data_flow"] = "data_flow"
    direction: DataFlowDirection = DataFlowDirection.PUSH
    format: DataFormat = DataFormat.JSON
    volume: DataVolume | None = None


class LoadBalancesEdge(BaseModel):
    """Load balancer to backend relationship."""

    type: Literal["load_balances"] = "load_balances"
    weight: int | None = None
    health_check: bool = True


class MountsVolumeEdge(BaseModel):
    """Consumer node to storage node mount."""

    type: Literal["mounts_volume"] = "mounts_volume"
    mount_path: str
    read_only: bool = False


class PublishesToEdge(BaseModel):
    type: Literal["publishes_to"] = "publishes_to"
    topic: str
    rate_limit: int | None = None


class SubscribesToEdge(BaseModel):
    type: Literal["subscribes_to"] = "subscribes_to"
    topic: str
    consumer_group: str | None = None


class ManagesEdge(BaseModel):
    type: Literal["manages"] = "manages"
    permissions: list[ManagementPermission] = Field(default_factory=list)


EdgeSchema = Annotated[
    Union[
        DependsOnEdge,
        ConnectsToEdge,
        DataFlowEdge,
        LoadBalancesEdge,
        MountsVolumeEdge,
        PublishesToEdge,
        SubscribesToEdge,
        ManagesEdge,
    ],
    Field(discriminator="type"),
]

edge_adapter: TypeAdapter[EdgeSchema] = TypeAdapter(EdgeSchema)
