"""Deployment nodes and their derived properties."""

from __future__ import annotations

from typing import Any

from nixplan.core.schema import (
    DATABASE_PORTS,
    MESSAGE_BUS_PORTS,
    AgentNode,
    DatabaseNode,
    LoadBalancerNode,
    MessageBusNode,
    NodeKind,
    NodeSchema,
    ResourceRequirements,
    ServiceNode,
    StorageNode,
    node_adapter,
)


class DeploymentNode:
    """
    Represents a deployable unit in the topology.

    The id is the node's identity within the topology, passed separately
    from the payload since it is the key under which the node is stored.
    """

    def __init__(self, node_id: str, data: dict[str, Any]) -> None:
        """
        Initialize a node.

        Args:
            node_id: Identifier of the node in the topology
            data: Tagged payload, e.g. {"type": "service", "name": ..., ...}

        Raises:
            pydantic.ValidationError: if the payload matches no known variant
        """
        self._id = node_id
        self._schema: NodeSchema = node_adapter.validate_python(data)

    @classmethod
    def from_schema(cls, node_id: str, schema: NodeSchema) -> DeploymentNode:
        """Wrap an already-built variant without re-decoding it."""
        node = cls.__new__(cls)
        node._id = node_id
        node._schema = schema
        return node

    @property
    def id(self) -> str:
        return self._id

    @property
    def schema(self) -> NodeSchema:
        """The typed variant payload."""
        return self._schema

    @property
    def kind(self) -> NodeKind:
        return NodeKind(self._schema.type)

    @property
    def name(self) -> str:
        return self._schema.name

    @property
    def resources(self) -> ResourceRequirements | None:
        """Resource requirements, for the variants that carry them."""
        if isinstance(self._schema, (ServiceNode, AgentNode, DatabaseNode)):
            return self._schema.resources
        return None

    @property
    def requires_persistence(self) -> bool:
        if isinstance(self._schema, DatabaseNode):
            return self._schema.persistent
        if isinstance(self._schema, MessageBusNode):
            return self._schema.persistence
        return isinstance(self._schema, StorageNode)

    @property
    def exposed_ports(self) -> list[int]:
        """Ports this node listens on."""
        schema = self._schema
        if isinstance(schema, ServiceNode):
            return [schema.port] if schema.port is not None else []
        if isinstance(schema, DatabaseNode):
            return list(DATABASE_PORTS[schema.engine])
        if isinstance(schema, MessageBusNode):
            return list(MESSAGE_BUS_PORTS[schema.bus_type])
        return []

    def is_kind(self, kind: NodeKind) -> bool:
        return self._schema.type == kind.value

    @property
    def is_service(self) -> bool:
        return isinstance(self._schema, ServiceNode)

    @property
    def is_load_balancer(self) -> bool:
        return isinstance(self._schema, LoadBalancerNode)

    def to_dict(self) -> dict[str, Any]:
        """Return the node payload as a JSON-compatible dictionary."""
        return self._schema.model_dump(mode="json")

    def __repr__(self) -> str:
        return f"DeploymentNode({self._id}, {self.kind.value}: {self.name})"


def node_payload(schema: NodeSchema) -> dict[str, Any]:
    """Encode a node variant as the JSON-like payload a topology provider stores."""
    return schema.model_dump(mode="json")
