"""Deployment edges between topology nodes."""

from __future__ import annotations

from typing import Any

from nixplan.core.schema import (
    ConnectsToEdge,
    DataFlowEdge,
    DependencyType,
    DependsOnEdge,
    EdgeKind,
    EdgeSchema,
    LoadBalancesEdge,
    MountsVolumeEdge,
    PublishesToEdge,
    SubscribesToEdge,
    edge_adapter,
)


class DeploymentEdge:
    """Represents a directed relationship from one node to another."""

    def __init__(self, source: str, target: str, data: dict[str, Any]) -> None:
        self._source = source
        self._target = target
        self._schema: EdgeSchema = edge_adapter.validate_python(data)

    @classmethod
    def from_schema(cls, source: str, target: str, schema: EdgeSchema) -> DeploymentEdge:
        edge = cls.__new__(cls)
        edge._source = source
        edge._target = target
        edge._schema = schema
        return edge

    @property
    def source(self) -> str:
        """Id of the node the edge starts from."""
        return self._source

    @property
    def target(self) -> str:
        """Id of the node the edge points at."""
        return self._target

    @property
    def schema(self) -> EdgeSchema:
        return self._schema

    @property
    def kind(self) -> EdgeKind:
        return EdgeKind(self._schema.type)

    def is_startup_dependency(self) -> bool:
        """Only required depends_on edges constrain startup order."""
        return isinstance(self._schema, DependsOnEdge) and self._schema.required

    def requires_network(self) -> bool:
        return isinstance(
            self._schema, (ConnectsToEdge, PublishesToEdge, SubscribesToEdge, DataFlowEdge)
        )

    def dependency_type(self) -> DependencyType:
        schema = self._schema
        if isinstance(schema, DependsOnEdge):
            return DependencyType.HARD if schema.required else DependencyType.SOFT
        if isinstance(schema, (ConnectsToEdge, DataFlowEdge)):
            return DependencyType.RUNTIME
        return DependencyType.SOFT

    def requires_encryption(self) -> bool:
        return isinstance(self._schema, ConnectsToEdge) and self._schema.encrypted

    def required_ports(self) -> list[int]:
        if isinstance(self._schema, ConnectsToEdge):
            return [self._schema.port]
        return []

    @property
    def is_load_balances(self) -> bool:
        return isinstance(self._schema, LoadBalancesEdge)

    @property
    def is_writable_mount(self) -> bool:
        return isinstance(self._schema, MountsVolumeEdge) and not self._schema.read_only

    def to_dict(self) -> dict[str, Any]:
        """Return the edge as a flat dictionary (from, to, payload fields)."""
        return {"from": self._source, "to": self._target, **self._schema.model_dump(mode="json")}

    def __repr__(self) -> str:
        return f"DeploymentEdge({self._source} -[{self.kind.value}]-> {self._target})"


def edge_payload(schema: EdgeSchema) -> dict[str, Any]:
    """Encode an edge variant as the JSON-like payload a topology provider stores."""
    return schema.model_dump(mode="json")
