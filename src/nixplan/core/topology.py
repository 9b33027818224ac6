"""Read-only topology snapshot of deployment nodes and edges."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Iterator, Protocol

import yaml
from pydantic import ValidationError

from nixplan.config.logging import get_logger
from nixplan.core.edges import DeploymentEdge
from nixplan.core.errors import InvalidEdge, InvalidNodeConfig
from nixplan.core.nodes import DeploymentNode
from nixplan.core.schema import NodeKind

logger = get_logger(__name__)


class TopologyProvider(Protocol):
    """Graph store that holds deployment payloads as JSON-like values."""

    def get_all_nodes(self) -> list[Mapping[str, Any]]:
        """Return records shaped like {"id": str, "data": {...}}."""
        ...

    def get_all_edges(self) -> list[Mapping[str, Any]]:
        """Return records shaped like {"from": str, "to": str, "data": {...}}."""
        ...

    def get_node(self, node_id: str) -> Mapping[str, Any] | None: ...

    def get_edges_from(self, node_id: str) -> list[Mapping[str, Any]]: ...

    def get_edges_to(self, node_id: str) -> list[Mapping[str, Any]]: ...


class Topology:
    """
    Deployment topology.

    Nodes are keyed by id; edges reference nodes by id and are directed.
    Payloads are decoded once, when the topology is built, so validation
    and translation only ever see typed variants.
    """

    def __init__(self, nodes: dict[str, DeploymentNode], edges: list[DeploymentEdge]) -> None:
        """
        Initialize topology.

        Args:
            nodes: Dictionary mapping node id -> DeploymentNode
            edges: Directed edges between node ids
        """
        self._nodes = dict(nodes)
        self._edges = list(edges)
        self._name_index: dict[str, DeploymentNode] = {}
        for node in self._nodes.values():
            self._name_index.setdefault(node.name, node)
        self._outgoing: dict[str, list[DeploymentEdge]] = {}
        self._incoming: dict[str, list[DeploymentEdge]] = {}
        for edge in self._edges:
            self._outgoing.setdefault(edge.source, []).append(edge)
            self._incoming.setdefault(edge.target, []).append(edge)

    @classmethod
    def load(cls, path: str | Path, *, strict: bool = False) -> Topology:
        """Load topology from YAML file."""
        path = Path(path)
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data, strict=strict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, strict: bool = False) -> Topology:
        """
        Create topology from dictionary.

        Expected shape::

            {"nodes": {"<id>": {"type": "service", ...}},
             "edges": [{"from": "<id>", "to": "<id>", "type": "depends_on", ...}]}
        """
        node_records = [
            {"id": node_id, "data": node_data}
            for node_id, node_data in (data.get("nodes") or {}).items()
        ]
        edge_records = []
        for edge_data in data.get("edges") or []:
            payload = {k: v for k, v in edge_data.items() if k not in ("from", "to")}
            edge_records.append({"from": edge_data.get("from"), "to": edge_data.get("to"), "data": payload})
        return cls._decode(node_records, edge_records, strict=strict)

    @classmethod
    def from_provider(cls, provider: TopologyProvider, *, strict: bool = False) -> Topology:
        """Snapshot a topology provider's current nodes and edges."""
        return cls._decode(provider.get_all_nodes(), provider.get_all_edges(), strict=strict)

    @classmethod
    def _decode(
        cls,
        node_records: Iterable[Mapping[str, Any]],
        edge_records: Iterable[Mapping[str, Any]],
        *,
        strict: bool,
    ) -> Topology:
        nodes: dict[str, DeploymentNode] = {}
        for record in node_records:
            node_id = str(record["id"])
            try:
                nodes[node_id] = DeploymentNode(node_id, record.get("data") or {})
            except ValidationError as e:
                if strict:
                    raise InvalidNodeConfig(f"Node '{node_id}' has no valid deployment payload") from e
                logger.warning("skipping undecodable node", node=node_id, errors=e.error_count())

        edges: list[DeploymentEdge] = []
        for record in edge_records:
            source, target = record.get("from"), record.get("to")
            if not source or not target:
                if strict:
                    raise InvalidEdge(f"Edge {source!r} -> {target!r} is missing an endpoint")
                logger.warning("skipping edge without endpoints", source=source, target=target)
                continue
            try:
                edges.append(DeploymentEdge(str(source), str(target), record.get("data") or {}))
            except ValidationError as e:
                if strict:
                    raise InvalidEdge(f"Edge {source} -> {target} has no valid deployment payload") from e
                logger.warning(
                    "skipping undecodable edge", source=source, target=target, errors=e.error_count()
                )

        logger.debug("topology decoded", nodes=len(nodes), edges=len(edges))
        return cls(nodes, edges)

    def get_node(self, node_id: str) -> DeploymentNode | None:
        """Get node by id (primary lookup)."""
        return self._nodes.get(node_id)

    def get_by_name(self, name: str) -> DeploymentNode | None:
        """Get node by its declared name. The first node declared wins."""
        return self._name_index.get(name)

    def get(self, identifier: str) -> DeploymentNode | None:
        """Get node by id or name."""
        if node := self.get_node(identifier):
            return node
        return self.get_by_name(identifier)

    @property
    def nodes(self) -> list[DeploymentNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[DeploymentEdge]:
        return list(self._edges)

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def edges_from(self, node_id: str) -> list[DeploymentEdge]:
        """Get all edges originating from a node."""
        return list(self._outgoing.get(node_id, []))

    def edges_to(self, node_id: str) -> list[DeploymentEdge]:
        """Get all edges targeting a node."""
        return list(self._incoming.get(node_id, []))

    def startup_edges(self) -> list[DeploymentEdge]:
        """Get all edges that constrain startup order."""
        return [e for e in self._edges if e.is_startup_dependency()]

    def startup_dependencies(self, node_id: str) -> list[str]:
        """Ids of the nodes that must start before the given node, each listed once."""
        targets = [e.target for e in self._outgoing.get(node_id, []) if e.is_startup_dependency()]
        return list(dict.fromkeys(targets))

    def nodes_of_kind(self, kind: NodeKind) -> list[DeploymentNode]:
        return [n for n in self._nodes.values() if n.is_kind(kind)]

    def to_dict(self) -> dict[str, Any]:
        """Return topology as a dictionary accepted by from_dict."""
        return {
            "nodes": {node_id: node.to_dict() for node_id, node in self._nodes.items()},
            "edges": [edge.to_dict() for edge in self._edges],
        }

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[DeploymentNode]:
        return iter(self._nodes.values())

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"Topology({len(self._nodes)} nodes, {len(self._edges)} edges)"
