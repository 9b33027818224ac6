"""Tests for topology module."""

import pytest

from nixplan.core.errors import InvalidEdge, InvalidNodeConfig
from nixplan.core.schema import NodeKind
from nixplan.core.topology import Topology


class FakeProvider:
    """In-memory topology provider holding JSON-like payloads."""

    def __init__(self, nodes, edges):
        self._nodes = nodes
        self._edges = edges

    def get_all_nodes(self):
        return list(self._nodes)

    def get_all_edges(self):
        return list(self._edges)

    def get_node(self, node_id):
        return next((n for n in self._nodes if n["id"] == node_id), None)

    def get_edges_from(self, node_id):
        return [e for e in self._edges if e["from"] == node_id]

    def get_edges_to(self, node_id):
        return [e for e in self._edges if e["to"] == node_id]


class TestTopology:
    """Tests for Topology class."""

    def test_from_dict(self, sample_topology_data):
        """Test topology creation from dictionary."""
        topology = Topology.from_dict(sample_topology_data)

        assert len(topology) == 6
        assert len(topology.edges) == 7
        assert "api" in topology
        assert "nonexistent" not in topology

    def test_get_node(self, sample_topology_data):
        topology = Topology.from_dict(sample_topology_data)

        node = topology.get_node("db")
        assert node is not None
        assert node.kind == NodeKind.DATABASE
        assert topology.get_node("missing") is None

    def test_get_by_id_or_name(self):
        """Lookup tries the id first, then the declared name."""
        topology = Topology.from_dict(
            {"nodes": {"svc-1": {"type": "service", "name": "api", "command": "run"}}}
        )

        assert topology.get("svc-1").name == "api"
        assert topology.get("api").id == "svc-1"
        assert topology.get("nope") is None

    def test_edges_from_and_to(self, sample_topology_data):
        topology = Topology.from_dict(sample_topology_data)

        assert len(topology.edges_from("api")) == 4
        assert {e.source for e in topology.edges_to("data")} == {"api", "lb"}
        assert topology.edges_from("data") == []

    def test_startup_dependencies(self, sample_topology_data):
        topology = Topology.from_dict(sample_topology_data)

        assert topology.startup_dependencies("api") == ["db", "bus"]
        assert topology.startup_dependencies("db") == []
        assert len(topology.startup_edges()) == 3

    def test_nodes_of_kind(self, sample_topology_data):
        topology = Topology.from_dict(sample_topology_data)

        assert [n.id for n in topology.nodes_of_kind(NodeKind.AGENT)] == ["worker"]
        assert topology.nodes_of_kind(NodeKind.STORAGE)[0].name == "data"

    def test_empty(self):
        topology = Topology.from_dict({})

        assert len(topology) == 0
        assert topology.edges == []

    def test_load_yaml(self, tmp_path):
        """Test loading topology from a YAML file."""
        path = tmp_path / "topology.yml"
        path.write_text(
            "nodes:\n"
            "  db:\n"
            "    type: database\n"
            "    name: db\n"
            "    engine: redis\n"
            "    version: '7'\n"
            "edges: []\n"
        )

        topology = Topology.load(path)
        assert topology.get_node("db").exposed_ports == [6379]

    def test_to_dict_round_trip(self, sample_topology_data):
        topology = Topology.from_dict(sample_topology_data)

        again = Topology.from_dict(topology.to_dict())
        assert again.node_ids() == topology.node_ids()
        assert [e.to_dict() for e in again.edges] == [e.to_dict() for e in topology.edges]


class TestDecodeBoundary:
    """Tests for payload decoding at ingestion."""

    def test_undecodable_node_skipped(self):
        topology = Topology.from_dict(
            {
                "nodes": {
                    "api": {"type": "service", "name": "api", "command": "run"},
                    "blob": {"type": "hologram", "name": "blob"},
                    "bare": None,
                }
            }
        )

        assert topology.node_ids() == ["api"]

    def test_undecodable_edge_skipped(self):
        topology = Topology.from_dict(
            {
                "nodes": {"a": {"type": "agent", "name": "a"}},
                "edges": [
                    {"from": "a", "to": "b", "type": "teleports_to"},
                    {"from": "a", "type": "depends_on"},
                ],
            }
        )

        assert topology.edges == []

    def test_strict_node(self):
        with pytest.raises(InvalidNodeConfig):
            Topology.from_dict({"nodes": {"blob": {"type": "hologram"}}}, strict=True)

    def test_strict_edge(self):
        with pytest.raises(InvalidEdge):
            Topology.from_dict(
                {"nodes": {}, "edges": [{"from": "a", "to": "b", "type": "teleports_to"}]},
                strict=True,
            )

    def test_from_provider(self):
        """Test snapshotting a provider that stores raw payloads."""
        provider = FakeProvider(
            nodes=[
                {"id": "db", "data": {"type": "database", "name": "db", "engine": "mysql", "version": "8"}},
                {"id": "api", "data": {"type": "service", "name": "api", "command": "run"}},
                {"id": "legacy", "data": {"kind": "vm"}},
            ],
            edges=[
                {"from": "api", "to": "db", "data": {"type": "depends_on", "required": True}},
                {"from": "api", "to": "legacy", "data": {"weird": True}},
            ],
        )

        topology = Topology.from_provider(provider)
        assert topology.node_ids() == ["db", "api"]
        assert len(topology.edges) == 1
        assert topology.startup_dependencies("api") == ["db"]
