"""Tests for ordering module."""

import pytest

from nixplan.core.errors import CyclicDependency
from nixplan.core.ordering import deployment_order
from nixplan.core.topology import Topology


def service(name):
    return {"type": "service", "name": name, "command": "run"}


def depends(source, target, required=True):
    return {"from": source, "to": target, "type": "depends_on", "required": required}


class TestDeploymentOrder:
    """Tests for deployment_order."""

    def test_dependency_first(self):
        """api depends on db, so db starts first."""
        topology = Topology.from_dict(
            {
                "nodes": {
                    "db": {"type": "database", "name": "db", "engine": "postgresql", "version": "16"},
                    "api": {"type": "service", "name": "api", "command": "run", "port": 8080},
                },
                "edges": [depends("api", "db")],
            }
        )

        assert deployment_order(topology) == ["db", "api"]

    def test_empty(self):
        assert deployment_order(Topology.from_dict({})) == []

    def test_ties_broken_by_id(self):
        """Independent nodes come out in lexicographic order."""
        topology = Topology.from_dict({"nodes": {name: service(name) for name in ["zeta", "alpha", "mid"]}})

        assert deployment_order(topology) == ["alpha", "mid", "zeta"]

    def test_ready_nodes_interleave_by_id(self):
        """A node freed by its dependency competes with the others by id."""
        topology = Topology.from_dict(
            {
                "nodes": {name: service(name) for name in ["a", "b", "c"]},
                "edges": [depends("a", "c")],
            }
        )

        assert deployment_order(topology) == ["b", "c", "a"]

    def test_diamond(self):
        topology = Topology.from_dict(
            {
                "nodes": {name: service(name) for name in ["top", "left", "right", "base"]},
                "edges": [
                    depends("top", "left"),
                    depends("top", "right"),
                    depends("left", "base"),
                    depends("right", "base"),
                ],
            }
        )

        assert deployment_order(topology) == ["base", "left", "right", "top"]

    def test_cycle(self):
        topology = Topology.from_dict(
            {
                "nodes": {"a": service("a"), "b": service("b"), "c": service("c")},
                "edges": [depends("a", "b"), depends("b", "a")],
            }
        )

        with pytest.raises(CyclicDependency) as exc_info:
            deployment_order(topology)
        assert "a, b" in str(exc_info.value)

    def test_optional_dependency_does_not_order(self):
        topology = Topology.from_dict(
            {
                "nodes": {"a": service("a"), "b": service("b")},
                "edges": [depends("a", "b", required=False), depends("b", "a", required=False)],
            }
        )

        assert deployment_order(topology) == ["a", "b"]

    def test_non_startup_edges_ignored(self):
        topology = Topology.from_dict(
            {
                "nodes": {"a": service("a"), "b": service("b")},
                "edges": [{"from": "a", "to": "b", "type": "connects_to", "port": 80}],
            }
        )

        assert deployment_order(topology) == ["a", "b"]

    def test_dangling_edge_ignored(self):
        """Standalone ordering tolerates edges to unknown nodes."""
        topology = Topology.from_dict({"nodes": {"a": service("a")}, "edges": [depends("a", "ghost")]})

        assert deployment_order(topology) == ["a"]

    def test_acyclicity_and_completeness(self, sample_topology_data):
        """Every startup edge points backwards in the order; each node appears once."""
        topology = Topology.from_dict(sample_topology_data)

        order = deployment_order(topology)
        position = {node_id: i for i, node_id in enumerate(order)}

        assert sorted(order) == sorted(topology.node_ids())
        assert len(set(order)) == len(order)
        for edge in topology.startup_edges():
            assert position[edge.target] < position[edge.source]
