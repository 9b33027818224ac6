"""Startup ordering of topology nodes."""

from __future__ import annotations

import heapq

from nixplan.core.errors import CyclicDependency
from nixplan.core.topology import Topology


def deployment_order(topology: Topology) -> list[str]:
    """
    Return node ids in an order where every node follows its startup dependencies.

    Kahn's algorithm over required depends_on edges. A node is ready once
    all of its dependencies have been placed; ready nodes are taken in
    lexicographic id order. Edges with an endpoint outside the topology
    are ignored.

    Raises:
        CyclicDependency: if some nodes can never become ready
    """
    pending: dict[str, int] = {node_id: 0 for node_id in topology.node_ids()}
    dependents: dict[str, list[str]] = {}

    for edge in topology.startup_edges():
        if edge.source not in pending or edge.target not in pending:
            continue
        pending[edge.source] += 1
        dependents.setdefault(edge.target, []).append(edge.source)

    ready = [node_id for node_id, count in pending.items() if count == 0]
    heapq.heapify(ready)
    order: list[str] = []

    while ready:
        node_id = heapq.heappop(ready)
        order.append(node_id)
        for dependent in dependents.get(node_id, []):
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) != len(pending):
        stuck = sorted(node_id for node_id, count in pending.items() if count > 0)
        raise CyclicDependency(
            "Cannot determine deployment order due to circular dependencies "
            f"among: {', '.join(stuck)}"
        )

    return order
