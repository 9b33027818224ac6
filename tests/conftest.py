"""Shared fixtures for nixplan tests."""

import pytest


@pytest.fixture
def sample_topology_data():
    """A small deployable topology.

    api depends on db and bus; worker is an agent on the NATS bus;
    lb balances api; api and backup mount the data volume.
    """
    return {
        "nodes": {
            "db": {
                "type": "database",
                "name": "db",
                "engine": "postgresql",
                "version": "16",
                "persistent": True,
                "resources": {"cpu_cores": 2, "memory_mb": 4096, "disk_gb": 100},
            },
            "bus": {
                "type": "message_bus",
                "name": "bus",
                "bus_type": "nats",
                "cluster_size": 3,
                "topics": [{"name": "jobs", "partitions": 4}],
            },
            "api": {
                "type": "service",
                "name": "api",
                "command": "/usr/bin/api",
                "args": ["serve"],
                "environment": {"DATABASE_URL": "postgresql://db:5432/app"},
                "port": 8080,
                "resources": {"cpu_cores": 1.5, "memory_mb": 512},
            },
            "worker": {
                "type": "agent",
                "name": "worker",
                "capabilities": ["summarize"],
                "subscriptions": ["jobs"],
                "rate_limit": {"requests_per_second": 10, "burst_size": 20},
            },
            "lb": {
                "type": "load_balancer",
                "name": "lb",
                "strategy": "least_connections",
                "health_check_interval": 15,
                "backends": ["api"],
            },
            "data": {
                "type": "storage",
                "name": "data",
                "storage_type": "block_storage",
                "size": "50Gi",
                "mount_path": "/data",
            },
        },
        "edges": [
            {"from": "api", "to": "db", "type": "depends_on", "required": True},
            {"from": "api", "to": "bus", "type": "depends_on", "required": True},
            {"from": "worker", "to": "bus", "type": "depends_on", "required": True},
            {"from": "lb", "to": "api", "type": "load_balances"},
            {"from": "api", "to": "db", "type": "connects_to", "protocol": "tcp", "port": 5432, "encrypted": True},
            {"from": "api", "to": "data", "type": "mounts_volume", "mount_path": "/data"},
            {"from": "lb", "to": "data", "type": "mounts_volume", "mount_path": "/data", "read_only": True},
        ],
    }
