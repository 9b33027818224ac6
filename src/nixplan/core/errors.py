"""Errors raised while validating or translating a deployment topology."""

from __future__ import annotations


class DeploymentError(Exception):
    """Base class for all deployment planning failures."""

    pass


class CyclicDependency(DeploymentError):
    """Startup dependencies form a cycle."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Cyclic dependency detected: {description}")


class MissingDependency(DeploymentError):
    """A required edge points at a node that is not in the topology."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Missing required dependency: {source} requires {target}")


class InvalidNodeConfig(DeploymentError):
    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Invalid node configuration: {description}")


class PortConflict(DeploymentError):
    """Two or more nodes expose the same port."""

    def __init__(self, port: int, services: list[str]) -> None:
        self.port = port
        self.services = list(services)
        super().__init__(
            f"Port conflict: {port} is used by multiple services: {', '.join(self.services)}"
        )


class ResourceLimitExceeded(DeploymentError):
    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Resource limit exceeded: {description}")


class InvalidEdge(DeploymentError):
    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Invalid edge: {description}")


class OrphanedNode(DeploymentError):
    def __init__(self, node: str) -> None:
        self.node = node
        super().__init__(f"Orphaned node: {node} has no connections")


class StorageConflict(DeploymentError):
    """More than one writer mounts the same path."""

    def __init__(self, path: str, services: list[str] | None = None) -> None:
        self.path = path
        self.services = list(services or [])
        super().__init__(f"Storage conflict: {path} is mounted by multiple services")
