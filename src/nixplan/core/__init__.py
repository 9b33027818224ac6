"""Core domain models for deployment planning."""

from nixplan.core.edges import DeploymentEdge
from nixplan.core.errors import (
    CyclicDependency,
    DeploymentError,
    InvalidEdge,
    InvalidNodeConfig,
    MissingDependency,
    OrphanedNode,
    PortConflict,
    ResourceLimitExceeded,
    StorageConflict,
)
from nixplan.core.nodes import DeploymentNode
from nixplan.core.ordering import deployment_order
from nixplan.core.spec import NixDeploymentSpec
from nixplan.core.topology import Topology, TopologyProvider
from nixplan.core.translator import Translator, translate_graph
from nixplan.core.validation import Validator, validate_topology

__all__ = [
    "CyclicDependency",
    "DeploymentEdge",
    "DeploymentError",
    "DeploymentNode",
    "InvalidEdge",
    "InvalidNodeConfig",
    "MissingDependency",
    "NixDeploymentSpec",
    "OrphanedNode",
    "PortConflict",
    "ResourceLimitExceeded",
    "StorageConflict",
    "Topology",
    "TopologyProvider",
    "Translator",
    "Validator",
    "deployment_order",
    "translate_graph",
    "validate_topology",
]
