"""
Nixplan - Deployment planning for infrastructure topologies.

This package provides tools for:
- Declaring deployable nodes (services, agents, databases, message buses,
  load balancers, storage) and typed edges between them
- Validating a topology: cycles, missing dependencies, port conflicts,
  resource budget, storage write conflicts, node configuration
- Computing a startup order over dependency edges
- Translating a validated topology into a deployment specification
"""

import logging

__version__ = "0.1.0"

from nixplan.core.errors import DeploymentError
from nixplan.core.ordering import deployment_order
from nixplan.core.topology import Topology
from nixplan.core.translator import Translator, translate_graph
from nixplan.core.validation import Validator, validate_topology

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "DeploymentError",
    "Topology",
    "Translator",
    "Validator",
    "deployment_order",
    "translate_graph",
    "validate_topology",
]
