"""Planner configuration, settings sources and logging setup."""

from nixplan.config.models import PlannerConfig, ResourceLimits

__all__ = [
    "PlannerConfig",
    "ResourceLimits",
]
