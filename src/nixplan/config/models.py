"""Pydantic configuration models with code-baked defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResourceLimits(BaseModel):
    """Cluster-wide resource ceilings for a single topology."""

    model_config = {"frozen": True}

    max_cpu_cores: float = 64.0
    max_memory_mb: int = 128_000
    max_disk_gb: int = 10_000


class PlannerConfig(BaseModel):
    """Options for validation and translation, frozen after construction."""

    model_config = {"frozen": True}

    limits: ResourceLimits = Field(default_factory=ResourceLimits)
    # Opt-in checks that run after the core validation gate.
    strict_backends: bool = False
    reject_orphans: bool = False
    default_nats_url: str = "nats://localhost:4222"
    default_backend_port: int = 80
