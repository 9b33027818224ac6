"""Unified settings — CLI flags, env vars, and YAML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``NIXPLAN_*`` prefix, ``__`` for nested fields
  3. YAML file    — ``--config`` path, ``NIXPLAN_CONFIG``, or ``./nixplan.yml``
  4. Code defaults — baked into :mod:`nixplan.config.models`
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from nixplan.config.models import PlannerConfig, ResourceLimits

CONFIG_FILENAME = "nixplan.yml"
CONFIG_ENV_VAR = "NIXPLAN_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Locate the settings file: ``NIXPLAN_CONFIG`` first, then ``nixplan.yml`` in *start*."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    candidate = (start or Path.cwd()) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a YAML mapping."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if yaml_path and yaml_path.is_file():
            try:
                loaded = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
            except yaml.YAMLError as exc:
                raise click.ClickException(f"Invalid YAML in {yaml_path}: {exc}") from exc
            if loaded is not None and not isinstance(loaded, dict):
                raise click.ClickException(f"Config file {yaml_path} must contain a mapping")
            self._data = loaded or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the YAML path during construction.
_tls = threading.local()


class NixplanSettings(BaseSettings):
    """Settings for the nixplan CLI, frozen after construction."""

    model_config = {
        "frozen": True,
        "env_prefix": "NIXPLAN_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False
    strict_decode: bool = False

    # --- Planner options ---
    limits: ResourceLimits = Field(default_factory=ResourceLimits)
    strict_backends: bool = False
    reject_orphans: bool = False
    default_nats_url: str = "nats://localhost:4222"
    default_backend_port: int = 80

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source between env vars and defaults."""
        yaml_path = getattr(_tls, "yaml_path", None)
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, yaml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        cwd: Path | None = None,
        **cli_flags: Any,
    ) -> NixplanSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* must exist; otherwise the file is
        discovered with :func:`find_config`. Flags left as ``None`` are
        not passed on, so they do not mask env vars or the YAML file.
        """
        yaml_path: Path | None
        if config_path:
            yaml_path = Path(config_path)
            if not yaml_path.is_file():
                raise click.ClickException(f"Config file not found: {yaml_path}")
        else:
            yaml_path = find_config(cwd)

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.yaml_path = yaml_path
        try:
            return cls(config_path=yaml_path, **flags)
        finally:
            _tls.yaml_path = None

    def to_planner_config(self) -> PlannerConfig:
        return PlannerConfig(
            limits=self.limits,
            strict_backends=self.strict_backends,
            reject_orphans=self.reject_orphans,
            default_nats_url=self.default_nats_url,
            default_backend_port=self.default_backend_port,
        )
