"""Tests for NixplanSettings and planner configuration."""

from pathlib import Path

import click
import pytest

from nixplan.config.models import PlannerConfig, ResourceLimits
from nixplan.config.settings import NixplanSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ["NIXPLAN_CONFIG", "NIXPLAN_STRICT_BACKENDS", "NIXPLAN_LIMITS__MAX_CPU_CORES"]:
        monkeypatch.delenv(name, raising=False)


class TestPlannerConfig:
    def test_defaults(self) -> None:
        config = PlannerConfig()

        assert config.limits == ResourceLimits(max_cpu_cores=64.0, max_memory_mb=128_000, max_disk_gb=10_000)
        assert config.strict_backends is False
        assert config.reject_orphans is False
        assert config.default_nats_url == "nats://localhost:4222"
        assert config.default_backend_port == 80

    def test_frozen(self) -> None:
        config = PlannerConfig()
        with pytest.raises(Exception):
            config.strict_backends = True  # type: ignore[misc]


class TestNixplanSettings:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no YAML and no env vars, all fields use code defaults."""
        settings = NixplanSettings.from_cli(cwd=tmp_path)

        assert settings.config_path is None
        assert settings.verbose is False
        assert settings.to_planner_config() == PlannerConfig()

    def test_discovers_yaml_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "nixplan.yml").write_text("limits:\n  max_cpu_cores: 8\nreject_orphans: true\n")

        settings = NixplanSettings.from_cli(cwd=tmp_path)

        assert settings.config_path == tmp_path / "nixplan.yml"
        assert settings.limits.max_cpu_cores == 8
        assert settings.limits.max_memory_mb == 128_000  # default preserved
        assert settings.reject_orphans is True

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yml"
        path.write_text("default_backend_port: 8000\n")

        settings = NixplanSettings.from_cli(config_path=path)
        assert settings.to_planner_config().default_backend_port == 8000

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException):
            NixplanSettings.from_cli(config_path=tmp_path / "absent.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "nixplan.yml"
        path.write_text("limits: [unclosed\n")

        with pytest.raises(click.ClickException):
            NixplanSettings.from_cli(config_path=path)

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "nixplan.yml").write_text("strict_backends: false\n")
        monkeypatch.setenv("NIXPLAN_STRICT_BACKENDS", "true")

        settings = NixplanSettings.from_cli(cwd=tmp_path)
        assert settings.strict_backends is True

    def test_cli_flags_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NIXPLAN_STRICT_BACKENDS", "true")

        settings = NixplanSettings.from_cli(cwd=tmp_path, strict_backends=False)
        assert settings.strict_backends is False

    def test_none_flags_are_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "nixplan.yml").write_text("verbose: true\n")

        settings = NixplanSettings.from_cli(cwd=tmp_path, verbose=None)
        assert settings.verbose is True

    def test_nested_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NIXPLAN_LIMITS__MAX_CPU_CORES", "16")

        settings = NixplanSettings.from_cli(cwd=tmp_path)
        assert settings.limits.max_cpu_cores == 16
