"""Main CLI entry point for nixplan."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich.console import Console

from nixplan import __version__

console = Console()

# Default paths (can be overridden)
DEFAULT_TOPOLOGY = "topology.yml"


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.topology_path: Path | None = None
        self.config_path: Path | None = None
        self.verbose: bool = False
        self.log_json: bool = False
        self._settings: Any = None
        self._topology: Any = None

    @property
    def settings(self) -> Any:
        """Lazy-load settings."""
        if self._settings is None:
            from nixplan.config.settings import NixplanSettings

            self._settings = NixplanSettings.from_cli(
                config_path=self.config_path,
                verbose=self.verbose or None,
                log_json=self.log_json or None,
            )
        return self._settings

    @property
    def topology(self) -> Any:
        """Lazy-load topology."""
        if self._topology is None:
            from nixplan.core.errors import DeploymentError
            from nixplan.core.topology import Topology

            if not (self.topology_path and self.topology_path.exists()):
                raise click.ClickException(f"Topology not found: {self.topology_path}")
            try:
                self._topology = Topology.load(
                    self.topology_path, strict=self.settings.strict_decode
                )
            except DeploymentError as e:
                raise click.ClickException(str(e)) from e
        return self._topology


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.version_option(version=__version__, prog_name="nixplan")
@click.option(
    "-t",
    "--topology",
    type=click.Path(exists=False, path_type=Path),
    default=DEFAULT_TOPOLOGY,
    help="Path to topology YAML file",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to nixplan.yml settings file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--log-json", is_flag=True, help="Emit log records as JSON lines")
@pass_context
def cli(ctx: Context, topology: Path, config: Path | None, verbose: bool, log_json: bool) -> None:
    """
    Nixplan - Deployment planning for infrastructure topologies.

    Validate a topology of services, agents, databases, message buses,
    load balancers and storage, and compile it into a deployment
    specification.
    """
    from nixplan.config.logging import configure_logging

    ctx.topology_path = topology
    ctx.config_path = config
    ctx.verbose = verbose
    ctx.log_json = log_json
    configure_logging(verbose=verbose, log_json=log_json)


# Import and register subcommands
from nixplan.cli.order import order
from nixplan.cli.translate import translate
from nixplan.cli.validate import validate

cli.add_command(order)
cli.add_command(translate)
cli.add_command(validate)


@cli.command()
@pass_context
def info(ctx: Context) -> None:
    """Show topology summary."""
    from rich.table import Table

    from nixplan.core.schema import EdgeKind, NodeKind

    try:
        topology = ctx.topology
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"\n[bold]Nixplan v{__version__}[/bold]\n")

    console.print("[bold cyan]Topology Summary[/bold cyan]")
    console.print(f"  Path: {ctx.topology_path}")
    console.print(f"  Total nodes: {len(topology)}")
    console.print(f"  Total edges: {len(topology.edges)}")
    console.print(f"  Startup dependencies: {len(topology.startup_edges())}")

    if len(topology) > 0:
        table = Table(title="Nodes by Kind")
        table.add_column("Kind", style="cyan")
        table.add_column("Count", justify="right")

        for kind in NodeKind:
            count = len(topology.nodes_of_kind(kind))
            if count > 0:
                table.add_row(kind.value, str(count))

        console.print(table)

    if topology.edges:
        table = Table(title="Edges by Kind")
        table.add_column("Kind", style="cyan")
        table.add_column("Count", justify="right")

        for kind in EdgeKind:
            count = sum(1 for e in topology.edges if e.kind == kind)
            if count > 0:
                table.add_row(kind.value, str(count))

        console.print(table)


if __name__ == "__main__":
    cli()
