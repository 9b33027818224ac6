"""Validation CLI command."""

from __future__ import annotations

import click
from rich.console import Console

from nixplan.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--strict-backends",
    is_flag=True,
    help="Fail when a load balancer backend is not a service",
)
@click.option(
    "--reject-orphans",
    is_flag=True,
    help="Fail on nodes without any edge",
)
@pass_context
def validate(ctx: Context, strict_backends: bool, reject_orphans: bool) -> None:
    """
    Validate a deployment topology.

    Checks for dependency cycles, missing dependencies, port conflicts,
    resource limits, storage write conflicts and node configuration.
    Stops at the first problem found.

    Examples:

        # Basic validation
        nixplan validate

        # Also check load balancer backends and orphaned nodes
        nixplan validate --strict-backends --reject-orphans
    """
    from nixplan.core.errors import DeploymentError
    from nixplan.core.validation import Validator

    try:
        topology = ctx.topology
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    config = ctx.settings.to_planner_config()
    overrides = {}
    if strict_backends:
        overrides["strict_backends"] = True
    if reject_orphans:
        overrides["reject_orphans"] = True
    if overrides:
        config = config.model_copy(update=overrides)

    console.print("[bold]Validating topology...[/bold]")
    console.print(f"  [green]✓[/green] Topology loaded: {len(topology)} nodes, {len(topology.edges)} edges")

    limits = config.limits
    if ctx.verbose:
        console.print(
            f"  Limits: {limits.max_cpu_cores:g} cores, "
            f"{limits.max_memory_mb}MB memory, {limits.max_disk_gb}GB disk"
        )

    try:
        Validator(config).validate(topology)
    except DeploymentError as e:
        console.print(f"  [red]✗[/red] {e}")
        console.print("\n[red bold]Validation failed[/red bold]")
        raise SystemExit(1)

    console.print("\n[green bold]Validation passed[/green bold]")
