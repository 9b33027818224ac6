"""Deployment order CLI command."""

from __future__ import annotations

import click
from rich.console import Console

from nixplan.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option("--plain", is_flag=True, help="Print one node id per line")
@pass_context
def order(ctx: Context, plain: bool) -> None:
    """
    Print the startup order of the topology.

    Dependencies come before the nodes that require them; ready nodes are
    listed alphabetically.

    Examples:

        nixplan order

        # For scripts
        nixplan order --plain
    """
    from rich.table import Table

    from nixplan.core.errors import DeploymentError
    from nixplan.core.ordering import deployment_order

    try:
        topology = ctx.topology
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    try:
        node_ids = deployment_order(topology)
    except DeploymentError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if plain:
        for node_id in node_ids:
            click.echo(node_id)
        return

    if not node_ids:
        console.print("[yellow]Topology is empty[/yellow]")
        return

    table = Table(title="Deployment Order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Node", style="cyan")
    table.add_column("Kind")
    table.add_column("Requires")

    for position, node_id in enumerate(node_ids, start=1):
        node = topology.get_node(node_id)
        requires = topology.startup_dependencies(node_id)
        table.add_row(
            str(position),
            node_id,
            node.kind.value,
            ", ".join(requires) if requires else "-",
        )

    console.print(table)
