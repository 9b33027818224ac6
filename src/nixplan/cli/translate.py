"""Translation CLI command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from nixplan.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the specification to a file instead of stdout",
)
@pass_context
def translate(ctx: Context, output_format: str, output: Path | None) -> None:
    """
    Translate the topology into a deployment specification.

    The topology is validated first; nothing is written if it is invalid.

    Examples:

        # Print JSON specification
        nixplan translate

        # Write YAML specification to a file
        nixplan translate --format yaml -o deploy/spec.yml
    """
    from nixplan.core.errors import DeploymentError
    from nixplan.core.translator import Translator

    try:
        topology = ctx.topology
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    try:
        spec = Translator(ctx.settings.to_planner_config()).translate(topology)
    except DeploymentError as e:
        console.print(f"[red]Translation failed:[/red] {e}")
        raise SystemExit(1)

    content = spec.to_yaml() if output_format == "yaml" else spec.to_json()

    if output is None:
        click.echo(content)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content)
    console.print(f"[green]Generated:[/green] {output}")
