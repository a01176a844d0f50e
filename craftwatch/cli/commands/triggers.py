"""CLI — Trigger inspection commands."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(help="Inspect the trigger types tasks can use.")
console = Console()


@app.command("list")
def list_triggers() -> None:
    """List available trigger types."""
    from craftwatch.tasker.triggers import TRIGGER_TYPES

    table = Table(title="Trigger types")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Reacts to")
    table.add_column("Description")
    table.add_column("Parameters", style="dim")
    for type_id, cls in TRIGGER_TYPES.items():
        table.add_row(type_id, cls.name, cls.kind.value, cls.description, cls.parameter_description)
    console.print(table)


@app.command("check")
def check_parameters(
    trigger_type: str = typer.Argument(..., help="Trigger type id, e.g. player_count."),
    parameters: str = typer.Argument("", help="Parameter string to validate."),
) -> None:
    """Validate a parameter string against a trigger type."""
    from craftwatch.events import NotificationBus
    from craftwatch.exceptions import UnknownTriggerError
    from craftwatch.tasker.triggers import create_trigger

    try:
        trigger = create_trigger(trigger_type, NotificationBus())
    except UnknownTriggerError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(2)

    if trigger.validate_input(parameters):
        console.print(f"[green]Valid parameters for {trigger_type}[/green]")
    else:
        console.print(f"[red]Invalid parameters for {trigger_type}:[/red] {trigger.parameter_description}")
        raise typer.Exit(1)
