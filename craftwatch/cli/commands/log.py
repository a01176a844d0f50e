"""CLI — Server log commands (classify, replay)."""

from __future__ import annotations

import sys
from collections import Counter
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Iterator, TextIO

import typer
from rich.console import Console
from rich.table import Table

from craftwatch.exceptions import CraftwatchError

app = typer.Typer(help="Classify and replay server output logs.")
console = Console()


@contextmanager
def _open_log(path: Path, encoding: str, errors: str) -> Iterator[TextIO]:
    if str(path) == "-":
        yield sys.stdin
        return
    if not path.exists():
        console.print(f"[red]Log file not found: {path}[/red]")
        raise typer.Exit(1)
    with path.open(encoding=encoding, errors=errors) as f:
        yield f


@app.command("classify")
def classify_log(
    file: Annotated[Path, typer.Argument(help="Server log file, or '-' for stdin.")],
    show_all: bool = typer.Option(False, "--all", help="Also list unrecognized lines."),
    encoding: str = typer.Option("utf-8", help="Log file encoding."),
) -> None:
    """Show the action recognized on each line of a server log."""
    from craftwatch.output import ActionType, ChatAction, JoinAction, LeaveAction, classify

    table = Table(title=f"Actions in {file}")
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Action", style="cyan")
    table.add_column("Player", style="green")
    table.add_column("Detail")

    counts: Counter[str] = Counter()
    with _open_log(file, encoding, "replace") as stream:
        for number, line in enumerate(stream, start=1):
            action = classify(line.rstrip("\r\n"))
            counts[action.action_type.value] += 1
            if action.action_type is ActionType.UNRECOGNIZED and not show_all:
                continue
            if isinstance(action, JoinAction):
                table.add_row(str(number), "join", action.name, action.address)
            elif isinstance(action, LeaveAction):
                table.add_row(str(number), "leave", action.name, "")
            elif isinstance(action, ChatAction):
                table.add_row(str(number), "chat", action.name, action.message)
            else:
                table.add_row(str(number), "-", "", action.raw)

    console.print(table)
    summary = ", ".join(f"{t.value}={counts.get(t.value, 0)}" for t in ActionType)
    console.print(f"[bold]{sum(counts.values())} lines:[/bold] {summary}")


@app.command("replay")
def replay_log(
    file: Annotated[Path, typer.Argument(help="Server log file, or '-' for stdin.")],
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to config.yaml.")
    ] = None,
) -> None:
    """Run a server log through the registry and the configured tasks."""
    from craftwatch.config import Settings
    from craftwatch.events import NotificationKind, QueueChannel
    from craftwatch.logging import configure_logging
    from craftwatch.runtime import build_runtime

    try:
        settings = Settings.load(config_file=config)
        configure_logging(
            level=settings.logging.level,
            format=settings.logging.format,
            log_file=str(settings.logging.file) if settings.logging.file else None,
        )
        runtime = build_runtime(settings)
    except CraftwatchError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(1)

    channel = QueueChannel(runtime.bus)
    try:
        with _open_log(file, settings.stream.encoding, settings.stream.errors) as stream:
            lines = runtime.consume(stream)
    finally:
        runtime.shutdown(wait=True)
        channel.close()

    kinds = Counter(n.kind for n in channel.drain())

    players = Table(title=f"Online players after {lines} lines")
    players.add_column("Name", style="green")
    players.add_column("Address", style="cyan")
    for player in sorted(runtime.registry.get_all(), key=lambda p: p.key):
        players.add_row(player.display_name, player.address)
    console.print(players)

    stats = Table(title="Registry")
    stats.add_column("Counter", style="cyan")
    stats.add_column("Value", style="green", justify="right")
    for kind in NotificationKind:
        stats.add_row(kind.value, str(kinds.get(kind, 0)))
    for key, value in runtime.registry.stats.as_dict().items():
        stats.add_row(key, str(value))
    for task in runtime.tasker.tasks:
        stats.add_row(f"task {task.name}", f"{task.run_count} run / {task.fail_count} failed")
    console.print(stats)
