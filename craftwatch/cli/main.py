"""craftwatch CLI — Entry point.

Usage:
    craftwatch log classify <file>
    craftwatch log replay <file> [--config config.yaml]
    craftwatch triggers list
    craftwatch triggers check <trigger_type> [parameters]
"""

from __future__ import annotations

import typer

from craftwatch.cli.commands import log, triggers

app = typer.Typer(
    name="craftwatch",
    help="craftwatch — Player tracking and automation for game server output.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.add_typer(log.app, name="log")
app.add_typer(triggers.app, name="triggers")


@app.callback()
def main_callback() -> None:
    pass


if __name__ == "__main__":
    app()
