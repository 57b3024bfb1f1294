#!/usr/bin/env python3
"""
Timeline CLI

Main entrypoint for the timeline command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from timeline import __version__
from timeline.cli.commands import inspect, replay
from timeline.logging_config import setup_logging

app = typer.Typer(
    name="timeline",
    help="Inspect and replay event-sourced state histories",
    add_completion=False,
)

console = Console()

app.command(name="inspect")(inspect.inspect_command)
app.command(name="replay")(replay.replay_command)


@app.command()
def version():
    """Show version information."""
    table = Table(show_header=False, box=None)
    table.add_row("[bold]Timeline[/bold]", f"v{__version__}")
    console.print(table)


def main():
    """Main entrypoint."""
    setup_logging()
    app()


if __name__ == "__main__":
    main()
