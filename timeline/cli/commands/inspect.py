"""
Inspect command: show the event log of a history file
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from timeline.core.errors import TimelineError

from ._common import fail, load_history

console = Console()


def inspect_command(
    history_path: str = typer.Argument(..., help="Path to history JSON file"),
    lines: Optional[int] = typer.Option(
        None, "--lines", "-n", min=1, help="Show only the last N events"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show events, the current pointer and undo/redo availability.

    Examples:
        timeline inspect history.json
        timeline inspect history.json --lines 10
        timeline inspect history.json --json
    """
    try:
        history = load_history(history_path)
    except FileNotFoundError:
        fail(console, json_output, "History file not found", path=history_path)
    except TimelineError as e:
        fail(console, json_output, str(e))

    events = list(enumerate(history.events))
    if lines:
        events = events[-lines:]
    can_undo = history.pointer >= 0
    can_redo = history.pointer < len(history.events) - 1

    if json_output:
        output = {
            "pointer": history.pointer,
            "count": len(history.events),
            "can_undo": can_undo,
            "can_redo": can_redo,
            "events": [dict(e.to_dict(), index=i) for i, e in events],
        }
        print(json.dumps(output, indent=2))
        raise typer.Exit(0)

    table = Table(title=f"History: {history_path}")
    table.add_column("Index", style="cyan", justify="right")
    table.add_column("Event", style="green")
    table.add_column("", style="bold yellow")

    if not lines or lines >= len(history.events):
        table.add_row("-1", "Initial State", "◀" if history.pointer == -1 else "")
    for i, event in events:
        label = escape(event.label())
        if i == history.pointer:
            table.add_row(str(i), f"[bold]{label}[/bold]", "◀")
        else:
            table.add_row(str(i), label, "")

    console.print(table)
    console.print(f"\n[bold]Total events:[/bold] {len(history.events)}")
    console.print(f"[bold]Pointer:[/bold] {history.pointer}")
    console.print(f"  undo: {'[green]available[/green]' if can_undo else '[dim]unavailable[/dim]'}")
    console.print(f"  redo: {'[green]available[/green]' if can_redo else '[dim]unavailable[/dim]'}")
