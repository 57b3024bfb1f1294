"""
Replay command: rebuild a store from a history file and time-travel
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax

from timeline.config import REPLAY_POLICIES, StoreConfig
from timeline.core.errors import TimelineError
from timeline.store import EventSourcedStore

from ._common import fail, load_history, load_registry

console = Console()


def replay_command(
    history_path: str = typer.Argument(..., help="Path to history JSON file"),
    registry_ref: str = typer.Option(
        ..., "--registry", "-r", help="Mutation registry as module:attribute"
    ),
    to: Optional[int] = typer.Option(None, "--to", "-t", help="Time-travel to this event index"),
    policy: Optional[str] = typer.Option(
        None, "--policy", help="Replay policy past the last event: strict or clamp"
    ),
    show_state: bool = typer.Option(False, "--show-state", "-s", help="Show resulting state"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay a history and report the resulting state.

    Examples:
        timeline replay history.json -r timeline.demo:FORM_MUTATIONS
        timeline replay history.json -r timeline.demo:FORM_MUTATIONS --to 0 --show-state
        timeline replay history.json -r timeline.demo:FORM_MUTATIONS --json
    """
    try:
        config = StoreConfig.from_env()
        if policy is not None:
            if policy not in REPLAY_POLICIES:
                raise ValueError(f"policy must be one of {REPLAY_POLICIES}, got {policy!r}")
            config = StoreConfig(
                replay_policy=policy,
                checkpoint_interval=config.checkpoint_interval,
                copy_args=config.copy_args,
            )

        history = load_history(history_path)
        mutations = load_registry(registry_ref)

        if not json_output:
            console.print("[bold]Replaying history...[/bold]")

        store = EventSourcedStore.from_history(history, mutations, config=config)
        if to is not None:
            store.replay(to)
    except FileNotFoundError:
        fail(console, json_output, "History file not found", path=history_path)
    except (TimelineError, ImportError, ValueError) as e:
        fail(console, json_output, str(e))

    if json_output:
        output = {
            "success": True,
            "events": len(store.events),
            "pointer": store.pointer,
            "can_undo": store.can_undo,
            "can_redo": store.can_redo,
            "state_hash": store.state_hash(),
        }
        if show_state:
            output["state"] = store.state
        print(json.dumps(output, indent=2, default=str))
        raise typer.Exit(0)

    console.print(f"[green]✓ Replayed to pointer {store.pointer} of {len(store.events)} events[/green]")
    console.print(f"  State hash: [yellow]{store.state_hash()}[/yellow]")
    console.print(f"  undo: {'available' if store.can_undo else 'unavailable'}")
    console.print(f"  redo: {'available' if store.can_redo else 'unavailable'}")

    if show_state:
        console.print("\n[bold]State:[/bold]")
        syntax = Syntax(json.dumps(store.state, indent=2, default=str), "json", theme="monokai")
        console.print(syntax)
