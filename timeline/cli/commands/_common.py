"""
Helpers shared by CLI commands: loading history files and registries.
"""

import importlib
import json
from pathlib import Path
from typing import Any, Mapping, NoReturn

import typer
from rich.console import Console

from timeline.history import HistorySnapshot


def load_history(path: str) -> HistorySnapshot:
    """
    Read a history JSON file.

    Raises:
        FileNotFoundError: If path does not exist
        InvalidHistoryState: If the file is not a valid history
    """
    return HistorySnapshot.from_json(Path(path).read_text(encoding="utf-8"))


def load_registry(ref: str) -> Mapping[str, Any]:
    """
    Resolve a "package.module:attribute" reference to a mutation mapping.

    Raises:
        ValueError: If ref is malformed or does not name a mapping
        ImportError: If the module cannot be imported
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"registry must look like 'module:attribute', got {ref!r}")
    module = importlib.import_module(module_name)
    try:
        registry = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"module {module_name!r} has no attribute {attr!r}") from None
    if not isinstance(registry, Mapping):
        raise ValueError(f"{ref} is a {type(registry).__name__}, expected a mapping")
    return registry


def fail(console: Console, json_output: bool, message: str, **fields: Any) -> NoReturn:
    """Report an error in the requested format and exit with status 2."""
    if json_output:
        print(json.dumps(dict(fields, error=message)))
    else:
        detail = f" {fields['path']}" if "path" in fields else ""
        console.print(f"[red]Error: {message}[/red]{detail}")
    raise typer.Exit(2)
