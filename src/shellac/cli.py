"""Shared CLI utilities for the shellac command-line tool.

Provides the schema registry, common Typer options, and standardised
output / error helpers so that every subcommand reports errors and JSON the
same way.
"""

from __future__ import annotations

import importlib
import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

# Known command schemas: (name, module, record class).
SCHEMAS: list[tuple[str, str, str]] = [
    ("find", "shellac.coreutils", "Find"),
    ("ssh", "shellac.ssh", "SSH"),
]

JsonOption: bool = typer.Option(False, "--json", help="Output results as JSON.")

# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def schema_names() -> list[str]:
    """Return the names of all registered schemas."""
    return [name for name, _module, _cls in SCHEMAS]


def load_schema(name: str, *, json_mode: bool = False) -> type:
    """Import and return the record class registered as *name*."""
    for schema, module, cls_name in SCHEMAS:
        if schema == name:
            return getattr(importlib.import_module(module), cls_name)
    error_exit(
        f"Unknown schema {name!r}.  Available: {', '.join(schema_names())}",
        json_mode=json_mode,
    )
