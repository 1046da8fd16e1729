"""Project configuration loader for shellac.

Reads ``shellac.toml`` from the nearest enclosing directory and exposes the
launcher settings as simple attributes.  Every setting has a default, so a
missing file is not an error.

Example ``shellac.toml``::

    [run]
    log = true          # echo command lines to stderr before running
    sudo = "sudo"       # elevation program used by Cmd.sudo()
    timeout = 30        # seconds before the child is killed

    [programs]
    find = "gfind"      # run GNU find on systems where it is installed as gfind

Usage::

    from shellac.config import load_config
    cfg = load_config()
    cfg.program_for("find")   # "gfind"
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILENAME = "shellac.toml"


@dataclass
class ShellacConfig:
    """Parsed launcher configuration."""

    # Directory holding shellac.toml (None when running on defaults)
    root: Path | None = None

    # --- [run] ---
    log_commands: bool = True
    sudo: str = "sudo"
    timeout: float | None = None

    # --- [programs] ---
    programs: dict[str, str] = field(default_factory=dict)

    def program_for(self, name: str) -> str:
        """Return the configured program for command *name*."""
        return self.programs.get(name, name)


def _find_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (or cwd) to the directory holding shellac.toml."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_FILENAME).is_file():
            return candidate
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def load_config(root: Path | None = None) -> ShellacConfig:
    """Load shellac.toml.

    Args:
        root: Directory to start the search from.  Defaults to the current
            working directory.

    Raises:
        ValueError: if the file has settings of the wrong type.
    """
    found = _find_root(root)
    if found is None:
        return ShellacConfig()

    toml_path = found / CONFIG_FILENAME
    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)

    run = raw.get("run", {})
    programs = raw.get("programs", {})
    if not isinstance(run, dict) or not isinstance(programs, dict):
        raise ValueError(f"{toml_path}: [run] and [programs] must be tables")

    log_commands = run.get("log", True)
    if not isinstance(log_commands, bool):
        raise ValueError(f"{toml_path}: run.log must be a boolean, got {log_commands!r}")
    sudo = run.get("sudo", "sudo")
    if not isinstance(sudo, str) or not sudo:
        raise ValueError(f"{toml_path}: run.sudo must be a non-empty string, got {sudo!r}")
    timeout = run.get("timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
        raise ValueError(f"{toml_path}: run.timeout must be a number, got {timeout!r}")
    for name, program in programs.items():
        if not isinstance(program, str) or not program:
            raise ValueError(f"{toml_path}: programs.{name} must be a non-empty string")

    return ShellacConfig(
        root=found,
        log_commands=log_commands,
        sudo=sudo,
        timeout=float(timeout) if timeout is not None else None,
        programs=dict(programs),
    )
