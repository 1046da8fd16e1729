"""main.py – Umbrella CLI entry point for shellac.

Exposes the registered command schemas on the command line: inspect their
fields, compile a record to its argument vector, or run it.
"""

import subprocess

import typer
from rich.console import Console
from rich.table import Table

from shellac.cli import JsonOption, error_exit, json_print, load_schema, schema_names
from shellac.cmd import command
from shellac.compiler import args, command_name
from shellac.config import ShellacConfig, load_config
from shellac.fields import describe
from shellac.values import build_record

app = typer.Typer(
    help="Declarative, typed command lines for external programs.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]
  shellac schemas                          List known command schemas
  shellac schemas find                     Show the fields of the find schema
  shellac args find dirnames=. name='*.py' Print the compiled command line
  shellac run find dirnames=. type=d       Run it

[dim]Fields are given as FIELD=VALUE; repeat a list field to append.
Program names can be overridden under [programs] in shellac.toml.[/dim]""",
)

AssignmentsArgument: list[str] | None = typer.Argument(
    None, help="FIELD=VALUE assignments, e.g. name='*.py' max_depth=2."
)


def _config(json_mode: bool) -> ShellacConfig:
    try:
        return load_config()
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_mode)


def _build(schema: str, assignments: list[str] | None, json_mode: bool):
    cls = load_schema(schema, json_mode=json_mode)
    try:
        return build_record(cls, assignments or [])
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_mode)


@app.command("schemas")
def schemas(
    name: str | None = typer.Argument(None, help="Schema to describe."),
    json_output: bool = JsonOption,
) -> None:
    """List command schemas, or show the fields of one."""
    if name is None:
        rows = []
        for schema in schema_names():
            cls = load_schema(schema)
            rows.append({"schema": schema, "command": command_name(cls), "fields": len(describe(cls))})
        if json_output:
            json_print(rows)
            return
        table = Table(title="Command schemas")
        table.add_column("Schema", style="cyan")
        table.add_column("Command")
        table.add_column("Fields", justify="right")
        for row in rows:
            table.add_row(row["schema"], row["command"], str(row["fields"]))
        Console().print(table)
        return

    cls = load_schema(name, json_mode=json_output)
    specs = [spec for spec in describe(cls) if spec.exported]
    if json_output:
        json_print({"schema": name, "command": command_name(cls), "fields": [s.to_dict() for s in specs]})
        return
    table = Table(title=f"{name} ({command_name(cls)})")
    table.add_column("Field", style="cyan")
    table.add_column("Flag")
    table.add_column("Position")
    table.add_column("Kind")
    for spec in specs:
        kind = spec.kind.value + ("?" if spec.optional else "")
        pos = spec.pos.value if spec.pos is not None else ""
        table.add_row(spec.name, spec.flag or "", pos, kind)
    Console().print(table)


@app.command("args")
def show_args(
    schema: str = typer.Argument(..., help="Schema name, e.g. find."),
    assignments: list[str] | None = AssignmentsArgument,
    json_output: bool = JsonOption,
) -> None:
    """Print the command line a record compiles to."""
    cfg = _config(json_output)
    rec = _build(schema, assignments, json_output)
    program = cfg.program_for(command_name(rec))
    try:
        tokens = args(rec)
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_output)
    if json_output:
        json_print({"command": program, "args": tokens})
        return
    print(" ".join([program, *tokens]))


@app.command("run")
def run_cmd(
    schema: str = typer.Argument(..., help="Schema name, e.g. find."),
    assignments: list[str] | None = AssignmentsArgument,
    as_root: bool = typer.Option(False, "--sudo", help="Run as root via sudo(8)."),
) -> None:
    """Run the command a record describes and exit with its status."""
    cfg = _config(False)
    rec = _build(schema, assignments, False)
    try:
        cmd = command(rec, cfg)
        if as_root:
            cmd.sudo()
        result = cmd.run(check=False)
    except subprocess.TimeoutExpired as exc:
        error_exit(f"{schema} timed out after {exc.timeout}s")
    except (RuntimeError, OSError, ValueError) as exc:
        error_exit(str(exc))
    raise typer.Exit(code=result.returncode)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
