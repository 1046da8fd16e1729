"""compiler.py – Compile a command record into an argument vector.

``args(record)`` walks the record's field table three times, in declaration
order each time:

- **first**: fields declared with ``pos=Pos.FIRST`` (leading positionals,
  global options that must precede everything else);
- **middle**: flagged fields without a position;
- **last**: fields declared with ``pos=Pos.LAST`` (trailing positionals,
  action flags).

A field's category depends only on its declaration, never on its value.
Fields with neither a flag nor a position are inert.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from shellac.encoder import encode_field
from shellac.fields import FieldSpec, Pos, describe


def args(rec: Any) -> list[str]:
    """Return the argv tokens described by record instance *rec*."""
    if not dataclasses.is_dataclass(rec) or isinstance(rec, type):
        raise TypeError(f"expected a record instance, got {type(rec).__name__}")
    specs = describe(type(rec))

    tokens: list[str] = []
    for spec in specs:
        if spec.pos is Pos.FIRST:
            tokens.extend(encode_field(spec, getattr(rec, spec.name)))
    for spec in specs:
        if _in_middle(spec):
            tokens.extend(encode_field(spec, getattr(rec, spec.name)))
    for spec in specs:
        if spec.pos is Pos.LAST:
            tokens.extend(encode_field(spec, getattr(rec, spec.name)))
    return tokens


def command_name(rec: Any) -> str:
    """Return the program name for a record instance or record type.

    The first field carrying a ``command`` override wins; otherwise the
    lower-cased type name is used.
    """
    cls = rec if isinstance(rec, type) else type(rec)
    for spec in describe(cls):
        if spec.command is not None:
            return spec.command
    return cls.__name__.lower()


def _in_middle(spec: FieldSpec) -> bool:
    return spec.exported and spec.flag is not None and spec.pos is None
