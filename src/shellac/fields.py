"""fields.py – Field descriptors for command records.

A command record is a dataclass whose fields each describe one potential
command-line contribution.  Per-field metadata (flag literal, position
category, separator, format template, command-name override) is attached
with :func:`arg` and compiled once per record type into an ordered table of
:class:`FieldSpec` objects by :func:`describe`.

Usage::

    from shellac.fields import Pos, arg, record

    @record
    class Grep:
        ignore_case: bool = arg("-i")
        max_count: int | None = arg("-m")
        pattern: str = arg(pos=Pos.LAST)
        files: list[str] | None = arg(pos=Pos.LAST)

Fields declared without an explicit default get the zero value of their
kind (``False``, ``0``, ``""``) or ``None`` for everything else, so
``Grep()`` is a valid, empty record.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import types
import typing
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

# Flag sentinel: render the value alone, never emit a separate flag token.
BARE = "-"

# Separator sentinel: concatenate flag and value with nothing in between.
CONCAT = "-"

_META_KEY = "shellac"
_AUTO_DEFAULT = "shellac.auto_default"


class Pos(Enum):
    """Placement of a field's tokens within the argument vector."""

    FIRST = "first"
    LAST = "last"


class ValueKind(Enum):
    """Shape of a field value as seen by the encoder."""

    BOOL = "bool"
    INT = "int"
    STR = "str"
    STRINGS = "strings"  # variable-length list of strings
    ARRAY = "array"  # fixed-size tuple of strings
    RECORD = "record"  # nested dataclass
    SCALAR = "scalar"  # anything else, rendered through str()/format


_ZERO_VALUES: dict[ValueKind, Any] = {
    ValueKind.BOOL: False,
    ValueKind.INT: 0,
    ValueKind.STR: "",
}


@dataclass(frozen=True)
class ArgMeta:
    """Raw metadata as attached by :func:`arg`."""

    flag: str | None = None
    pos: Pos | str | None = None
    sep: str | None = None
    format: str | None = None
    command: str | None = None


@dataclass(frozen=True)
class FieldSpec:
    """Compiled descriptor for one record field."""

    name: str
    kind: ValueKind
    optional: bool = False
    flag: str | None = None
    pos: Pos | None = None
    sep: str | None = None
    format: str | None = None
    command: str | None = None
    exported: bool = True

    @property
    def zero(self) -> Any:
        """Zero value of this field's kind (``None`` where there is none)."""
        if self.optional:
            return None
        return _ZERO_VALUES.get(self.kind)

    @property
    def flag_token(self) -> str | None:
        """The literal emitted ahead of the value, if any."""
        if self.flag is None or self.flag == BARE:
            return None
        return self.flag

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "optional": self.optional,
            "flag": self.flag,
            "pos": self.pos.value if self.pos is not None else None,
            "sep": self.sep,
            "format": self.format,
            "command": self.command,
        }


# ---------------------------------------------------------------------------
# Declaration helpers
# ---------------------------------------------------------------------------


def arg(
    flag: str | None = None,
    *,
    pos: Pos | str | None = None,
    sep: str | None = None,
    format: str | None = None,
    command: str | None = None,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **field_kwargs: Any,
) -> Any:
    """Declare a record field with command-line metadata.

    Args:
        flag: Literal prefix token (``"-name"``).  ``None`` makes the field
            positional; :data:`BARE` renders the value with no flag token.
        pos: :attr:`Pos.FIRST` or :attr:`Pos.LAST`; ``None`` for the middle.
        sep: Glue between flag and value.  ``None`` emits two tokens,
            :data:`CONCAT` concatenates, anything else is used literally.
        format: ``str.format`` template for scalar values, e.g. ``"{:o}"``.
        command: Program name override for the whole record.
        default / default_factory: As for :func:`dataclasses.field`.  When
            both are omitted, :func:`record` fills in the kind's zero value.
    """
    metadata = {_META_KEY: ArgMeta(flag=flag, pos=pos, sep=sep, format=format, command=command)}
    if default is dataclasses.MISSING and default_factory is dataclasses.MISSING:
        metadata[_AUTO_DEFAULT] = True
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **field_kwargs,
    )


def command_marker(name: str) -> Any:
    """Declare an internal field that only carries a command-name override.

    Conventionally assigned to an underscore-prefixed attribute::

        _command: None = command_marker("gfind")
    """
    return dataclasses.field(
        default=None,
        init=False,
        repr=False,
        compare=False,
        metadata={_META_KEY: ArgMeta(command=name)},
    )


def record(cls: type | None = None, /, **dataclass_kwargs: Any) -> Any:
    """Class decorator turning an annotated class into a command record.

    Applies :func:`dataclasses.dataclass` after filling omitted defaults with
    zero values, then builds and caches the field table so schema mistakes
    surface at import time.  Annotations are resolved against the namespace
    of the code defining the class, so records declared inside a function
    may refer to that function's local types.
    """
    localns = dict(sys._getframe(1).f_locals)

    def wrap(klass: type) -> type:
        scope = {**vars(klass), **localns, klass.__name__: klass}
        hints = typing.get_type_hints(klass, localns=scope)
        for name in inspect.get_annotations(klass):
            hint = hints.get(name)
            if hint is None or typing.get_origin(hint) is typing.ClassVar:
                continue
            current = klass.__dict__.get(name, dataclasses.MISSING)
            if isinstance(current, dataclasses.Field):
                if current.metadata.get(_AUTO_DEFAULT):
                    current.default = _zero_for(hint)
            elif current is dataclasses.MISSING:
                setattr(klass, name, _zero_for(hint))
        klass = dataclasses.dataclass(klass, **dataclass_kwargs)
        klass.__shellac_hints__ = hints
        describe(klass)
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


# ---------------------------------------------------------------------------
# Descriptor table
# ---------------------------------------------------------------------------


def describe(cls: type) -> tuple[FieldSpec, ...]:
    """Return the field table of record type *cls*, in declaration order.

    The table is stored on the class itself and lives exactly as long as it.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a dataclass record type")
    table = cls.__dict__.get("__shellac_fields__")
    if table is None:
        table = _build_table(cls)
        cls.__shellac_fields__ = table
    return table


def type_hints(cls: type) -> dict[str, Any]:
    """Resolved annotations of record type *cls*.

    Classes decorated with :func:`record` keep the hints resolved at
    declaration time.  Plain dataclasses are resolved against their module
    only.
    """
    hints = cls.__dict__.get("__shellac_hints__")
    if hints is None:
        hints = typing.get_type_hints(cls)
    return hints


def _build_table(cls: type) -> tuple[FieldSpec, ...]:
    hints = type_hints(cls)
    specs = []
    for f in dataclasses.fields(cls):
        meta = f.metadata.get(_META_KEY) or ArgMeta()
        kind, optional = classify(hints.get(f.name, Any))
        specs.append(
            FieldSpec(
                name=f.name,
                kind=kind,
                optional=optional,
                flag=meta.flag or None,
                pos=_parse_pos(cls, f.name, meta.pos),
                sep=meta.sep or None,
                format=meta.format or None,
                command=meta.command or None,
                exported=not f.name.startswith("_"),
            )
        )
    return tuple(specs)


def classify(hint: Any) -> tuple[ValueKind, bool]:
    """Map a type annotation to ``(kind, optional)``."""
    optional = False
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        members = typing.get_args(hint)
        present = [m for m in members if m is not type(None)]
        optional = len(present) < len(members)
        if len(present) != 1:
            return ValueKind.SCALAR, optional
        hint = present[0]
        origin = typing.get_origin(hint)

    if origin is list or hint is list:
        return ValueKind.STRINGS, optional
    if origin is tuple:
        targs = typing.get_args(hint)
        if len(targs) == 2 and targs[1] is Ellipsis:
            return ValueKind.STRINGS, optional
        return ValueKind.ARRAY, optional
    if hint is tuple:
        return ValueKind.STRINGS, optional
    if isinstance(hint, type):
        # Enum before int/str: IntEnum and str-mixin enums render by value.
        if issubclass(hint, Enum):
            return ValueKind.SCALAR, optional
        if issubclass(hint, bool):
            return ValueKind.BOOL, optional
        if issubclass(hint, int):
            return ValueKind.INT, optional
        if issubclass(hint, str):
            return ValueKind.STR, optional
        if dataclasses.is_dataclass(hint):
            return ValueKind.RECORD, optional
    return ValueKind.SCALAR, optional


def _zero_for(hint: Any) -> Any:
    kind, optional = classify(hint)
    if optional:
        return None
    return _ZERO_VALUES.get(kind)


def _parse_pos(cls: type, name: str, pos: Pos | str | None) -> Pos | None:
    if pos is None or isinstance(pos, Pos):
        return pos
    try:
        return Pos(pos)
    except ValueError:
        # Unknown positions leave the field in the middle category.
        warnings.warn(
            f"{cls.__name__}.{name}: unknown pos {pos!r}, expected 'first' or 'last'",
            stacklevel=2,
        )
        return None
