"""values.py – Build records from ``FIELD=VALUE`` text assignments.

Used by the ``shellac`` CLI to fill a record from command-line words::

    build_record(Find, ["dirnames=.", "name=*.py", "type=f", "max_depth=2"])

Text is coerced according to the field's declared type.  Repeating a list,
tuple or mapping field appends to it; mapping entries are ``key=value``.
Field names may use dashes in place of underscores.
"""

from __future__ import annotations

import types
import typing
from enum import Enum
from typing import Any

from shellac.fields import FieldSpec, ValueKind, describe, type_hints

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def parse_assignment(text: str) -> tuple[str, str]:
    """Split ``FIELD=VALUE`` into its parts, normalising the field name."""
    name, eq, value = text.partition("=")
    if not eq or not name:
        raise ValueError(f"expected FIELD=VALUE, got {text!r}")
    return name.strip().replace("-", "_"), value


def build_record(cls: type, assignments: list[str]) -> Any:
    """Instantiate record type *cls* from ``FIELD=VALUE`` strings.

    Raises:
        ValueError: unknown or internal field, or a value that does not fit
            the field's type.
    """
    specs = {spec.name: spec for spec in describe(cls) if spec.exported}
    hints = type_hints(cls)
    kwargs: dict[str, Any] = {}
    for text in assignments:
        name, raw = parse_assignment(text)
        spec = specs.get(name)
        if spec is None:
            raise ValueError(f"{cls.__name__} has no field {name!r}")
        target = _inner_type(hints.get(name))
        if spec.kind in (ValueKind.STRINGS, ValueKind.ARRAY):
            kwargs.setdefault(name, []).append(raw)
        elif isinstance(target, type) and issubclass(target, dict):
            key, eq, value = raw.partition("=")
            if not eq or not key:
                raise ValueError(f"{name}: expected KEY=VALUE, got {raw!r}")
            kwargs.setdefault(name, target())[key] = value
        else:
            kwargs[name] = coerce(spec, target, raw)

    for name, value in kwargs.items():
        if specs[name].kind is ValueKind.ARRAY:
            expected = len(typing.get_args(_inner_type(hints[name])))
            if len(value) != expected:
                raise ValueError(
                    f"{name}: expected {expected} values, got {len(value)}"
                )
            kwargs[name] = tuple(value)
    return cls(**kwargs)


def coerce(spec: FieldSpec, target: Any, raw: str) -> Any:
    """Convert *raw* text to the type of field *spec*."""
    if spec.kind is ValueKind.BOOL:
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"{spec.name}: expected a boolean, got {raw!r}")
    if spec.kind is ValueKind.INT:
        try:
            return int(raw.strip(), 0)
        except ValueError:
            raise ValueError(f"{spec.name}: expected an integer, got {raw!r}") from None
    if spec.kind is ValueKind.STR:
        return raw
    if isinstance(target, type):
        if issubclass(target, Enum):
            return _coerce_enum(spec, target, raw)
        parse = getattr(target, "parse", None)
        if callable(parse):
            try:
                return parse(raw)
            except ValueError as exc:
                raise ValueError(f"{spec.name}: {exc}") from None
        if target is float:
            try:
                return float(raw)
            except ValueError:
                raise ValueError(f"{spec.name}: expected a number, got {raw!r}") from None
    return raw


def _coerce_enum(spec: FieldSpec, target: type[Enum], raw: str) -> Enum:
    for member in target:
        if member.value == raw:
            return member
    try:
        return target[raw.upper().replace("-", "_")]
    except KeyError:
        choices = ", ".join(str(m.value) for m in target)
        raise ValueError(f"{spec.name}: expected one of {choices}, got {raw!r}") from None


def _inner_type(hint: Any) -> Any:
    """Strip ``| None`` from an annotation."""
    if typing.get_origin(hint) not in (typing.Union, types.UnionType):
        return hint
    members = [m for m in typing.get_args(hint) if m is not type(None)]
    if len(members) == 1:
        return members[0]
    return hint
