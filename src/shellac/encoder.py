"""encoder.py – Turn one record field into zero or more argv tokens.

The encoder looks at a single :class:`~shellac.fields.FieldSpec` and the
field's current value and knows nothing about other fields.  The decision
procedure is order-sensitive:

1. non-exported fields contribute nothing;
2. absent values (``None``) and zero values of non-optional fields are
   suppressed, as are nested records without fields;
3. ``True`` with a flag is just the flag;
4. lists and tuples of strings follow the flag token verbatim;
5. any other value is rendered to text and glued to the flag per ``sep``.

Wrapping a field in ``T | None`` is how callers emit an explicit zero:
``perm: int | None = arg("-perm")`` set to ``0`` renders ``-perm 0``.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from shellac.fields import CONCAT, FieldSpec, ValueKind

_BUILTIN_VALUES = (int, float, complex, str, bytes, dict, set, frozenset)


class FieldFormatError(ValueError):
    """A field's format template could not render its value."""

    def __init__(self, field: str, format: str, value: Any, cause: Exception) -> None:
        self.field = field
        self.format = format
        self.value = value
        super().__init__(
            f"cannot render field {field!r} with format {format!r} "
            f"(value {value!r}): {cause}"
        )


def encode_field(spec: FieldSpec, value: Any) -> list[str]:
    """Return the argv tokens contributed by *value* for field *spec*."""
    if not spec.exported:
        return []
    if _suppressed(spec, value):
        return []

    # Boolean shortcut: the raw flag literal, BARE included.
    if spec.flag is not None and value is True:
        return [spec.flag]

    flag = spec.flag_token

    tokens: list[str] = []
    if flag is not None:
        tokens.append(flag)

    if spec.kind in (ValueKind.STRINGS, ValueKind.ARRAY):
        tokens.extend(str(item) for item in value)
        return tokens

    text = render(spec, value)
    if flag is None:
        return [text]
    if spec.sep is None:
        return [flag, text]
    if spec.sep == CONCAT:
        return [flag + text]
    return [flag + spec.sep + text]


def render(spec: FieldSpec, value: Any) -> str:
    """Render a scalar value to text using the field's format, if any."""
    if isinstance(value, Enum):
        value = value.value
    if spec.format is None:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
    try:
        return spec.format.format(value)
    except (ValueError, TypeError, IndexError, KeyError, AttributeError) as exc:
        raise FieldFormatError(spec.name, spec.format, value, exc) from exc


def _suppressed(spec: FieldSpec, value: Any) -> bool:
    if value is None:
        return True
    if spec.kind is ValueKind.RECORD or (
        spec.kind is ValueKind.SCALAR and dataclasses.is_dataclass(value)
    ):
        return not dataclasses.fields(value)
    if spec.optional or spec.kind in (ValueKind.STRINGS, ValueKind.ARRAY):
        return False
    if spec.kind is ValueKind.SCALAR:
        # Builtin value types are zero when falsy (0.0, {}, b"").
        return not isinstance(value, Enum) and isinstance(value, _BUILTIN_VALUES) and not value
    return value == spec.zero
