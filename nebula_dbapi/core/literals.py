"""Literal rendering of typed values into graph-query syntax.

Each value kind maps to one stateless formatting function. `RENDERERS` covers
every `ValueKind`; `render_literal` dispatches on the tag of a `TypedValue`.
"""

from __future__ import annotations

import math
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Dict

from .errors import DataError
from .values import TypedValue, ValueKind

NULL_LITERAL = "NULL"

Renderer = Callable[[Any], str]


def render_literal(value: Any) -> str:
    """Render one host value or `TypedValue` as backend literal text."""

    typed = TypedValue.of(value)
    return RENDERERS[typed.kind](typed.value)


def quote_string(value: str) -> str:
    """Wrap text in double quotes; embedded quotes are left as they are."""

    return f'"{value}"'


def iso_duration(value: timedelta) -> str:
    """Format a duration as ISO-8601 `PT<h>H<m>M<s>S`.

    Days fold into hours, zero renders as `PT0S`, and negative durations carry
    one leading minus sign.
    """

    total_us = value // timedelta(microseconds=1)
    sign = "-" if total_us < 0 else ""
    seconds, micros = divmod(abs(total_us), 1_000_000)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}H")
    if minutes:
        parts.append(f"{minutes}M")
    if micros:
        parts.append(f"{secs}.{micros:06d}".rstrip("0") + "S")
    elif secs or not parts:
        parts.append(f"{secs}S")
    return f"{sign}PT{''.join(parts)}"


def _render_null(_value: Any) -> str:
    return NULL_LITERAL


def _render_bool(value: bool) -> str:
    return "true" if value else "false"


def _render_float(value: float) -> str:
    if not math.isfinite(value):
        raise DataError(f"Cannot render non-finite float {value!r} as a literal.")
    return repr(value)


def _render_decimal(value: Decimal) -> str:
    if not value.is_finite():
        raise DataError(f"Cannot render non-finite decimal {value} as a literal.")
    return format(value, "f")


def _wrapped(constructor: str) -> Renderer:
    def render(value: Any) -> str:
        return f"{constructor}({quote_string(value.isoformat())})"

    render.__name__ = f"_render_{constructor}"
    return render


RENDERERS: Dict[ValueKind, Renderer] = {
    ValueKind.NULL: _render_null,
    ValueKind.BOOL: _render_bool,
    ValueKind.INT: str,
    ValueKind.FLOAT: _render_float,
    ValueKind.DECIMAL: _render_decimal,
    ValueKind.STRING: quote_string,
    ValueKind.DATE: _wrapped("date"),
    ValueKind.LOCAL_TIME: _wrapped("local_time"),
    ValueKind.LOCAL_DATETIME: _wrapped("local_datetime"),
    ValueKind.ZONED_TIME: _wrapped("zoned_time"),
    ValueKind.ZONED_DATETIME: _wrapped("zoned_datetime"),
    ValueKind.DURATION: lambda value: f"duration({quote_string(iso_duration(value))})",
    ValueKind.OTHER: str,
}
