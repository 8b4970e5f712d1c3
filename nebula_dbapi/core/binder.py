"""Positional parameter binding for graph-query text.

Placeholders are single `?` characters outside double-quoted string literals.
The scan tracks quoting state across the whole text. Only a non-escaped
quote opens or closes a literal, so `\\"` never toggles it, inside or
outside a literal. A backslash before `?` outside a literal is not an escape.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping, Sequence

from .errors import PlaceholderCountMismatch, UnboundParameter
from .literals import render_literal
from .metadata import ParameterMetadata
from .values import TypedValue

PLACEHOLDER = "?"
QUOTE = '"'
ESCAPE = "\\"


def placeholder_positions(raw_text: str) -> List[int]:
    """Return offsets of every placeholder outside string literals, in order."""

    positions: List[int] = []
    in_literal = False
    escaped = False
    for offset, char in enumerate(raw_text):
        if escaped:
            escaped = False
            if char == QUOTE:
                continue
        elif char == ESCAPE:
            escaped = True
            continue
        if char == QUOTE:
            in_literal = not in_literal
        elif char == PLACEHOLDER and not in_literal:
            positions.append(offset)
    return positions


def count_placeholders(raw_text: str) -> int:
    """Count placeholders outside string literals."""

    return len(placeholder_positions(raw_text))


def render(raw_text: str, bound: Mapping[int, Any]) -> str:
    """Substitute bound values into `raw_text`.

    Args:
        raw_text: Query text with `?` placeholders.
        bound: Values keyed by 1-based placeholder number.

    Returns:
        Executable query text.

    Raises:
        UnboundParameter: If a placeholder number has no entry in `bound`.
    """

    return _splice(raw_text, placeholder_positions(raw_text), bound)


def _splice(raw_text: str, positions: Sequence[int], bound: Mapping[int, Any]) -> str:
    # Literals are appended, never re-scanned, so their content cannot
    # create or hide placeholders further right.
    pieces: List[str] = []
    cursor = 0
    for number, offset in enumerate(positions, start=1):
        if number not in bound:
            raise UnboundParameter(number)
        pieces.append(raw_text[cursor:offset])
        pieces.append(render_literal(bound[number]))
        cursor = offset + len(PLACEHOLDER)
    pieces.append(raw_text[cursor:])
    return "".join(pieces)


class PreparedQuery:
    """Raw query text plus the parameter values bound to it so far."""

    def __init__(self, raw_text: str):
        if not isinstance(raw_text, str):
            raise TypeError(f"Query text must be str, got {type(raw_text).__name__}.")
        self.raw_text = raw_text
        self._positions = tuple(placeholder_positions(raw_text))
        self._params: dict[int, TypedValue] = {}

    def parameter_count(self) -> int:
        return len(self._positions)

    @property
    def parameters(self) -> Mapping[int, TypedValue]:
        """Read-only view of bound values keyed by 1-based index."""

        return MappingProxyType(self._params)

    def bind(self, index: int, value: Any) -> None:
        """Bind `value` to the 1-based placeholder `index`.

        Raises:
            PlaceholderCountMismatch: If `index` is not in `[1, parameter_count()]`.
        """

        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Parameter index must be int, got {type(index).__name__}.")
        count = self.parameter_count()
        if index < 1 or index > count:
            raise PlaceholderCountMismatch(index, count)
        self._params[index] = TypedValue.of(value)

    def bind_all(self, values: Sequence[Any]) -> None:
        """Bind a sequence of values to placeholders 1..len(values)."""

        count = self.parameter_count()
        if len(values) > count:
            raise PlaceholderCountMismatch(len(values), count)
        for index, value in enumerate(values, start=1):
            self.bind(index, value)

    def clear_parameters(self) -> None:
        self._params.clear()

    def render(self) -> str:
        return _splice(self.raw_text, self._positions, self._params)

    def parameter_metadata(self) -> ParameterMetadata:
        return ParameterMetadata(self.parameter_count(), dict(self._params))

    def __repr__(self) -> str:
        return (
            f"PreparedQuery({self.raw_text!r}, "
            f"bound={len(self._params)}/{self.parameter_count()})"
        )
