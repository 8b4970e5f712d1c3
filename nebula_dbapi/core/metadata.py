"""Parameter and result-column metadata.

Both objects are plain values built for one prepared query or one result;
nothing is shared between queries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidColumnReference, PlaceholderCountMismatch
from .values import TypedValue, ValueKind

PYTHON_TYPES: Mapping[ValueKind, type] = {
    ValueKind.NULL: object,
    ValueKind.BOOL: bool,
    ValueKind.INT: int,
    ValueKind.FLOAT: float,
    ValueKind.DECIMAL: Decimal,
    ValueKind.STRING: str,
    ValueKind.DATE: date,
    ValueKind.LOCAL_TIME: time,
    ValueKind.LOCAL_DATETIME: datetime,
    ValueKind.ZONED_TIME: time,
    ValueKind.ZONED_DATETIME: datetime,
    ValueKind.DURATION: timedelta,
    ValueKind.OTHER: object,
}

DescriptionItem = Tuple[str, Optional[ValueKind], None, None, None, None, bool]


@dataclass(frozen=True)
class ParameterMetadata:
    """Snapshot of one prepared query's parameters."""

    parameter_count: int
    bound: Mapping[int, TypedValue] = field(default_factory=dict)

    def parameter_kind(self, index: int) -> Optional[ValueKind]:
        """Return the kind bound at `index`, or `None` when nothing is bound."""

        self._check(index)
        value = self.bound.get(index)
        return None if value is None else value.kind

    def parameter_type_name(self, index: int) -> Optional[str]:
        kind = self.parameter_kind(index)
        return None if kind is None else kind.value

    def parameter_class_name(self, index: int) -> Optional[str]:
        self._check(index)
        value = self.bound.get(index)
        if value is None:
            return None
        return type(value.value).__name__

    def _check(self, index: int) -> None:
        if index < 1 or index > self.parameter_count:
            raise PlaceholderCountMismatch(index, self.parameter_count)


class ResultMetadata:
    """Column names plus kinds observed on the first fetched record."""

    def __init__(
        self,
        columns: Sequence[str],
        first_record: Optional[Sequence[TypedValue]] = None,
    ):
        self._columns: List[str] = list(columns)
        self._first_record = None if first_record is None else tuple(first_record)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def column_name(self, index: int) -> str:
        return self._columns[self._position(index)]

    def column_kind(self, index: int) -> ValueKind:
        """Return the column kind, `NULL` when no record has been fetched."""

        position = self._position(index)
        if self._first_record is None:
            return ValueKind.NULL
        return self._first_record[position].kind

    def column_type_name(self, index: int) -> str:
        return self.column_kind(index).value

    def python_type(self, index: int) -> type:
        return PYTHON_TYPES[self.column_kind(index)]

    def is_read_only(self, index: int) -> bool:
        self._position(index)
        return True

    def description(self) -> List[DescriptionItem]:
        """Return DB-API `cursor.description` tuples."""

        kinds: List[Optional[ValueKind]]
        if self._first_record is None:
            kinds = [None] * len(self._columns)
        else:
            kinds = [value.kind for value in self._first_record]
        return [
            (name, kind, None, None, None, None, True)
            for name, kind in zip(self._columns, kinds)
        ]

    def _position(self, index: Any) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidColumnReference(index, f"Invalid column index: {index!r}")
        if index < 1 or index > len(self._columns):
            raise InvalidColumnReference(
                index,
                f"Invalid column index {index}; expected 1..{len(self._columns)}.",
            )
        return index - 1


class DBAPITypeObject:
    """DB-API type object comparing equal to each of its value kinds."""

    def __init__(self, name: str, *kinds: ValueKind):
        self.name = name
        self.kinds = frozenset(kinds)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DBAPITypeObject):
            return self.kinds == other.kinds
        try:
            return other in self.kinds
        except TypeError:
            return False

    # Equal to several kinds at once; unhashable.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DBAPITypeObject({self.name!r})"


STRING = DBAPITypeObject("STRING", ValueKind.STRING)
NUMBER = DBAPITypeObject("NUMBER", ValueKind.INT, ValueKind.FLOAT, ValueKind.DECIMAL)
DATETIME = DBAPITypeObject(
    "DATETIME",
    ValueKind.DATE,
    ValueKind.LOCAL_TIME,
    ValueKind.LOCAL_DATETIME,
    ValueKind.ZONED_TIME,
    ValueKind.ZONED_DATETIME,
    ValueKind.DURATION,
)
# The backend has neither binary values nor row ids.
BINARY = DBAPITypeObject("BINARY")
ROWID = DBAPITypeObject("ROWID")
