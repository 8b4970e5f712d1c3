"""Forward-only, column-addressable cursor over a backend row stream."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import CursorNotPositioned, DataError, InvalidColumnReference
from .metadata import ResultMetadata
from .types import ColumnRef, RawRow
from .values import TypedValue

Record = Tuple[TypedValue, ...]

_NO_ROW = object()


class CursorPosition(str, Enum):
    """Cursor position states; transitions only move forward."""

    BEFORE_FIRST = "before_first"
    FIRST = "first"
    MIDDLE = "middle"
    AFTER_LAST = "after_last"
    CLOSED = "closed"


class ResultCursor:
    """Wrap a single-pass row stream with before-first/after-last semantics.

    Column indexes are 1-based. Name lookups return the first matching column
    when names repeat. Rows may hold raw host values or `TypedValue`s; raw
    values are classified when the row is fetched.
    """

    def __init__(self, columns: Sequence[str], rows: Iterable[RawRow]):
        self._columns: List[str] = list(columns)
        self._rows: Iterator[RawRow] = iter(rows)
        self._pending: Any = _NO_ROW
        self._exhausted = False
        self._record: Optional[Record] = None
        self._first_record: Optional[Record] = None
        self._last_value: Optional[TypedValue] = None
        self._row_number = 0
        self._position = CursorPosition.BEFORE_FIRST

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def position(self) -> CursorPosition:
        return self._position

    @property
    def row_number(self) -> int:
        """Number of rows fetched so far."""

        return self._row_number

    def advance(self) -> bool:
        """Fetch the next row.

        Returns:
            `True` when a row was fetched, `False` once the stream is exhausted.

        Raises:
            CursorNotPositioned: If the cursor is closed.
        """

        self._require_open()
        if self._position is CursorPosition.AFTER_LAST:
            return False
        row = self._next_raw()
        if row is _NO_ROW:
            self._record = None
            self._last_value = None
            self._position = CursorPosition.AFTER_LAST
            return False

        record = self._to_record(row)
        self._record = record
        self._last_value = None
        self._row_number += 1
        if self._first_record is None:
            self._first_record = record
            self._position = CursorPosition.FIRST
        else:
            self._position = CursorPosition.MIDDLE
        return True

    def get(self, column: ColumnRef) -> TypedValue:
        """Return the current row's value at a 1-based index or column name."""

        self._require_open()
        position = self._resolve(column)
        value = self._require_record()[position]
        self._last_value = value
        return value

    def get_value(self, column: ColumnRef) -> Any:
        """Return the current row's value as a plain host object."""

        return self.get(column).to_python()

    def was_null(self) -> bool:
        """Report whether the last value read on the current row was null."""

        self._require_open()
        if self._last_value is None:
            raise CursorNotPositioned("No column has been read on the current row.")
        return self._last_value.is_null

    def find_column(self, name: str) -> int:
        """Return the 1-based index of the first column called `name`."""

        self._require_open()
        try:
            return self._columns.index(name) + 1
        except ValueError:
            raise InvalidColumnReference(name, f"No such column: {name!r}") from None

    def current_row(self) -> Record:
        return self._require_record()

    def metadata(self) -> ResultMetadata:
        return ResultMetadata(self._columns, self._first_record)

    def is_before_first(self) -> bool:
        return self._position is CursorPosition.BEFORE_FIRST

    def is_first(self) -> bool:
        return self._position is CursorPosition.FIRST

    def is_last(self) -> bool:
        """Report whether the current row is the final one.

        Peeks at most one row ahead; the peeked row is returned by the next
        `advance()`.
        """

        self._require_open()
        if self._record is None:
            return False
        return not self._has_next()

    def is_after_last(self) -> bool:
        return self._position is CursorPosition.AFTER_LAST

    def is_closed(self) -> bool:
        return self._position is CursorPosition.CLOSED

    def close(self) -> None:
        """Make the cursor terminal. Calling it again has no effect."""

        self._position = CursorPosition.CLOSED
        self._record = None
        self._last_value = None
        self._rows = iter(())
        self._pending = _NO_ROW
        self._exhausted = True

    def __iter__(self) -> Iterator[Record]:
        while self.advance():
            yield self._require_record()

    def __enter__(self) -> ResultCursor:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _require_open(self) -> None:
        if self._position is CursorPosition.CLOSED:
            raise CursorNotPositioned("The result cursor is closed.")

    def _require_record(self) -> Record:
        self._require_open()
        if self._record is None:
            if self._position is CursorPosition.BEFORE_FIRST:
                raise CursorNotPositioned("Call advance() before reading columns.")
            raise CursorNotPositioned("The cursor is positioned after the last row.")
        return self._record

    def _resolve(self, column: ColumnRef) -> int:
        if isinstance(column, str):
            return self.find_column(column) - 1
        if isinstance(column, bool) or not isinstance(column, int):
            raise InvalidColumnReference(
                column,
                f"Column reference must be an index or a name, got {type(column).__name__}.",
            )
        if column < 1 or column > len(self._columns):
            raise InvalidColumnReference(
                column,
                f"Invalid column index {column}; expected 1..{len(self._columns)}.",
            )
        return column - 1

    def _next_raw(self) -> Any:
        if self._pending is not _NO_ROW:
            row, self._pending = self._pending, _NO_ROW
            return row
        if self._exhausted:
            return _NO_ROW
        try:
            return next(self._rows)
        except StopIteration:
            self._exhausted = True
            return _NO_ROW

    def _has_next(self) -> bool:
        if self._pending is _NO_ROW:
            self._pending = self._next_raw()
        return self._pending is not _NO_ROW

    def _to_record(self, row: RawRow) -> Record:
        record = tuple(TypedValue.of(item) for item in row)
        if len(record) != len(self._columns):
            raise DataError(
                f"Row has {len(record)} value(s) for {len(self._columns)} column(s)."
            )
        return record
