"""DB-API 2.0 cursor facade over prepared statements and result cursors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from ...core.errors import InterfaceError, NotSupportedError, ProgrammingError
from ...core.metadata import DescriptionItem
from ...core.result_cursor import ResultCursor

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]


class Cursor:
    """Forward-only DB-API cursor using `?` placeholders."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.arraysize = 1
        self.rowcount = -1
        self._result: ResultCursor | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def description(self) -> Optional[List[DescriptionItem]]:
        """Column descriptions; `type_code` is known once a row was fetched."""

        if self._result is None:
            return None
        return self._result.metadata().description()

    @property
    def rownumber(self) -> Optional[int]:
        if self._result is None:
            return None
        return self._result.row_number

    @property
    def result(self) -> ResultCursor:
        """Underlying result cursor of the last executed query."""

        return self._require_result()

    def execute(
        self,
        operation: str,
        parameters: Sequence[Any] | Mapping[int, Any] | None = None,
    ) -> Cursor:
        """Bind parameters, execute the query, and keep its result.

        Args:
            operation: Query text with `?` placeholders.
            parameters: Values for placeholders 1..n, either as a sequence or
                as a mapping keyed by 1-based index.
        """

        self._require_open()
        statement = self.connection.prepare(operation)
        if parameters is not None:
            self._bind(statement, parameters)
        logger.debug(
            "executing statement with %d parameter(s)", statement.parameter_count()
        )
        result = statement.execute_query()
        self._discard_result()
        self._result = result
        self.rowcount = -1
        return self

    def executemany(self, operation: str, seq_of_parameters: Any) -> Cursor:
        raise NotSupportedError("batch execution is not supported")

    def fetchone(self) -> Optional[Row]:
        result = self._require_result()
        if result.advance():
            return tuple(value.to_python() for value in result.current_row())
        self.rowcount = result.row_number
        return None

    def fetchmany(self, size: int | None = None) -> List[Row]:
        count = self.arraysize if size is None else size
        rows: List[Row] = []
        while len(rows) < count:
            row = self.fetchone()
            if row is None:
                break
            rows.append(row)
        return rows

    def fetchall(self) -> List[Row]:
        rows: List[Row] = []
        row = self.fetchone()
        while row is not None:
            rows.append(row)
            row = self.fetchone()
        return rows

    def setinputsizes(self, sizes: Any) -> None:
        pass

    def setoutputsize(self, size: Any, column: Any = None) -> None:
        pass

    def close(self) -> None:
        """Close the cursor and its current result. Idempotent."""

        if self._closed:
            return
        self._discard_result()
        self._closed = True

    def __iter__(self) -> Iterator[Row]:
        return self

    def __next__(self) -> Row:
        row = self.fetchone()
        if row is None:
            raise StopIteration
        return row

    def __enter__(self) -> Cursor:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _bind(self, statement: Any, parameters: Sequence[Any] | Mapping[int, Any]) -> None:
        if isinstance(parameters, Mapping):
            for index, value in parameters.items():
                statement.bind(index, value)
            return
        if isinstance(parameters, (str, bytes, bytearray)):
            raise ProgrammingError(
                "parameters must be a sequence or mapping of values, not a string"
            )
        statement.bind_all(list(parameters))

    def _discard_result(self) -> None:
        if self._result is not None:
            self._result.close()
            self._result = None

    def _require_open(self) -> None:
        if self._closed:
            raise InterfaceError("cursor is closed")

    def _require_result(self) -> ResultCursor:
        self._require_open()
        if self._result is None:
            raise InterfaceError("no query has been executed on this cursor")
        return self._result
