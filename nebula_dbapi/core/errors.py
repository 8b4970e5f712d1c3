"""DB-API 2.0 exception hierarchy plus binder and cursor error kinds."""

from __future__ import annotations

from typing import Any


class Warning(Exception):  # noqa: A001
    """Important warnings such as data truncation."""


class Error(Exception):
    """Base class of every error raised by this package."""


class InterfaceError(Error):
    """Misuse of the adapter interface rather than of the graph backend."""


class DatabaseError(Error):
    """Errors related to the graph backend."""


class DataError(DatabaseError):
    """Problems with processed data such as incompatible value kinds."""


class OperationalError(DatabaseError):
    """Backend operation failures outside of the caller's control."""


class ProgrammingError(DatabaseError):
    """Caller mistakes such as bad parameter indexes or column names."""


class NotSupportedError(DatabaseError):
    """Operation the graph backend cannot provide."""


class PlaceholderCountMismatch(ProgrammingError, IndexError):
    """Raised when a bind index falls outside the declared placeholder count."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(
            f"Parameter index {index} is out of range; "
            f"the query declares {count} placeholder(s) numbered from 1."
        )


class UnboundParameter(ProgrammingError):
    """Raised when rendering reaches a placeholder with no bound value."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"No value bound for parameter index {index}.")


class InvalidColumnReference(ProgrammingError, LookupError):
    """Raised for an unknown column name or an out-of-range column index."""

    def __init__(self, column: Any, message: str):
        self.column = column
        super().__init__(message)


class CursorNotPositioned(InterfaceError):
    """Raised when reading a cursor that has no current row."""


class TypeCoercionError(DataError, TypeError):
    """Raised when a stored value kind cannot produce the requested shape."""

    def __init__(self, stored_kind: Any, requested: str, detail: str | None = None):
        self.stored_kind = stored_kind
        self.requested = requested
        kind_name = getattr(stored_kind, "value", stored_kind)
        message = f"Cannot coerce {kind_name} value to {requested}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message + ".")
