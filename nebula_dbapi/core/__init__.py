"""Public core API for parameter binding, typed values, and result cursors."""

from .binder import PreparedQuery, count_placeholders, placeholder_positions, render
from .contracts import ClosableSessionPort, GraphSessionPort
from .errors import (
    CursorNotPositioned,
    DatabaseError,
    DataError,
    Error,
    InterfaceError,
    InvalidColumnReference,
    NotSupportedError,
    OperationalError,
    PlaceholderCountMismatch,
    ProgrammingError,
    TypeCoercionError,
    UnboundParameter,
    Warning,
)
from .literals import NULL_LITERAL, iso_duration, quote_string, render_literal
from .metadata import ParameterMetadata, ResultMetadata
from .result_cursor import CursorPosition, ResultCursor
from .values import TypedValue, ValueKind, classify

__all__ = [
    "PreparedQuery",
    "count_placeholders",
    "placeholder_positions",
    "render",
    "GraphSessionPort",
    "ClosableSessionPort",
    "Error",
    "Warning",
    "InterfaceError",
    "DatabaseError",
    "DataError",
    "OperationalError",
    "ProgrammingError",
    "NotSupportedError",
    "PlaceholderCountMismatch",
    "UnboundParameter",
    "InvalidColumnReference",
    "CursorNotPositioned",
    "TypeCoercionError",
    "NULL_LITERAL",
    "iso_duration",
    "quote_string",
    "render_literal",
    "ParameterMetadata",
    "ResultMetadata",
    "CursorPosition",
    "ResultCursor",
    "TypedValue",
    "ValueKind",
    "classify",
]
