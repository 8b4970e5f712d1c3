"""DB-API 2.0 adapter for graph-query backends.

Query text uses `?` placeholders. Bound values are rendered into graph-query
literals before the text reaches the session, and results are read through a
forward-only cursor.
"""

from datetime import date as Date
from datetime import datetime as Timestamp
from datetime import time as Time

from .core import (
    CursorNotPositioned,
    CursorPosition,
    DatabaseError,
    DataError,
    Error,
    GraphSessionPort,
    InterfaceError,
    InvalidColumnReference,
    NotSupportedError,
    OperationalError,
    ParameterMetadata,
    PlaceholderCountMismatch,
    PreparedQuery,
    ProgrammingError,
    ResultCursor,
    ResultMetadata,
    TypeCoercionError,
    TypedValue,
    UnboundParameter,
    ValueKind,
    Warning,
    count_placeholders,
    render,
    render_literal,
)
from .core.metadata import BINARY, DATETIME, NUMBER, ROWID, STRING, DBAPITypeObject
from .ports import (
    Connection,
    ConnectionSettings,
    Cursor,
    InMemoryGraphSession,
    PreparedStatement,
    connect,
)

apilevel = "2.0"
threadsafety = 1
paramstyle = "qmark"

__all__ = [
    "apilevel",
    "threadsafety",
    "paramstyle",
    "connect",
    "Connection",
    "ConnectionSettings",
    "Cursor",
    "PreparedStatement",
    "InMemoryGraphSession",
    "GraphSessionPort",
    "PreparedQuery",
    "ParameterMetadata",
    "ResultCursor",
    "ResultMetadata",
    "CursorPosition",
    "TypedValue",
    "ValueKind",
    "count_placeholders",
    "render",
    "render_literal",
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
    "DBAPITypeObject",
    "STRING",
    "NUMBER",
    "DATETIME",
    "BINARY",
    "ROWID",
    "Date",
    "Time",
    "Timestamp",
]
