"""Public port exports for concrete adapter implementations."""

from .graph_api import (
    Connection,
    ConnectionSettings,
    Cursor,
    InMemoryGraphSession,
    PreparedStatement,
    connect,
)

__all__ = [
    "Connection",
    "ConnectionSettings",
    "Cursor",
    "InMemoryGraphSession",
    "PreparedStatement",
    "connect",
]
