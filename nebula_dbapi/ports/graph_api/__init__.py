"""Graph-session adapter exports."""

from .connection import Connection, PreparedStatement, connect
from .cursor import Cursor
from .in_memory import InMemoryGraphSession
from .settings import (
    ConnectionSettings,
    accepts_url,
    parse_addresses,
    parse_url,
    session_commands,
)

__all__ = [
    "Connection",
    "ConnectionSettings",
    "Cursor",
    "InMemoryGraphSession",
    "PreparedStatement",
    "accepts_url",
    "connect",
    "parse_addresses",
    "parse_url",
    "session_commands",
]
