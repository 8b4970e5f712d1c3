"""DB-API connection adapter over a graph session."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ...core.binder import PreparedQuery
from ...core.contracts import ClosableSessionPort, GraphSessionPort
from ...core.errors import InterfaceError, NotSupportedError, OperationalError
from ...core.result_cursor import ResultCursor
from .cursor import Cursor
from .settings import ConnectionSettings, parse_url, session_commands

logger = logging.getLogger(__name__)

SessionFactory = Callable[[ConnectionSettings], GraphSessionPort]


class PreparedStatement(PreparedQuery):
    """Prepared query bound to the connection that executes it."""

    def __init__(self, connection: Connection, raw_text: str):
        super().__init__(raw_text)
        self.connection = connection

    def execute_query(self) -> ResultCursor:
        """Render bound parameters and execute the final query text."""

        return self.connection.execute_query(self.render())


class Connection:
    """Thin wrapper that turns a graph session into a DB-API connection."""

    def __init__(
        self,
        session: GraphSessionPort,
        settings: Optional[ConnectionSettings] = None,
        *,
        owns_session: bool = True,
    ):
        """Create connection adapter.

        Args:
            session: Object with `execute(query_text) -> (columns, rows)`.
            settings: Optional settings; schema, graph and time zone are
                applied to the session right away.
            owns_session: Close `session` when this connection closes.

        Raises:
            OperationalError: If a session configuration command fails.
        """

        self.session: GraphSessionPort | None = session
        self.settings = settings
        self._owns_session = owns_session
        self._closed = False
        self._configure_session()

    @property
    def closed(self) -> bool:
        return self._closed

    def _require_open_session(self) -> GraphSessionPort:
        if self._closed or self.session is None:
            raise InterfaceError("connection is closed")
        return self.session

    def _configure_session(self) -> None:
        session = self._require_open_session()
        for command in session_commands(self.settings):
            logger.debug("configuring session: %s", command)
            try:
                session.execute(command)
            except Exception as exc:
                self.close()
                raise OperationalError(f"{command} failed: {exc}") from exc

    def prepare(self, raw_text: str) -> PreparedStatement:
        """Create a prepared statement; placeholders are counted once here."""

        self._require_open_session()
        return PreparedStatement(self, raw_text)

    def execute_query(self, query_text: str) -> ResultCursor:
        """Execute final query text and wrap the returned row stream.

        Errors raised by the session propagate unmodified.
        """

        session = self._require_open_session()
        logger.debug("executing query: %s", query_text)
        columns, rows = session.execute(query_text)
        return ResultCursor(columns, rows)

    def cursor(self) -> Cursor:
        self._require_open_session()
        return Cursor(self)

    def commit(self) -> None:
        """Accept a commit request; the graph backend has no transactions."""

        self._require_open_session()

    def rollback(self) -> None:
        self._require_open_session()
        raise NotSupportedError("graph backend does not support transactions")

    def close(self) -> None:
        """Close the connection and, when owned, the session. Idempotent."""

        if self._closed:
            return
        session = self.session
        self._closed = True
        self.session = None
        if self._owns_session and isinstance(session, ClosableSessionPort):
            session.close()
        logger.info("connection closed")

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


def connect(
    session: GraphSessionPort | None = None,
    *,
    url: str | None = None,
    session_factory: SessionFactory | None = None,
    owns_session: bool = True,
    **options: Any,
) -> Connection:
    """Open a DB-API connection.

    Args:
        session: Ready graph session. When omitted, `session_factory` builds
            one from the settings.
        url: Optional `nebula://` URL parsed into settings.
        session_factory: Callable receiving `ConnectionSettings` and returning
            a graph session.
        owns_session: Close the session when the connection closes.
        **options: Settings fields (`graph`, `schema`, `timezone`, ...) that
            override values from `url`.

    Raises:
        InterfaceError: If neither `session` nor `session_factory` is given.
    """

    settings = parse_url(url) if url is not None else ConnectionSettings()
    if options:
        settings = settings.with_overrides(**options)

    if session is None:
        if session_factory is None:
            raise InterfaceError("connect() needs a session or a session_factory")
        session = session_factory(settings)
    return Connection(session, settings, owns_session=owns_session)
