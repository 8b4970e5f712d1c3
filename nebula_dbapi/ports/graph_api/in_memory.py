"""In-memory graph session for testing and local development."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from ...core.types import ExecuteResult

Responder = Callable[[str], Optional[ExecuteResult]]

SESSION_COMMAND_PREFIX = "SESSION SET"


@dataclass
class _CannedResult:
    columns: List[str]
    rows: List[Sequence[Any]] = field(default_factory=list)


class InMemoryGraphSession:
    """Graph session serving canned results keyed by exact query text.

    Executed statements are recorded in `executed`. `SESSION SET ...`
    commands succeed with an empty result unless `accept_session_commands`
    is disabled.
    """

    def __init__(self, *, accept_session_commands: bool = True) -> None:
        self._results: dict[str, _CannedResult] = {}
        self._responders: list[Responder] = []
        self._accept_session_commands = accept_session_commands
        self.executed: list[str] = []
        self.closed = False

    def add_result(
        self,
        query_text: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]] = (),
    ) -> None:
        """Register the result returned whenever `query_text` is executed."""

        self._results[query_text] = _CannedResult(
            columns=list(columns),
            rows=[tuple(row) for row in rows],
        )

    def add_responder(self, responder: Responder) -> None:
        """Register a callable consulted for queries without a canned result.

        The responder returns `(columns, rows)` or `None` to pass.
        """

        self._responders.append(responder)

    def execute(self, query_text: str) -> ExecuteResult:
        if self.closed:
            raise RuntimeError("session is closed")
        self.executed.append(query_text)

        canned = self._results.get(query_text)
        if canned is not None:
            return list(canned.columns), iter(list(canned.rows))

        for responder in self._responders:
            answer = responder(query_text)
            if answer is not None:
                columns, rows = answer
                return list(columns), iter(rows)

        if self._accept_session_commands and query_text.startswith(SESSION_COMMAND_PREFIX):
            return [], iter(())
        raise KeyError(f"No result registered for query: {query_text!r}")

    def close(self) -> None:
        self.closed = True
