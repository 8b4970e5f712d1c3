"""Core port contracts implemented by graph session adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import ExecuteResult


@runtime_checkable
class GraphSessionPort(Protocol):
    """Graph session behavior required by `Connection`.

    `execute` returns the ordered column names and a single-pass iterable of
    rows aligned with them. Errors raised by `execute` reach the caller
    unmodified.
    """

    def execute(self, query_text: str) -> ExecuteResult: ...


@runtime_checkable
class ClosableSessionPort(GraphSessionPort, Protocol):
    """Graph session that also releases its own resources."""

    def close(self) -> None: ...
