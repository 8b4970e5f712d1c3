"""Shared core type aliases used across contracts, binder, and cursor."""

from __future__ import annotations

from typing import Any, Iterable, Sequence, Tuple, Union

RawRow = Sequence[Any]
RowStream = Iterable[RawRow]
ExecuteResult = Tuple[Sequence[str], RowStream]

ColumnRef = Union[int, str]
