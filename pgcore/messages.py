"""Messages a connection delivers, and names for statements and portals."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Any, Union

from pgcore.error import DbError

_U64_MAX = 0xFFFFFFFFFFFFFFFF
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class _NameSequence:
    """A thread-safe source of names built from a prefix and a counter."""

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            number = next(self._counter)
        return f"{self._prefix}{number}"


_statements = _NameSequence("s")
_portals = _NameSequence("p")


def next_statement() -> str:
    """Return a fresh, process-wide unique name for a prepared statement."""
    return _statements()


def next_portal() -> str:
    """Return a fresh, process-wide unique name for a portal."""
    return _portals()


@dataclass(frozen=True)
class Notification:
    """An asynchronous notification raised with NOTIFY on a LISTENed channel."""

    process_id: int
    channel: str
    payload: str

    def __post_init__(self) -> None:
        if not _I32_MIN <= self.process_id <= _I32_MAX:
            raise ValueError(f"process id out of range: {self.process_id}")


@dataclass(frozen=True)
class Notice:
    """A notice from the server; it has the form of an error but is not one."""

    error: DbError

    def __str__(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class RowMessage:
    """A row of data returned by a simple query."""

    row: Any


@dataclass(frozen=True)
class CommandComplete:
    """A statement in a simple query has completed.

    ``rows`` is the number of rows modified or selected.
    """

    rows: int

    def __post_init__(self) -> None:
        if not 0 <= self.rows <= _U64_MAX:
            raise ValueError(f"row count out of range: {self.rows}")


AsyncMessage = Union[Notice, Notification]
SimpleQueryMessage = Union[RowMessage, CommandComplete]