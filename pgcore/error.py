"""Errors and notices reported by a Postgres server or raised by the client."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from pgcore.sqlstate import SqlState

_U32_PATTERN = re.compile(r"\+?[0-9]+")
_U32_MAX = 0xFFFFFFFF

FieldType = Union[str, int]


class Severity(Enum):
    """The nonlocalized severity of a Postgres error or notice."""

    PANIC = "PANIC"
    FATAL = "FATAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    NOTICE = "NOTICE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    LOG = "LOG"

    @classmethod
    def parse(cls, text: str) -> Severity | None:
        """Return the severity named by ``text``, or None if it names none."""
        try:
            return cls(text)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OriginalPosition:
    """An error cursor position in the query as the client sent it."""

    position: int


@dataclass(frozen=True)
class InternalPosition:
    """An error cursor position in a query generated by the server."""

    position: int
    query: str


ErrorPosition = Union[OriginalPosition, InternalPosition]


class ErrorFieldsError(ValueError):
    """The fields of an error or notice response are malformed."""


def _parse_u32(value: str, field: str) -> int:
    if _U32_PATTERN.fullmatch(value):
        number = int(value)
        if number <= _U32_MAX:
            return number
    raise ErrorFieldsError(f"`{field}` field did not contain an integer")


def _field_type(raw: FieldType) -> str:
    return chr(raw) if isinstance(raw, int) else raw


_TEXT_FIELDS = {
    "S": "severity",
    "M": "message",
    "D": "detail",
    "H": "hint",
    "q": "internal_query",
    "W": "where",
    "s": "schema",
    "t": "table",
    "c": "column",
    "d": "datatype",
    "n": "constraint",
    "F": "file",
    "R": "routine",
}


@dataclass(eq=True)
class DbError(Exception):
    """An error or notice sent by the Postgres server."""

    severity: str
    code: SqlState
    message: str
    parsed_severity: Severity | None = None
    detail: str | None = None
    hint: str | None = None
    position: ErrorPosition | None = None
    where: str | None = None
    schema: str | None = None
    table: str | None = None
    column: str | None = None
    datatype: str | None = None
    constraint: str | None = None
    file: str | None = None
    line: int | None = None
    routine: str | None = None

    @classmethod
    def parse(cls, fields: Iterable[tuple[FieldType, str]]) -> DbError:
        """Build a DbError from ``(field type, value)`` pairs of a response.

        Field types are single characters (or their byte values); unknown
        types are ignored and later fields override earlier ones.
        Raises ErrorFieldsError if the fields are malformed.
        """
        text: dict[str, str] = {}
        code: SqlState | None = None
        parsed_severity: Severity | None = None
        normal_position: int | None = None
        internal_position: int | None = None
        line: int | None = None

        for raw_type, value in fields:
            kind = _field_type(raw_type)
            if kind in _TEXT_FIELDS:
                text[_TEXT_FIELDS[kind]] = value
            elif kind == "C":
                code = SqlState.from_code(value)
            elif kind == "P":
                normal_position = _parse_u32(value, "P")
            elif kind == "p":
                internal_position = _parse_u32(value, "p")
            elif kind == "L":
                line = _parse_u32(value, "L")
            elif kind == "V":
                parsed_severity = Severity.parse(value)
                if parsed_severity is None:
                    raise ErrorFieldsError("`V` field contained an invalid value")

        if "severity" not in text:
            raise ErrorFieldsError("`S` field missing")
        if code is None:
            raise ErrorFieldsError("`C` field missing")
        if "message" not in text:
            raise ErrorFieldsError("`M` field missing")

        position: ErrorPosition | None = None
        if normal_position is not None:
            position = OriginalPosition(normal_position)
        elif internal_position is not None:
            query = text.get("internal_query")
            if query is None:
                raise ErrorFieldsError("`q` field missing but `p` field present")
            position = InternalPosition(internal_position, query)

        return cls(
            severity=text["severity"],
            code=code,
            message=text["message"],
            parsed_severity=parsed_severity,
            detail=text.get("detail"),
            hint=text.get("hint"),
            position=position,
            where=text.get("where"),
            schema=text.get("schema"),
            table=text.get("table"),
            column=text.get("column"),
            datatype=text.get("datatype"),
            constraint=text.get("constraint"),
            file=text.get("file"),
            line=line,
            routine=text.get("routine"),
        )

    def __str__(self) -> str:
        return f"{self.severity}: {self.message}"


class ErrorKind(Enum):
    """The kind of failure an Error reports; the value is its description."""

    IO = "error communicating with the server"
    UNEXPECTED_MESSAGE = "unexpected message from server"
    TLS = "error performing TLS handshake"
    TO_SQL = "error serializing parameter"
    FROM_SQL = "error deserializing column"
    COLUMN = "invalid column"
    COPY_IN_STREAM = "error from a copy_in stream"
    CLOSED = "connection closed"
    DB = "db error"
    PARSE = "error parsing response from server"
    ENCODE = "error encoding message to server"
    AUTHENTICATION = "authentication error"
    CONFIG_PARSE = "invalid connection string"
    CONFIG = "invalid configuration"
    CONNECT = "error connecting to server"


Cause = Union[BaseException, str]


class Error(Exception):
    """An error communicating with the Postgres server."""

    def __init__(
        self,
        kind: ErrorKind,
        cause: Cause | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(kind, cause)
        self.kind = kind
        self.source = cause
        self.index = index
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    @property
    def code(self) -> SqlState | None:
        """The SQLSTATE code of the underlying DbError, if there is one."""
        if isinstance(self.source, DbError):
            return self.source.code
        return None

    def __str__(self) -> str:
        text = self.kind.value
        if self.index is not None:
            text = f"{text} {self.index}"
        if self.source is not None:
            text = f"{text}: {self.source}"
        return text

    def __repr__(self) -> str:
        return f"Error(kind={self.kind.name}, cause={self.source!r})"

    @classmethod
    def closed(cls) -> Error:
        return cls(ErrorKind.CLOSED)

    @classmethod
    def unexpected_message(cls) -> Error:
        return cls(ErrorKind.UNEXPECTED_MESSAGE)

    @classmethod
    def db(cls, fields: Iterable[tuple[FieldType, str]]) -> Error:
        """Wrap an error response; malformed fields give a parse error."""
        try:
            return cls(ErrorKind.DB, DbError.parse(fields))
        except ErrorFieldsError as exc:
            return cls(ErrorKind.PARSE, exc)

    @classmethod
    def parse(cls, cause: Cause) -> Error:
        return cls(ErrorKind.PARSE, cause)

    @classmethod
    def encode(cls, cause: Cause) -> Error:
        return cls(ErrorKind.ENCODE, cause)

    @classmethod
    def to_sql(cls, cause: Cause, index: int) -> Error:
        return cls(ErrorKind.TO_SQL, cause, index)

    @classmethod
    def from_sql(cls, cause: Cause, index: int) -> Error:
        return cls(ErrorKind.FROM_SQL, cause, index)

    @classmethod
    def column(cls) -> Error:
        return cls(ErrorKind.COLUMN)

    @classmethod
    def copy_in_stream(cls, cause: Cause) -> Error:
        return cls(ErrorKind.COPY_IN_STREAM, cause)

    @classmethod
    def tls(cls, cause: Cause) -> Error:
        return cls(ErrorKind.TLS, cause)

    @classmethod
    def io(cls, cause: Cause) -> Error:
        return cls(ErrorKind.IO, cause)

    @classmethod
    def authentication(cls, cause: Cause) -> Error:
        return cls(ErrorKind.AUTHENTICATION, cause)

    @classmethod
    def config_parse(cls, cause: Cause) -> Error:
        return cls(ErrorKind.CONFIG_PARSE, cause)

    @classmethod
    def config(cls, cause: Cause) -> Error:
        return cls(ErrorKind.CONFIG, cause)

    @classmethod
    def connect(cls, cause: Cause) -> Error:
        return cls(ErrorKind.CONNECT, cause)