import pytest

from pgcore.error import (
    DbError,
    Error,
    ErrorFieldsError,
    ErrorKind,
    InternalPosition,
    OriginalPosition,
    Severity,
)
from pgcore.sqlstate import SqlState

BASE = [("S", "ERROR"), ("C", "23505"), ("M", "duplicate key")]


def test_severity_parse_known_and_unknown():
    assert Severity.parse("FATAL") is Severity.FATAL
    assert Severity.parse("fatal") is None
    assert str(Severity.LOG) == "LOG"


def test_parse_minimal():
    err = DbError.parse(BASE)
    assert err.severity == "ERROR"
    assert err.code == SqlState.UNIQUE_VIOLATION
    assert err.message == "duplicate key"
    assert err.detail is None
    assert err.position is None
    assert err.parsed_severity is None


def test_parse_all_text_fields():
    fields = BASE + [
        ("D", "detail text"),
        ("H", "hint text"),
        ("W", "where text"),
        ("s", "public"),
        ("t", "users"),
        ("c", "id"),
        ("d", "int4"),
        ("n", "users_pkey"),
        ("F", "nbtinsert.c"),
        ("L", "434"),
        ("R", "_bt_check_unique"),
        ("V", "ERROR"),
        ("Z", "ignored"),
    ]
    err = DbError.parse(fields)
    assert err.detail == "detail text"
    assert err.hint == "hint text"
    assert err.where == "where text"
    assert (err.schema, err.table, err.column) == ("public", "users", "id")
    assert (err.datatype, err.constraint) == ("int4", "users_pkey")
    assert err.file == "nbtinsert.c"
    assert err.line == 434
    assert err.routine == "_bt_check_unique"
    assert err.parsed_severity is Severity.ERROR


def test_parse_accepts_byte_field_types():
    err = DbError.parse([(ord("S"), "NOTICE"), (ord("C"), "00000"), (ord("M"), "hi")])
    assert err.code == SqlState.SUCCESSFUL_COMPLETION
    assert str(err) == "NOTICE: hi"


@pytest.mark.parametrize(
    "missing, text",
    [("S", "`S` field missing"), ("C", "`C` field missing"), ("M", "`M` field missing")],
)
def test_parse_missing_required(missing, text):
    fields = [f for f in BASE if f[0] != missing]
    with pytest.raises(ErrorFieldsError) as info:
        DbError.parse(fields)
    assert str(info.value) == text


@pytest.mark.parametrize("field", ["P", "p", "L"])
def test_parse_non_integer(field):
    with pytest.raises(ErrorFieldsError) as info:
        DbError.parse(BASE + [(field, "abc")])
    assert str(info.value) == f"`{field}` field did not contain an integer"


def test_parse_integer_out_of_range():
    with pytest.raises(ErrorFieldsError):
        DbError.parse(BASE + [("L", "4294967296")])


def test_parse_invalid_severity():
    with pytest.raises(ErrorFieldsError) as info:
        DbError.parse(BASE + [("V", "BOGUS")])
    assert str(info.value) == "`V` field contained an invalid value"


def test_original_position_wins():
    err = DbError.parse(BASE + [("P", "7"), ("p", "3"), ("q", "SELECT 1")])
    assert err.position == OriginalPosition(7)


def test_internal_position():
    err = DbError.parse(BASE + [("p", "3"), ("q", "SELECT 1")])
    assert err.position == InternalPosition(3, "SELECT 1")


def test_internal_position_without_query():
    with pytest.raises(ErrorFieldsError) as info:
        DbError.parse(BASE + [("p", "3")])
    assert str(info.value) == "`q` field missing but `p` field present"


def test_unknown_code_kept():
    err = DbError.parse([("S", "ERROR"), ("C", "ZZ999"), ("M", "x")])
    assert err.code.code == "ZZ999"


def test_db_error_equality():
    expected = DbError(
        severity="ERROR",
        code=SqlState.UNIQUE_VIOLATION,
        message="duplicate key",
    )
    assert DbError.parse(BASE) == expected
    assert not DbError.parse(BASE + [("D", "more")]) == expected


def test_error_db_wraps_db_error():
    err = Error.db(BASE)
    assert err.kind is ErrorKind.DB
    assert err.code == SqlState.UNIQUE_VIOLATION
    assert str(err) == "db error: ERROR: duplicate key"
    assert isinstance(err.__cause__, DbError)


def test_error_db_bad_fields_is_parse_error():
    err = Error.db([("S", "ERROR")])
    assert err.kind is ErrorKind.PARSE
    assert err.code is None
    assert str(err) == "error parsing response from server: `C` field missing"


def test_error_without_cause():
    assert str(Error.closed()) == "connection closed"
    assert str(Error.unexpected_message()) == "unexpected message from server"
    assert str(Error.column()) == "invalid column"
    assert Error.closed().source is None


def test_error_indexed():
    cause = ValueError("bad")
    assert str(Error.to_sql(cause, 2)) == "error serializing parameter 2: bad"
    assert str(Error.from_sql(cause, 0)) == "error deserializing column 0: bad"
    assert Error.to_sql(cause, 2).index == 2


@pytest.mark.parametrize(
    "factory, kind",
    [
        (Error.parse, ErrorKind.PARSE),
        (Error.encode, ErrorKind.ENCODE),
        (Error.copy_in_stream, ErrorKind.COPY_IN_STREAM),
        (Error.tls, ErrorKind.TLS),
        (Error.io, ErrorKind.IO),
        (Error.authentication, ErrorKind.AUTHENTICATION),
        (Error.config_parse, ErrorKind.CONFIG_PARSE),
        (Error.config, ErrorKind.CONFIG),
        (Error.connect, ErrorKind.CONNECT),
    ],
)
def test_error_with_cause(factory, kind):
    cause = OSError("boom")
    err = factory(cause)
    assert err.kind is kind
    assert err.source is cause
    assert err.__cause__ is cause
    assert str(err) == f"{kind.value}: boom"
    assert err.code is None


def test_copy_in_stream_string_cause():
    err = Error.copy_in_stream("stream broke")
    assert str(err) == "error from a copy_in stream: stream broke"
    assert err.source == "stream broke"


def test_error_is_raisable():
    err = Error.io(OSError("boom"))
    with pytest.raises(Error) as info:
        raise err
    assert info.value is err
    assert info.value.kind is ErrorKind.IO
    assert repr(err) == "Error(kind=IO, cause=OSError('boom'))"