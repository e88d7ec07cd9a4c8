# pgcore

This package holds the parts of a PostgreSQL client that need no socket.
It covers SQLSTATE codes, errors and notices parsed from the server, the
exception type a client raises, and the values a connection hands out.

## Installation

```
pip install pgcore
```

To run the tests:

```
pip install "pgcore[test]"
pytest
```

## SQLSTATE codes

`pgcore.codes` maps between five-character codes and their symbolic names.
The read-only mapping `CODES` takes every name to its code.

```python
from pgcore.codes import name_for, code_for

name_for("23505")             # "UNIQUE_VIOLATION"
name_for("ZZ999")             # None
code_for("UNIQUE_VIOLATION")  # "23505"
code_for("NO_SUCH_NAME")      # raises KeyError
```

Some codes have more than one name. `UNDEFINED_DATABASE` and
`INVALID_CATALOG_NAME` are both `3D000`, for example. For such a code,
`name_for` returns the name that comes first in the table.

`pgcore.sqlstate.SqlState` is a frozen value that wraps a code. Each known
code is also a class attribute, such as `SqlState.UNIQUE_VIOLATION`. Two
values are equal when their codes are equal. `from_code` returns the
shared value for a known code and makes a new value for any other code.

```python
from pgcore.sqlstate import SqlState

state = SqlState.from_code("23505")
state == SqlState.UNIQUE_VIOLATION   # True
state.name                           # "UNIQUE_VIOLATION"
str(state)                           # "23505"
SqlState.from_code("ZZ999").code     # "ZZ999"
SqlState.from_code("ZZ999").name     # None
```

## Server errors and notices

`pgcore.error.DbError.parse` builds an error from the `(field type, value)`
pairs of an ErrorResponse or NoticeResponse message. A field type can be
a one-character string or its byte value. Unknown field types are ignored,
and a later field replaces an earlier one of the same type.

The `S`, `C` and `M` fields are required. The `P`, `p` and `L` fields must
be unsigned 32-bit integers, and `V` must name a `Severity`. If `p` is
given without `P`, a `q` field must be present too. When any of these
rules is broken, `ErrorFieldsError` is raised. It is a subclass of
`ValueError`.

```python
from pgcore.error import DbError, Severity

err = DbError.parse([
    ("S", "ERROR"),
    ("V", "ERROR"),
    ("C", "42P01"),
    ("M", 'relation "foo" does not exist'),
    ("P", "15"),
])
str(err)              # 'ERROR: relation "foo" does not exist'
err.parsed_severity   # Severity.ERROR
err.position          # OriginalPosition(position=15)
```

The position of an error inside a query that the server generated comes
back as `InternalPosition(position, query)`. `DbError` also has the
`detail`, `hint`, `where`, `schema`, `table`, `column`, `datatype`,
`constraint`, `file`, `line` and `routine` fields. Each of these is `None`
when the server did not send it. `DbError` is an exception, so it can be
raised directly.

## The client error

`pgcore.error.Error` is the exception a client raises. It has these
constructors:

- `closed()`, `unexpected_message()` and `column()`
- `db(fields)`
- `parse(cause)`, `encode(cause)`, `io(cause)`, `tls(cause)`,
  `authentication(cause)`, `config_parse(cause)`, `config(cause)`,
  `connect(cause)` and `copy_in_stream(cause)`
- `to_sql(cause, index)` and `from_sql(cause, index)`

Each error records its `kind` (an `ErrorKind`), its `source` (the cause)
and, for `to_sql` and `from_sql`, an `index`. When the cause is an
exception, it is also set as `__cause__`. `Error.db` parses its fields
with `DbError.parse`. If the fields are malformed, it returns an error of
kind `PARSE` instead.

```python
from pgcore.error import Error

exc = Error.db([("S", "ERROR"), ("C", "23505"), ("M", "duplicate key")])
str(exc)    # "db error: ERROR: duplicate key"
exc.code    # SqlState.UNIQUE_VIOLATION; None unless the source is a DbError

str(Error.to_sql("bad value", 2))  # "error serializing parameter 2: bad value"
str(Error.closed())                # "connection closed"
```

## Messages

`pgcore.messages` defines the values a connection hands out:

- `Notification(process_id, channel, payload)`, a notification sent on a
  `LISTEN` channel. The process id must fit in a signed 32-bit integer.
- `Notice(error)`, a notice that wraps a `DbError`.
- `RowMessage(row)`, a row returned by a simple query.
- `CommandComplete(rows)`, which ends one statement in a simple query.
  The row count must fit in an unsigned 64-bit integer.

Values that are out of range raise `ValueError`.

`next_statement()` and `next_portal()` give names for prepared statements
(`s0`, `s1`, …) and portals (`p0`, `p1`, …). Each name is unique within
the process, and both functions are safe to call from several threads.

## What this package does not do

This package does not connect to a server. It does not speak the wire
protocol, prepare or run queries, or handle TLS or authentication. It
supplies the values and errors that code doing those things works with.