"""SQLSTATE error codes as values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from pgcore.codes import CODES, name_for


@dataclass(frozen=True)
class SqlState:
    """A SQLSTATE error code.

    Every known code is also available as a class attribute named after it,
    for example ``SqlState.UNIQUE_VIOLATION``. Two values are equal when their
    codes are equal, so names that share a code compare equal.
    """

    code: str

    _known: ClassVar[dict[str, SqlState]]

    @classmethod
    def from_code(cls, code: str) -> SqlState:
        """Return the SqlState for a code, known or not."""
        known = cls._known.get(code)
        if known is not None:
            return known
        return cls(code)

    @property
    def name(self) -> str | None:
        """The canonical symbolic name of the code, or None if it is unknown."""
        return name_for(self.code)

    def __str__(self) -> str:
        return self.code


SqlState._known = {code: SqlState(code) for code in dict.fromkeys(CODES.values())}

for _name, _code in CODES.items():
    setattr(SqlState, _name, SqlState._known[_code])
del _name, _code