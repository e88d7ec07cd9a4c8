import pytest

from pgcore.codes import CODES
from pgcore.sqlstate import SqlState


def test_from_code_known_returns_named_constant():
    assert SqlState.from_code("23505") == SqlState.UNIQUE_VIOLATION
    assert SqlState.from_code("23505") is SqlState.UNIQUE_VIOLATION


@pytest.mark.parametrize(
    "name,value",
    [
        ("UNIQUE_VIOLATION", "23505"),
        ("SUCCESSFUL_COMPLETION", "00000"),
        ("INDEX_CORRUPTED", "XX002"),
    ],
)
def test_constant_holds_its_code(name, value):
    state = SqlState.from_code(value)
    assert state == getattr(SqlState, name)
    assert state.code == value
    assert state.name == name


def test_from_code_unknown_keeps_code():
    state = SqlState.from_code("ZZ999")
    assert state.code == "ZZ999"
    assert state.name is None
    assert state == SqlState("ZZ999")


def test_aliases_compare_equal():
    assert SqlState.ARRAY_ELEMENT_ERROR == SqlState.ARRAY_SUBSCRIPT_ERROR
    assert SqlState.UNDEFINED_DATABASE == SqlState.INVALID_CATALOG_NAME
    assert SqlState.from_code("2202E") == SqlState.ARRAY_SUBSCRIPT_ERROR


def test_distinct_codes_differ():
    unique = SqlState.from_code("23505")
    foreign = SqlState.from_code("23503")
    assert not unique == foreign
    assert unique.name == "UNIQUE_VIOLATION"
    assert foreign.name == "FOREIGN_KEY_VIOLATION"


@pytest.mark.parametrize("name,value", sorted(CODES.items()))
def test_every_name_is_an_attribute(name, value):
    state = getattr(SqlState, name)
    assert state.code == value
    assert SqlState.from_code(value) == state


def test_name_is_canonical():
    assert SqlState.from_code("42601").name == "SYNTAX_ERROR"
    assert SqlState.from_code("2202E").name == "ARRAY_ELEMENT_ERROR"


def test_str_is_code():
    assert str(SqlState.from_code("57014")) == "57014"


def test_hash_follows_equality():
    states = {SqlState.from_code("40001"), SqlState("40001"), SqlState.T_R_SERIALIZATION_FAILURE}
    assert len(states) == 1