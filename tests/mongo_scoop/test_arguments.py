"""Tests for classifying loosely-typed builder arguments."""

import pytest

from mongo_scoop.cond import Cond
from mongo_scoop.exceptions import InvalidArgumentError
from mongo_scoop.models.arguments import (
    BareField,
    ConditionGroup,
    ConditionList,
    FieldMap,
    FieldOpValue,
    FieldValue,
    Guard,
    SubBuilder,
    parse_arguments,
)


def test_no_arguments():
    assert parse_arguments() == []


def test_string_shapes():
    """Test the three accepted arities of the field-string shape"""
    assert parse_arguments("age") == [BareField(field="age")]
    assert parse_arguments("age >", 3) == [FieldValue(field="age >", value=3)]
    assert parse_arguments("age", ">", 3) == [FieldOpValue(field="age", op=">", value=3)]


def test_string_shape_bad_arity():
    with pytest.raises(InvalidArgumentError):
        parse_arguments("age", ">", 3, 4)


def test_string_shape_operator_must_be_string():
    with pytest.raises(InvalidArgumentError):
        parse_arguments("age", 1, 3)


@pytest.mark.parametrize("enabled", [True, False])
def test_guard_ends_the_call(enabled):
    """Test that a boolean guard is classified before anything else and consumes the call"""
    arguments = parse_arguments(enabled, "age", 3)

    assert arguments == [Guard(enabled=enabled)]


def test_sub_builder():
    cond = Cond().equal("a", 1)
    arguments = parse_arguments(cond, {"b": 2})

    assert isinstance(arguments[0], SubBuilder)
    assert arguments[0].cond is cond
    assert arguments[1] == FieldMap(conditions={"b": 2})


def test_map_requires_string_keys():
    with pytest.raises(InvalidArgumentError):
        parse_arguments({1: "x"})


def test_flattened_list():
    """Test that a list starting with a string is one flattened call"""
    arguments = parse_arguments(["age", ">", 18])

    assert arguments == [ConditionList(items=[FieldOpValue(field="age", op=">", value=18)])]


def test_list_elements():
    """Test that maps become groups while nested lists and scalars are inlined"""
    arguments = parse_arguments([{"a": 1}, ["b", 2], False])

    assert len(arguments) == 1
    items = arguments[0].items
    assert items[0] == ConditionGroup(arguments=[FieldMap(conditions={"a": 1})])
    assert items[1] == FieldValue(field="b", value=2)
    assert items[2] == Guard(enabled=False)


def test_empty_list():
    assert parse_arguments([]) == [ConditionList()]


@pytest.mark.parametrize("value", [42, 3.5, None, object(), {"a", "b"}])
def test_unsupported_first_argument(value):
    """Test that unsupported kinds fail and name the offending type"""
    with pytest.raises(InvalidArgumentError, match=type(value).__name__):
        parse_arguments(value)


def test_list_with_unsupported_scalar():
    with pytest.raises(InvalidArgumentError):
        parse_arguments([{"a": 1}, 7])
