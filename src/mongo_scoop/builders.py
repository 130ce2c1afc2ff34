"""Shortcuts that start a new ``Cond`` from a single call."""

from typing import Any

from mongo_scoop.cond import Cond


def new_cond() -> Cond:
    return Cond()


def where(*args: Any) -> Cond:
    """New condition with AND conditions."""
    return Cond().where(*args)


def and_(*args: Any) -> Cond:
    return Cond().where(*args)


def or_where(*args: Any) -> Cond:
    """New condition with an OR group."""
    return Cond().or_where(*args)


or_ = or_where


def equal(column: str, value: Any) -> Cond:
    return Cond().equal(column, value)


def ne(column: str, value: Any) -> Cond:
    return Cond().ne(column, value)


def gt(column: str, value: Any) -> Cond:
    return Cond().gt(column, value)


def lt(column: str, value: Any) -> Cond:
    return Cond().lt(column, value)


def gte(column: str, value: Any) -> Cond:
    return Cond().gte(column, value)


def lte(column: str, value: Any) -> Cond:
    return Cond().lte(column, value)


def in_(column: str, *values: Any) -> Cond:
    return Cond().in_(column, *values)


def not_in(column: str, *values: Any) -> Cond:
    return Cond().not_in(column, *values)


def like(column: str, pattern: str) -> Cond:
    return Cond().like(column, pattern)


def left_like(column: str, pattern: str) -> Cond:
    return Cond().left_like(column, pattern)


def right_like(column: str, pattern: str) -> Cond:
    return Cond().right_like(column, pattern)


def not_like(column: str, pattern: str) -> Cond:
    return Cond().not_like(column, pattern)


def not_left_like(column: str, pattern: str) -> Cond:
    return Cond().not_left_like(column, pattern)


def not_right_like(column: str, pattern: str) -> Cond:
    return Cond().not_right_like(column, pattern)


def between(column: str, low: Any, high: Any) -> Cond:
    return Cond().between(column, low, high)


def not_between(column: str, low: Any, high: Any) -> Cond:
    return Cond().not_between(column, low, high)
