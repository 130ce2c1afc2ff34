"""Condition builder producing MongoDB query documents."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Optional

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
from mongo_scoop.operators import Operator, build_condition, get_op


class Cond:
    """MongoDB condition builder.

    Accepts the call shapes understood by ``parse_arguments`` and keeps an
    ordered list of condition documents combined with AND (flat merge, later
    keys win) or OR (``$or`` list).

    Example:
        >>> Cond().where("age >", 18).where({"status": "active"}).to_bson()
        {'age': {'$gt': 18}, 'status': 'active'}
    """

    def __init__(self, is_or: bool = False) -> None:
        self._conds: List[Dict[str, Any]] = []
        self.is_or = is_or
        # set when a caller passes a literal False guard
        self.skip = False

    @property
    def conds(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._conds)

    def is_empty(self) -> bool:
        return not self._conds

    # ------------------------------------------------------------------
    # dispatch

    def _append(self, doc: Optional[Dict[str, Any]]) -> None:
        if doc is not None:
            self._conds.append(doc)

    def _add_cond(self, field: str, op: Any, value: Any) -> None:
        self._conds.append(build_condition(field, op, value))

    def _merge_sub(self, sub: "Cond") -> None:
        if sub.skip:
            self.skip = True
        # to_bson already returns a detached copy
        self._append(sub.to_bson())

    def _apply(self, arguments: Iterable[Any]) -> None:
        for argument in arguments:
            if isinstance(argument, SubBuilder):
                self._merge_sub(argument.cond)
            elif isinstance(argument, Guard):
                if not argument.enabled:
                    self.skip = True
            elif isinstance(argument, BareField):
                continue
            elif isinstance(argument, FieldValue):
                field, op = get_op(argument.field)
                self._add_cond(field, op, argument.value)
            elif isinstance(argument, FieldOpValue):
                self._add_cond(argument.field, argument.op, argument.value)
            elif isinstance(argument, FieldMap):
                for key, value in argument.conditions.items():
                    field, op = get_op(key)
                    self._add_cond(field, op, value)
            elif isinstance(argument, ConditionList):
                self._apply(argument.items)
            elif isinstance(argument, ConditionGroup):
                sub = Cond()
                sub._apply(argument.arguments)
                self._merge_sub(sub)
            else:
                raise InvalidArgumentError(f"unhandled argument: {type(argument).__name__}")

    def _add_sub_where(self, is_or: bool, arguments: List[Any]) -> None:
        sub = Cond(is_or=is_or)
        sub._apply(arguments)
        self._merge_sub(sub)

    # ------------------------------------------------------------------
    # combinators

    def where(self, *args: Any) -> "Cond":
        """Add AND conditions. Accepts every shape ``parse_arguments`` does."""
        self._add_sub_where(False, parse_arguments(*args))
        return self

    def or_where(self, *args: Any) -> "Cond":
        """Add a group whose elements are combined with ``$or``."""
        self._add_sub_where(True, parse_arguments(*args))
        return self

    or_ = or_where

    def apply(self, *arguments: Any) -> "Cond":
        """Add already classified query arguments as an AND group."""
        self._add_sub_where(False, list(arguments))
        return self

    # ------------------------------------------------------------------
    # fluent operators

    def _op(self, column: str, operator: Operator, value: Any) -> "Cond":
        self._apply([FieldOpValue(field=column, op=operator.value, value=value)])
        return self

    def equal(self, column: str, value: Any) -> "Cond":
        return self._op(column, Operator.EQ, value)

    def ne(self, column: str, value: Any) -> "Cond":
        return self._op(column, Operator.NE, value)

    def gt(self, column: str, value: Any) -> "Cond":
        return self._op(column, Operator.GT, value)

    def lt(self, column: str, value: Any) -> "Cond":
        return self._op(column, Operator.LT, value)

    def gte(self, column: str, value: Any) -> "Cond":
        return self._op(column, Operator.GTE, value)

    def lte(self, column: str, value: Any) -> "Cond":
        return self._op(column, Operator.LTE, value)

    @staticmethod
    def _values(values: tuple) -> List[Any]:
        if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
            return list(values[0])
        return list(values)

    def in_(self, column: str, *values: Any) -> "Cond":
        """``$in`` condition. ``in_("role", "a", "b")`` and ``in_("role", ["a", "b"])`` are equivalent."""
        return self._op(column, Operator.IN, self._values(values))

    def not_in(self, column: str, *values: Any) -> "Cond":
        return self._op(column, Operator.NOT_IN, self._values(values))

    def between(self, column: str, low: Any, high: Any) -> "Cond":
        """Inclusive range, ``{column: {"$gte": low, "$lte": high}}``."""
        return self._op(column, Operator.BETWEEN, [low, high])

    def not_between(self, column: str, low: Any, high: Any) -> "Cond":
        return self._op(column, Operator.NOT_BETWEEN, [low, high])

    def _like(self, column: str, operator: Operator, pattern: str) -> "Cond":
        # empty pattern matches everything
        if not pattern:
            return self
        return self._op(column, operator, pattern)

    def like(self, column: str, pattern: str) -> "Cond":
        """Case-insensitive regex match anywhere in the value."""
        return self._like(column, Operator.LIKE, pattern)

    def left_like(self, column: str, pattern: str) -> "Cond":
        return self._like(column, Operator.LEFT_LIKE, pattern)

    def right_like(self, column: str, pattern: str) -> "Cond":
        return self._like(column, Operator.RIGHT_LIKE, pattern)

    def not_like(self, column: str, pattern: str) -> "Cond":
        return self._like(column, Operator.NOT_LIKE, pattern)

    def not_left_like(self, column: str, pattern: str) -> "Cond":
        return self._like(column, Operator.NOT_LEFT_LIKE, pattern)

    def not_right_like(self, column: str, pattern: str) -> "Cond":
        return self._like(column, Operator.NOT_RIGHT_LIKE, pattern)

    # ------------------------------------------------------------------
    # serialization

    def to_bson(self) -> Optional[Dict[str, Any]]:
        """Serialize to a query document.

        Returns ``None`` when no condition was added. A single element is
        returned unwrapped, several elements are merged (AND, later keys
        overwrite earlier ones) or listed under ``$or``. The returned document
        shares no nested values with the builder.
        """
        if not self._conds:
            return None

        conds = copy.deepcopy(self._conds)
        if len(conds) == 1:
            return conds[0]

        if self.is_or:
            return {"$or": conds}

        result: Dict[str, Any] = {}
        for cond in conds:
            result.update(cond)
        return result

    def clone(self) -> "Cond":
        """Deep copy, so the clone's condition documents never alias ours."""
        cloned = Cond(is_or=self.is_or)
        cloned._conds = copy.deepcopy(self._conds)
        cloned.skip = self.skip
        return cloned

    def reset(self) -> "Cond":
        self._conds.clear()
        self.is_or = False
        self.skip = False
        return self

    def __str__(self) -> str:
        doc = self.to_bson()
        if doc is None:
            return "{}"
        return str(doc)

    def __repr__(self) -> str:
        return f"Cond(is_or={self.is_or}, skip={self.skip}, conds={self._conds!r})"
