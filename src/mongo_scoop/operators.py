"""Operator vocabulary and field-token parsing for condition documents."""

from enum import Enum
from typing import Any, Dict, Sequence, Tuple

from mongo_scoop.exceptions import InvalidArgumentError

DEFAULT_OP = "="

# Field operators forwarded to MongoDB unchanged.
PASSTHROUGH_OPERATORS = frozenset({"$exists", "$all", "$size", "$elemMatch", "$type", "$mod", "$regex", "$not"})
_PASSTHROUGH_BY_NAME = {op.lower(): op for op in PASSTHROUGH_OPERATORS}


class Operator(str, Enum):
    """Supported comparison operators."""

    EQ = "$eq"
    NE = "$ne"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    IN = "$in"
    NOT_IN = "$nin"
    LIKE = "like"
    LEFT_LIKE = "left like"
    RIGHT_LIKE = "right like"
    NOT_LIKE = "not like"
    NOT_LEFT_LIKE = "not left like"
    NOT_RIGHT_LIKE = "not right like"
    BETWEEN = "between"
    NOT_BETWEEN = "not between"


OPERATOR_ALIASES: Dict[str, Operator] = {
    "=": Operator.EQ,
    "==": Operator.EQ,
    "eq": Operator.EQ,
    "!=": Operator.NE,
    "<>": Operator.NE,
    "ne": Operator.NE,
    ">": Operator.GT,
    "gt": Operator.GT,
    ">=": Operator.GTE,
    "gte": Operator.GTE,
    "<": Operator.LT,
    "lt": Operator.LT,
    "<=": Operator.LTE,
    "lte": Operator.LTE,
    "in": Operator.IN,
    "not in": Operator.NOT_IN,
    "nin": Operator.NOT_IN,
}

_COMPARISON_OPERATORS = frozenset({Operator.NE, Operator.GT, Operator.GTE, Operator.LT, Operator.LTE})
_MEMBERSHIP_OPERATORS = frozenset({Operator.IN, Operator.NOT_IN})
_NEGATED_LIKE = {
    Operator.NOT_LIKE: Operator.LIKE,
    Operator.NOT_LEFT_LIKE: Operator.LEFT_LIKE,
    Operator.NOT_RIGHT_LIKE: Operator.RIGHT_LIKE,
}


def _is_field_char(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or ("0" <= c <= "9") or c in "_."


def get_op(token: str) -> Tuple[str, str]:
    """Split an embedded operator off a field token.

    ``"age >"`` gives ``("age", ">")`` and ``"age"`` gives ``("age", "=")``.
    A token whose very first character is already outside the field alphabet
    (such as ``"$or"``) is returned whole so raw operator keys survive.
    """
    for idx, c in enumerate(token):
        if _is_field_char(c):
            continue
        if idx == 0:
            break
        op = token[idx:].strip()
        return token[:idx], op or DEFAULT_OP
    return token, DEFAULT_OP


def resolve_operator(op: str) -> Any:
    """Map a textual operator onto an ``Operator`` or a pass-through symbol."""
    if op is None or not str(op).strip():
        raise InvalidArgumentError("operator must not be empty")

    raw = str(op).strip()
    normalized = " ".join(raw.lower().split())
    if normalized in _PASSTHROUGH_BY_NAME:
        return _PASSTHROUGH_BY_NAME[normalized]

    if normalized in OPERATOR_ALIASES:
        return OPERATOR_ALIASES[normalized]
    for operator in Operator:
        if operator.value == normalized:
            return operator
    raise InvalidArgumentError(f"unsupported operator '{raw}'")


def like_pattern(operator: Operator, pattern: str) -> Dict[str, Any]:
    """Build the case-insensitive regex document for a like-family operator."""
    pattern = str(pattern)
    if operator in (Operator.LEFT_LIKE, Operator.NOT_LEFT_LIKE):
        pattern = pattern + ".*"
    elif operator in (Operator.RIGHT_LIKE, Operator.NOT_RIGHT_LIKE):
        pattern = ".*" + pattern
    return {"$regex": pattern, "$options": "i"}


def _range_bounds(field: str, value: Any) -> Sequence[Any]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidArgumentError(f"between on field '{field}' requires a [min, max] pair")
    return value


def build_condition(field: str, op: Any, value: Any) -> Dict[str, Any]:
    """Build a single primitive condition document.

    Args:
        field: Dot-separated field path.
        op: Textual operator, ``Operator`` member or pass-through symbol.
        value: Right-hand side of the comparison.

    Returns:
        A single-key dictionary, e.g. ``{"age": {"$gte": 18}}``.
    """
    if not field:
        raise InvalidArgumentError("field name must not be empty")

    operator = op if isinstance(op, Operator) else resolve_operator(op)

    if operator == Operator.EQ:
        return {field: value}
    if operator in _COMPARISON_OPERATORS:
        return {field: {operator.value: value}}
    if operator in _MEMBERSHIP_OPERATORS:
        if isinstance(value, (list, tuple, set, frozenset)):
            value = list(value)
        else:
            value = [value]
        return {field: {operator.value: value}}
    if operator in (Operator.LIKE, Operator.LEFT_LIKE, Operator.RIGHT_LIKE):
        return {field: like_pattern(operator, value)}
    if operator in _NEGATED_LIKE:
        return {field: {"$not": like_pattern(operator, value)}}
    if operator == Operator.BETWEEN:
        low, high = _range_bounds(field, value)
        return {field: {"$gte": low, "$lte": high}}
    if operator == Operator.NOT_BETWEEN:
        low, high = _range_bounds(field, value)
        return {field: {"$not": {"$gte": low, "$lte": high}}}

    # pass-through symbol
    return {field: {operator: value}}
