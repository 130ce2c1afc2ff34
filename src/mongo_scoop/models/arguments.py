"""Tagged query-argument variants accepted by the condition builder."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mongo_scoop.exceptions import InvalidArgumentError


class _Argument(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class FieldValue(_Argument):
    """Equality on a field token that may embed an operator (``"age >"``)."""

    kind: Literal["field_value"] = "field_value"
    field: str = Field(description="Field name, optionally followed by an operator")
    value: Any = Field(description="Right-hand side of the condition")


class FieldOpValue(_Argument):
    """Explicit field, operator and value triple."""

    kind: Literal["field_op_value"] = "field_op_value"
    field: str = Field(description="Field name")
    op: str = Field(description="Operator, e.g. '>', '$gte', 'not in'")
    value: Any = Field(description="Right-hand side of the condition")


class BareField(_Argument):
    """A lone field name. Carries no value and adds nothing."""

    kind: Literal["bare_field"] = "bare_field"
    field: str


class FieldMap(_Argument):
    """Mapping of field tokens to values, AND'd into the current tree."""

    kind: Literal["field_map"] = "field_map"
    conditions: Dict[str, Any] = Field(description="Field token -> value")


class SubBuilder(_Argument):
    """An already built condition builder embedded as one element."""

    kind: Literal["sub_builder"] = "sub_builder"
    cond: Any = Field(description="A Cond instance")


class Guard(_Argument):
    """Boolean guard. ``False`` marks the whole tree as skipped."""

    kind: Literal["guard"] = "guard"
    enabled: bool


class ConditionGroup(_Argument):
    """Arguments resolved in their own AND sub-tree and appended as one element."""

    kind: Literal["condition_group"] = "condition_group"
    arguments: List["QueryArgument"] = Field(default_factory=list)


class ConditionList(_Argument):
    """Arguments that came from a list and are applied to the current tree."""

    kind: Literal["condition_list"] = "condition_list"
    items: List["QueryArgument"] = Field(default_factory=list)


QueryArgument = Annotated[
    Union[FieldValue, FieldOpValue, BareField, FieldMap, SubBuilder, Guard, ConditionGroup, ConditionList],
    Field(discriminator="kind"),
]

ConditionGroup.model_rebuild()
ConditionList.model_rebuild()


def _parse_sequence(values: Union[list, tuple]) -> ConditionList:
    if not values:
        return ConditionList()

    # ["age", ">", 18] is one flattened call
    if isinstance(values[0], str):
        return ConditionList(items=parse_arguments(*values))

    items: List[Any] = []
    for element in values:
        if isinstance(element, Mapping):
            items.append(ConditionGroup(arguments=parse_arguments(element)))
        elif isinstance(element, (list, tuple)):
            items.extend(parse_arguments(*element))
        else:
            items.extend(parse_arguments(element))
    return ConditionList(items=items)


def parse_arguments(*args: Any) -> List[Any]:
    """Classify loosely-typed positional arguments into query arguments.

    Shapes are checked in priority order: nested builder, boolean guard,
    field string, mapping, then list/tuple. A guard consumes the whole call;
    arguments left over after a builder, mapping or list are parsed as a
    separate call.

    Raises:
        InvalidArgumentError: If the call shape is malformed.
    """
    if not args:
        return []

    # local import, cond imports this module
    from mongo_scoop.cond import Cond

    first, rest = args[0], args[1:]

    if isinstance(first, Cond):
        return [SubBuilder(cond=first)] + parse_arguments(*rest)

    if isinstance(first, bool):
        # a guard ends the call
        return [Guard(enabled=first)]

    if isinstance(first, str):
        if len(args) == 1:
            return [BareField(field=first)]
        if len(args) == 2:
            return [FieldValue(field=first, value=args[1])]
        if len(args) == 3:
            if not isinstance(args[1], str):
                raise InvalidArgumentError(f"operator for field '{first}' must be a string, got {type(args[1]).__name__}")
            return [FieldOpValue(field=first, op=args[1], value=args[2])]
        raise InvalidArgumentError(f"invalid number of where args {len(args)} by `string` prefix")

    if isinstance(first, Mapping):
        for key in first:
            if not isinstance(key, str):
                raise InvalidArgumentError(f"map key type required string, but got {type(key).__name__}")
        return [FieldMap(conditions=dict(first))] + parse_arguments(*rest)

    if isinstance(first, (list, tuple)):
        return [_parse_sequence(first)] + parse_arguments(*rest)

    raise InvalidArgumentError(f"unhandled type: {type(first).__name__}")
