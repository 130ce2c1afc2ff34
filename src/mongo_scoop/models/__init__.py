"""Models for the mongo_scoop package."""

from mongo_scoop.models.arguments import (
    BareField,
    ConditionGroup,
    ConditionList,
    FieldMap,
    FieldOpValue,
    FieldValue,
    Guard,
    QueryArgument,
    SubBuilder,
    parse_arguments,
)
from mongo_scoop.models.pagination import ListOption, Paginate

__all__ = [
    # Query arguments
    "BareField",
    "ConditionGroup",
    "ConditionList",
    "FieldMap",
    "FieldOpValue",
    "FieldValue",
    "Guard",
    "QueryArgument",
    "SubBuilder",
    "parse_arguments",
    # Pagination
    "ListOption",
    "Paginate",
]
