"""MongoDB condition builder and query executor."""

from mongo_scoop.aggregation import Aggregation
from mongo_scoop.builders import (
    and_,
    between,
    equal,
    gt,
    gte,
    in_,
    left_like,
    like,
    lt,
    lte,
    ne,
    new_cond,
    not_between,
    not_in,
    not_left_like,
    not_like,
    not_right_like,
    or_,
    or_where,
    right_like,
    where,
)
from mongo_scoop.client import Client
from mongo_scoop.cond import Cond
from mongo_scoop.exceptions import (
    ConfigurationError,
    DatabaseError,
    DocumentNotFoundError,
    InvalidArgumentError,
    MongoScoopError,
    TransactionError,
)
from mongo_scoop.model import Model
from mongo_scoop.operators import Operator, get_op
from mongo_scoop.registry import CollectionRegistry
from mongo_scoop.scoop import Scoop

__all__ = [
    # Condition builder
    "Cond",
    "Operator",
    "get_op",
    "new_cond",
    "where",
    "and_",
    "or_where",
    "or_",
    "equal",
    "ne",
    "gt",
    "gte",
    "lt",
    "lte",
    "in_",
    "not_in",
    "like",
    "left_like",
    "right_like",
    "not_like",
    "not_left_like",
    "not_right_like",
    "between",
    "not_between",
    # Execution
    "Aggregation",
    "Client",
    "CollectionRegistry",
    "Model",
    "Scoop",
    # Exceptions
    "MongoScoopError",
    "InvalidArgumentError",
    "ConfigurationError",
    "DatabaseError",
    "TransactionError",
    "DocumentNotFoundError",
]
