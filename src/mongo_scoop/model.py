"""Typed model wrapper binding a pydantic model to its collection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from mongo_scoop.exceptions import DocumentNotFoundError
from mongo_scoop.scoop import Scoop

if TYPE_CHECKING:
    from mongo_scoop.client import Client

M = TypeVar("M", bound=BaseModel)


class Model(Generic[M]):
    """Model metadata plus a factory for scoops that decode into ``M``."""

    def __init__(self, client: "Client", model: Type[M]) -> None:
        self.client = client
        self.model = model
        self.collection_name = client.registry.collection_name(model)
        self.not_found_error: Type[Exception] = DocumentNotFoundError

    def new_scoop(self, tx: Optional[Scoop] = None) -> Scoop:
        scoop = self.client.new_scoop(tx, model=self.model)
        return scoop.set_not_found(self.not_found_error)

    def set_not_found(self, error: Type[Exception]) -> "Model[M]":
        self.not_found_error = error
        return self

    def is_not_found(self, error: Exception) -> bool:
        return isinstance(error, (self.not_found_error, DocumentNotFoundError))
