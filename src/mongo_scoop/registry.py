from __future__ import annotations

import re
import threading
from typing import Any, Dict, Type

from mongo_scoop.exceptions import ConfigurationError
from utils.logging import logger

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class CollectionRegistry:
    """
    Registry resolving model classes to collection names.

    Each client owns one registry; nothing is shared between clients.
    A model names its collection with a ``__collection__`` attribute or a
    ``collection()`` classmethod, otherwise the snake_case class name is used.
    """

    def __init__(self) -> None:
        self._names: Dict[Type[Any], str] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _resolve(model_cls: Type[Any]) -> str:
        name = getattr(model_cls, "__collection__", None)
        if name is None:
            collection = getattr(model_cls, "collection", None)
            if callable(collection):
                name = collection()
        if name is None:
            name = _CAMEL_BOUNDARY.sub("_", model_cls.__name__).lower()
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"cannot determine collection name for {model_cls.__name__}")
        return name

    def register(self, model_cls: Type[Any], name: str) -> None:
        """
        Pin a collection name for a model class.
        """
        if not name:
            raise ConfigurationError("collection name must not be empty")
        with self._lock:
            self._names[model_cls] = name
        logger.debug("Registered collection '%s' for %s.", name, model_cls.__name__)

    def collection_name(self, model: Any) -> str:
        """
        Return the collection name for a model class or instance.
        """
        model_cls = model if isinstance(model, type) else type(model)
        with self._lock:
            name = self._names.get(model_cls)
            if name is None:
                name = self._resolve(model_cls)
                self._names[model_cls] = name
        return name

    def clear(self) -> None:
        with self._lock:
            self._names.clear()

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, model_cls: Type[Any]) -> bool:
        return model_cls in self._names
