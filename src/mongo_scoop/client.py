"""MongoDB client wrapper owning the connection and the collection registry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Type, Union

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import CollectionInvalid, PyMongoError

from mongo_scoop.exceptions import DatabaseError
from mongo_scoop.registry import CollectionRegistry
from mongo_scoop.scoop import Scoop
from settings import MongoSettings
from utils.logging import logger


class Client:
    """Connection to one MongoDB database.

    Note: Use Client.setup() to create an instance whose connection has been verified.
    """

    def __init__(self, settings: Optional[MongoSettings] = None, mongodb_client: Optional[AsyncIOMotorClient] = None) -> None:
        self.settings = settings or MongoSettings()
        self.motor = mongodb_client or AsyncIOMotorClient(self.settings.build_uri(), **self.settings.client_kwargs())
        self.motor.get_io_loop = asyncio.get_running_loop
        self.registry = CollectionRegistry()
        if self.settings.debug:
            logger.setLevel(logging.DEBUG)
        self._db: AsyncIOMotorDatabase = self.motor.get_database(self.settings.database)

    @classmethod
    async def setup(cls, settings: Optional[MongoSettings] = None, mongodb_client: Optional[AsyncIOMotorClient] = None) -> "Client":
        """Create a client and ping the server."""
        client = cls(settings, mongodb_client)
        await client.ping()
        logger.info(f"Connected to MongoDB database '{client.settings.database}'")
        return client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self._db

    def collection(self, collection: Union[str, Type[Any]]) -> AsyncIOMotorCollection:
        """Return a collection by name or by model class."""
        name = collection if isinstance(collection, str) else self.registry.collection_name(collection)
        return self._db.get_collection(name)

    def new_scoop(self, tx: Optional[Scoop] = None, model: Optional[Type[Any]] = None) -> Scoop:
        """Create a scoop, inheriting the session of ``tx`` when given."""
        scoop = Scoop(client=self, session=tx.session if tx is not None else None)
        if model is not None:
            scoop.use_model(model)
        return scoop

    async def ping(self) -> None:
        try:
            await self.motor.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {str(e)}")
            raise DatabaseError(f"Failed to ping MongoDB: {str(e)}") from e

    async def health(self) -> None:
        try:
            await self.ping()
        except DatabaseError as e:
            raise DatabaseError(f"health check failed: {str(e)}") from e

    async def auto_migrate(self, *models: Type[Any]) -> None:
        """Ensure a collection, and its declared indexes, exist for every model."""
        for model in models:
            await self._auto_migrate_one(model)

    async def _auto_migrate_one(self, model: Type[Any]) -> None:
        name = self.registry.collection_name(model)
        logger.info(f"Auto migrate collection {name}")

        try:
            existing = await self._db.list_collection_names()
            if name not in existing:
                try:
                    await self._db.create_collection(name)
                    logger.info(f"Created collection {name}")
                except CollectionInvalid:
                    # created concurrently
                    pass

            indexes = getattr(model, "indexes", None)
            if callable(indexes):
                index_models = indexes()
                if index_models:
                    await self._db.get_collection(name).create_indexes(index_models)
                    logger.info(f"Created indexes for collection {name}")
        except PyMongoError as e:
            raise DatabaseError(f"Failed to migrate collection '{name}': {str(e)}") from e

    def close(self) -> None:
        self.motor.close()
        self.registry.clear()
        logger.info("MongoDB client closed")
