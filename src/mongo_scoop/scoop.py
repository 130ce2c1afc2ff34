"""Query executor running condition-builder filters against a collection."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Type

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorCollection
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from mongo_scoop.aggregation import Aggregation
from mongo_scoop.cond import Cond
from mongo_scoop.exceptions import (
    ConfigurationError,
    DatabaseError,
    DocumentNotFoundError,
    InvalidArgumentError,
    TransactionError,
)
from mongo_scoop.models.pagination import ListOption, Paginate
from utils.logging import logger

if TYPE_CHECKING:
    from mongo_scoop.client import Client


class Scoop:
    """Per-query builder and executor.

    Filter methods delegate to an owned ``Cond``; ``limit``, ``offset``,
    ``sort`` and ``select`` are passed through to the driver. When the filter
    was disabled with a ``False`` guard, filter-driven reads return nothing and
    updates or deletes touch nothing, without a round trip to the server.
    Inserts take no filter and always run.

    Note: a Scoop is meant for a single logical query and is not safe to share.
    """

    def __init__(
        self,
        collection: Optional[AsyncIOMotorCollection] = None,
        *,
        client: Optional["Client"] = None,
        model: Optional[Type[BaseModel]] = None,
        session: Optional[AsyncIOMotorClientSession] = None,
        not_found_error: Type[Exception] = DocumentNotFoundError,
    ) -> None:
        self.client = client
        self.collection = collection
        self.model = model
        self.session = session
        self.not_found_error = not_found_error
        self.filter = Cond()
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        self._sort: Dict[str, int] = {}
        self._projection: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # collection binding

    def collection_name(self, name: str) -> "Scoop":
        """Bind the scoop to a collection by name."""
        if name:
            self.collection = self._client().collection(name)
        return self

    def use_model(self, model: Type[BaseModel]) -> "Scoop":
        """Bind the scoop to a model's collection and decode results into it."""
        self.collection = self._client().collection(model)
        self.model = model
        return self

    def _client(self) -> "Client":
        if self.client is None:
            raise ConfigurationError("scoop has no client to resolve collections with")
        return self.client

    def _require_collection(self) -> AsyncIOMotorCollection:
        if self.collection is None:
            raise ConfigurationError("collection not set, call collection_name() or use_model() first")
        return self.collection

    # ------------------------------------------------------------------
    # filter

    def where(self, *args: Any) -> "Scoop":
        self.filter.where(*args)
        return self

    def or_where(self, *args: Any) -> "Scoop":
        self.filter.or_where(*args)
        return self

    def equal(self, key: str, value: Any) -> "Scoop":
        self.filter.equal(key, value)
        return self

    def ne(self, key: str, value: Any) -> "Scoop":
        self.filter.ne(key, value)
        return self

    def gt(self, key: str, value: Any) -> "Scoop":
        self.filter.gt(key, value)
        return self

    def lt(self, key: str, value: Any) -> "Scoop":
        self.filter.lt(key, value)
        return self

    def gte(self, key: str, value: Any) -> "Scoop":
        self.filter.gte(key, value)
        return self

    def lte(self, key: str, value: Any) -> "Scoop":
        self.filter.lte(key, value)
        return self

    def in_(self, key: str, *values: Any) -> "Scoop":
        self.filter.in_(key, *values)
        return self

    def not_in(self, key: str, *values: Any) -> "Scoop":
        self.filter.not_in(key, *values)
        return self

    def like(self, key: str, pattern: str) -> "Scoop":
        self.filter.like(key, pattern)
        return self

    def left_like(self, key: str, pattern: str) -> "Scoop":
        self.filter.left_like(key, pattern)
        return self

    def right_like(self, key: str, pattern: str) -> "Scoop":
        self.filter.right_like(key, pattern)
        return self

    def not_like(self, key: str, pattern: str) -> "Scoop":
        self.filter.not_like(key, pattern)
        return self

    def not_left_like(self, key: str, pattern: str) -> "Scoop":
        self.filter.not_left_like(key, pattern)
        return self

    def not_right_like(self, key: str, pattern: str) -> "Scoop":
        self.filter.not_right_like(key, pattern)
        return self

    def between(self, key: str, low: Any, high: Any) -> "Scoop":
        self.filter.between(key, low, high)
        return self

    def not_between(self, key: str, low: Any, high: Any) -> "Scoop":
        self.filter.not_between(key, low, high)
        return self

    # ------------------------------------------------------------------
    # options

    def limit(self, limit: int) -> "Scoop":
        self._limit = limit
        return self

    def offset(self, offset: int) -> "Scoop":
        self._offset = offset
        return self

    skip = offset

    def sort(self, key: str, direction: int = 1) -> "Scoop":
        """Sort by ``key``; 1 for ascending, -1 for descending."""
        if direction not in (1, -1):
            raise InvalidArgumentError(f"sort direction must be 1 or -1, got {direction}")
        self._sort[key] = direction
        return self

    def select(self, *fields: str) -> "Scoop":
        for field in fields:
            self._projection[field] = 1
        return self

    # ------------------------------------------------------------------
    # helpers

    def _filter_doc(self) -> Dict[str, Any]:
        # an empty filter matches every document
        return self.filter.to_bson() or {}

    def _decode(self, doc: Dict[str, Any]) -> Any:
        if self.model is None:
            return doc
        return self.model.model_validate(doc)

    @staticmethod
    def _encode(doc: Any) -> Dict[str, Any]:
        if isinstance(doc, BaseModel):
            return doc.model_dump(by_alias=True, exclude_none=True)
        if isinstance(doc, dict):
            return doc
        raise InvalidArgumentError(f"unsupported document type: {type(doc).__name__}")

    def _log(self, begin: float, operation: str, docs_affected: int, error: Optional[Exception] = None) -> None:
        elapsed = (time.perf_counter() - begin) * 1000
        message = f"db.{self.collection.name}.{operation} [{elapsed:.3f}ms] [{docs_affected} docs]"
        if error is None:
            logger.info(message)
        else:
            logger.error(f"{message} err: {str(error)}")

    def _skipped(self, operation: str) -> bool:
        if self.filter.skip:
            logger.debug(f"skipping {operation}, filter disabled by guard")
            return True
        return False

    # ------------------------------------------------------------------
    # reads

    async def find(self) -> List[Any]:
        """Return every document matching the filter."""
        if self._skipped("find"):
            return []

        collection = self._require_collection()
        filter_doc = self._filter_doc()
        kwargs: Dict[str, Any] = {"session": self.session}
        if self._projection:
            kwargs["projection"] = dict(self._projection)
        if self._sort:
            kwargs["sort"] = list(self._sort.items())
        if self._offset is not None:
            kwargs["skip"] = self._offset
        if self._limit is not None:
            kwargs["limit"] = self._limit

        begin = time.perf_counter()
        try:
            docs = await collection.find(filter_doc, **kwargs).to_list(length=None)
        except PyMongoError as e:
            self._log(begin, f"find({filter_doc})", 0, e)
            raise DatabaseError(f"Failed to find documents: {str(e)}") from e

        self._log(begin, f"find({filter_doc})", len(docs))
        return [self._decode(doc) for doc in docs]

    async def first(self) -> Any:
        """Return the first matching document.

        Raises:
            DocumentNotFoundError: Or the scoop's configured not-found error.
        """
        if self._skipped("findOne"):
            raise self.not_found_error("no document found")

        collection = self._require_collection()
        filter_doc = self._filter_doc()
        kwargs: Dict[str, Any] = {"session": self.session}
        if self._projection:
            kwargs["projection"] = dict(self._projection)
        if self._sort:
            kwargs["sort"] = list(self._sort.items())

        begin = time.perf_counter()
        try:
            doc = await collection.find_one(filter_doc, **kwargs)
        except PyMongoError as e:
            self._log(begin, f"findOne({filter_doc})", 0, e)
            raise DatabaseError(f"Failed to find document: {str(e)}") from e

        if doc is None:
            self._log(begin, f"findOne({filter_doc})", 0)
            raise self.not_found_error("no document found")

        self._log(begin, f"findOne({filter_doc})", 1)
        return self._decode(doc)

    async def count(self) -> int:
        if self._skipped("countDocuments"):
            return 0

        collection = self._require_collection()
        filter_doc = self._filter_doc()

        begin = time.perf_counter()
        try:
            count = await collection.count_documents(filter_doc, session=self.session)
        except PyMongoError as e:
            self._log(begin, f"countDocuments({filter_doc})", 0, e)
            raise DatabaseError(f"Failed to count documents: {str(e)}") from e

        self._log(begin, f"countDocuments({filter_doc})", count)
        return count

    async def exist(self) -> bool:
        """Check for a matching document, fetching only its ``_id``."""
        scoop = self.clone().select("_id")
        try:
            await scoop.first()
        except (DocumentNotFoundError, scoop.not_found_error):
            return False
        return True

    async def find_by_page(self, opt: Optional[ListOption] = None) -> Tuple[Paginate, List[Any]]:
        """Return one page of documents and its pagination metadata."""
        if opt is None:
            opt = ListOption()

        self.offset(opt.offset).limit(opt.limit)
        page = Paginate(offset=opt.offset, limit=opt.limit)

        docs = await self.find()
        if opt.show_total:
            page.total = await self.clone().count()
        return page, docs

    # ------------------------------------------------------------------
    # writes

    async def create(self, doc: Any) -> Any:
        """Insert one document and return its ``_id``."""
        collection = self._require_collection()
        data = self._encode(doc)

        begin = time.perf_counter()
        try:
            result = await collection.insert_one(data, session=self.session)
        except PyMongoError as e:
            self._log(begin, "insertOne(...)", 0, e)
            raise DatabaseError(f"Failed to insert document: {str(e)}") from e

        self._log(begin, "insertOne(...)", 1)
        return result.inserted_id

    async def batch_create(self, *docs: Any) -> List[Any]:
        """Insert several documents and return their ``_id`` values."""
        if not docs:
            raise InvalidArgumentError("no documents to insert")

        collection = self._require_collection()
        data = [self._encode(doc) for doc in docs]

        begin = time.perf_counter()
        try:
            result = await collection.insert_many(data, session=self.session)
        except PyMongoError as e:
            self._log(begin, f"insertMany(...) [{len(data)} docs]", 0, e)
            raise DatabaseError(f"Failed to insert documents: {str(e)}") from e

        self._log(begin, f"insertMany(...) [{len(data)} docs]", len(result.inserted_ids))
        return list(result.inserted_ids)

    @staticmethod
    def _update_doc(update: Any) -> Dict[str, Any]:
        if isinstance(update, BaseModel):
            return {"$set": update.model_dump(by_alias=True, exclude_unset=True)}
        if not isinstance(update, dict):
            raise InvalidArgumentError(f"unsupported update type: {type(update).__name__}")
        if not update:
            raise InvalidArgumentError("update must not be empty")
        # plain field values are wrapped in $set
        if any(key.startswith("$") for key in update):
            return update
        return {"$set": update}

    async def update(self, update: Any) -> int:
        """Update every matching document and return the modified count."""
        update_doc = self._update_doc(update)
        if self._skipped("updateMany"):
            return 0

        collection = self._require_collection()
        filter_doc = self._filter_doc()

        begin = time.perf_counter()
        try:
            result = await collection.update_many(filter_doc, update_doc, session=self.session)
        except PyMongoError as e:
            self._log(begin, f"updateMany({filter_doc}, {update_doc})", 0, e)
            raise DatabaseError(f"Failed to update documents: {str(e)}") from e

        self._log(begin, f"updateMany({filter_doc}, {update_doc})", result.modified_count)
        return result.modified_count

    async def delete(self) -> int:
        """Delete every matching document and return the deleted count."""
        if self._skipped("deleteMany"):
            return 0

        collection = self._require_collection()
        filter_doc = self._filter_doc()

        begin = time.perf_counter()
        try:
            result = await collection.delete_many(filter_doc, session=self.session)
        except PyMongoError as e:
            self._log(begin, f"deleteMany({filter_doc})", 0, e)
            raise DatabaseError(f"Failed to delete documents: {str(e)}") from e

        self._log(begin, f"deleteMany({filter_doc})", result.deleted_count)
        return result.deleted_count

    def aggregate(self, *stages: Dict[str, Any]) -> Aggregation:
        return Aggregation(self.collection, *stages, session=self.session)

    # ------------------------------------------------------------------
    # state

    def clone(self) -> "Scoop":
        """Copy the scoop, deep-copying its filter."""
        scoop = Scoop(
            self.collection,
            client=self.client,
            model=self.model,
            session=self.session,
            not_found_error=self.not_found_error,
        )
        scoop.filter = self.filter.clone()
        scoop._limit = self._limit
        scoop._offset = self._offset
        scoop._sort = dict(self._sort)
        scoop._projection = dict(self._projection)
        return scoop

    def clear(self) -> "Scoop":
        self.filter = Cond()
        self._limit = None
        self._offset = None
        self._sort = {}
        self._projection = {}
        return self

    def set_not_found(self, error: Type[Exception]) -> "Scoop":
        self.not_found_error = error
        return self

    def is_not_found(self, error: Exception) -> bool:
        return isinstance(error, (self.not_found_error, DocumentNotFoundError))

    # ------------------------------------------------------------------
    # transactions

    async def begin(self) -> "Scoop":
        """Start a transaction and return a fresh scoop bound to its session."""
        session = self.session
        try:
            if session is None:
                session = await self._client().motor.start_session()
            session.start_transaction()
        except PyMongoError as e:
            logger.error(f"Failed to start transaction: {str(e)}")
            raise TransactionError(f"Failed to start transaction: {str(e)}") from e

        return Scoop(
            self.collection,
            client=self.client,
            model=self.model,
            session=session,
            not_found_error=self.not_found_error,
        )

    async def _end_session(self) -> None:
        session, self.session = self.session, None
        await session.end_session()

    async def commit(self) -> None:
        """Commit the transaction and end its session, even when the commit fails."""
        if self.session is None:
            raise TransactionError("no active transaction")
        try:
            await self.session.commit_transaction()
        except PyMongoError as e:
            logger.error(f"Failed to commit transaction: {str(e)}")
            raise TransactionError(f"Failed to commit transaction: {str(e)}") from e
        finally:
            await self._end_session()

    async def rollback(self) -> None:
        if self.session is None:
            raise TransactionError("no active transaction")
        try:
            await self.session.abort_transaction()
        except PyMongoError as e:
            logger.error(f"Failed to abort transaction: {str(e)}")
            raise TransactionError(f"Failed to abort transaction: {str(e)}") from e
        finally:
            await self._end_session()
