"""MongoDB aggregation pipeline builder."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Union

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from mongo_scoop.cond import Cond
from mongo_scoop.exceptions import DatabaseError
from utils.logging import logger


class Aggregation:
    """Fluent builder for an aggregation pipeline bound to a collection."""

    def __init__(
        self,
        collection: Optional[AsyncIOMotorCollection],
        *stages: Dict[str, Any],
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        self.collection = collection
        self.session = session
        self._pipeline: List[Dict[str, Any]] = list(stages)

    @property
    def pipeline(self) -> List[Dict[str, Any]]:
        return list(self._pipeline)

    def add_stage(self, stage: Dict[str, Any]) -> "Aggregation":
        self._pipeline.append(stage)
        return self

    def match(self, filter: Union[Cond, Dict[str, Any], None]) -> "Aggregation":
        """Add a ``$match`` stage. An empty ``Cond`` matches every document."""
        if isinstance(filter, Cond):
            filter = filter.to_bson()
        return self.add_stage({"$match": filter or {}})

    def project(self, projection: Dict[str, Any]) -> "Aggregation":
        return self.add_stage({"$project": projection})

    def group(self, group_by: Dict[str, Any]) -> "Aggregation":
        return self.add_stage({"$group": group_by})

    def sort(self, sort: Dict[str, int]) -> "Aggregation":
        return self.add_stage({"$sort": sort})

    def skip(self, skip: int) -> "Aggregation":
        return self.add_stage({"$skip": skip})

    def limit(self, limit: int) -> "Aggregation":
        return self.add_stage({"$limit": limit})

    def lookup(self, from_: str, local_field: str, foreign_field: str, as_: str) -> "Aggregation":
        """Add a ``$lookup`` (left outer join) stage."""
        return self.add_stage(
            {
                "$lookup": {
                    "from": from_,
                    "localField": local_field,
                    "foreignField": foreign_field,
                    "as": as_,
                }
            }
        )

    def unwind(self, path: str, preserve_null_and_empty_arrays: Optional[bool] = None) -> "Aggregation":
        unwind: Dict[str, Any] = {"path": path}
        if preserve_null_and_empty_arrays is not None:
            unwind["preserveNullAndEmptyArrays"] = preserve_null_and_empty_arrays
        return self.add_stage({"$unwind": unwind})

    def add_fields(self, fields: Dict[str, Any]) -> "Aggregation":
        return self.add_stage({"$addFields": fields})

    def count(self, field: str) -> "Aggregation":
        return self.add_stage({"$count": field})

    def facet(self, facets: Dict[str, List[Dict[str, Any]]]) -> "Aggregation":
        return self.add_stage({"$facet": facets})

    def clear(self) -> "Aggregation":
        self._pipeline.clear()
        return self

    async def _run(self, length: Optional[int]) -> List[Dict[str, Any]]:
        if self.collection is None:
            raise DatabaseError("collection not set for aggregation")

        begin = time.perf_counter()
        try:
            cursor = self.collection.aggregate(self._pipeline, session=self.session)
            docs = await cursor.to_list(length=length)
        except PyMongoError as e:
            logger.error(f"db.{self.collection.name}.aggregate({self._pipeline}) failed: {str(e)}")
            raise DatabaseError(f"Failed to run aggregation: {str(e)}") from e

        elapsed = (time.perf_counter() - begin) * 1000
        logger.info(f"db.{self.collection.name}.aggregate({self._pipeline}) [{elapsed:.3f}ms] [{len(docs)} docs]")
        return docs

    async def execute(self) -> List[Dict[str, Any]]:
        """Run the pipeline and return every resulting document."""
        return await self._run(None)

    async def execute_one(self) -> Optional[Dict[str, Any]]:
        """Run the pipeline and return the first document, or None."""
        docs = await self._run(1)
        return docs[0] if docs else None
