"""Mongo repository for movies collection."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from movies_api.db.mongo import MOVIES
from movies_api.services.query_params import contains_regex


def movie_filter(
    genre: Optional[str] = None,
    year: Optional[int] = None,
) -> Dict[str, Any]:
    """Build a listing filter: genre substring and/or exact release year."""
    query: Dict[str, Any] = {}
    if genre:
        query['genre'] = contains_regex(genre)
    if year is not None:
        query['release_year'] = year
    return query


class MoviesRepo:
    """CRUD helpers for movies."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.col = db[MOVIES]

    async def list(
        self,
        query: Dict[str, Any],
        skip: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        cursor = self.col.find(query).sort('_id', 1).skip(skip).limit(limit)
        return [doc async for doc in cursor]

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.col.count_documents(query)

    async def get(self, movie_id: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({'_id': movie_id})

    async def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a movie and return the stored document."""
        now = datetime.now(timezone.utc)
        doc = {**data, 'created_at': now, 'updated_at': now}
        result = await self.col.insert_one(doc)
        doc['_id'] = result.inserted_id
        return doc

    async def update(
        self,
        movie_id: ObjectId,
        data: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Set fields and return the updated document (None if absent)."""
        now = datetime.now(timezone.utc)
        return await self.col.find_one_and_update(
            {'_id': movie_id},
            {'$set': {**data, 'updated_at': now}},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, movie_id: ObjectId) -> bool:
        result = await self.col.delete_one({'_id': movie_id})
        return result.deleted_count == 1
