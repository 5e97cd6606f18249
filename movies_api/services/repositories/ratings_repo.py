"""Mongo repository for ratings collection."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from movies_api.db.mongo import MOVIES, RATINGS
from movies_api.services.query_params import contains_regex


def top_rated_pipeline(
    genre: Optional[str],
    min_votes: int,
    limit: int,
) -> List[Dict[str, Any]]:
    """Join ratings with movies, group per movie, rank and cut.

    `avg_rating` is left unrounded: sorting must not see rounded values.
    """
    pipeline: List[Dict[str, Any]] = [
        # null и строки не голосуют: $avg их и так пропускает
        {'$match': {'rating': {'$type': 'number'}}},
        {
            '$lookup': {
                'from': MOVIES,
                'localField': 'movie',
                'foreignField': '_id',
                'as': 'movie',
            },
        },
        # inner join: оценки без фильма отбрасываются
        {'$unwind': '$movie'},
    ]

    if genre:
        pipeline.append({'$match': {'movie.genre': contains_regex(genre)}})

    pipeline.extend([
        {
            '$group': {
                '_id': '$movie._id',
                'title': {'$first': '$movie.title'},
                'genre': {'$first': '$movie.genre'},
                'avg_rating': {'$avg': '$rating'},
                'vote_count': {'$sum': 1},
            },
        },
        {'$match': {'vote_count': {'$gte': int(min_votes)}}},
        {'$sort': {'avg_rating': -1, 'vote_count': -1, 'title': 1}},
        {'$limit': int(limit)},
        {
            '$project': {
                '_id': 0,
                'movie_id': '$_id',
                'title': 1,
                'genre': 1,
                'avg_rating': 1,
                'vote_count': 1,
            },
        },
    ])
    return pipeline


class RatingsRepo:
    """Read helpers and the top-rated aggregation over ratings."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.col = db[RATINGS]

    async def list_by_movie(
        self,
        movie_id: ObjectId,
    ) -> List[Dict[str, Any]]:
        """All ratings of a movie, oldest first."""
        cursor = self.col.find({'movie': movie_id}).sort('_id', 1)
        return [doc async for doc in cursor]

    async def top_rated_aggregates(
        self,
        genre: Optional[str],
        min_votes: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        pipeline = top_rated_pipeline(genre, min_votes, limit)
        cursor = self.col.aggregate(pipeline, allowDiskUse=True)
        return await cursor.to_list(length=limit)
