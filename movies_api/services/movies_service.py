"""Service layer for movies: listing, CRUD, ratings and top-rated ranking."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from movies_api.db.mongo import to_object_id
from movies_api.models.movies import (
    MovieItem,
    MovieListResponse,
    MovieWriteRequest,
    TopRatedItem,
    TopRatedMeta,
    TopRatedResponse,
)
from movies_api.models.ratings import RatingItem, RatingListResponse
from movies_api.services.query_params import (
    Page,
    TopRatedQuery,
    clean_text,
    parse_int,
)
from .repositories.movies_repo import MoviesRepo, movie_filter
from .repositories.ratings_repo import RatingsRepo

logger = logging.getLogger(__name__)

AVG_RATING_DIGITS = 3


def to_movie_item(doc: Dict[str, Any]) -> MovieItem:
    return MovieItem(
        movie_id=str(doc['_id']),
        title=doc['title'],
        genre=doc.get('genre'),
        release_year=doc.get('release_year'),
        description=doc.get('description'),
        created_at=doc.get('created_at'),
        updated_at=doc.get('updated_at'),
    )


def to_rating_item(doc: Dict[str, Any]) -> RatingItem:
    return RatingItem(
        rating_id=str(doc['_id']),
        movie_id=str(doc['movie']),
        rating=float(doc['rating']),
        created_at=doc.get('created_at'),
    )


def to_top_rated_item(row: Dict[str, Any]) -> TopRatedItem:
    """Shape an aggregate row; rounding happens only here, after ranking."""
    return TopRatedItem(
        movie_id=str(row['movie_id']),
        title=row['title'],
        genre=row.get('genre'),
        avg_rating=round(float(row['avg_rating']), AVG_RATING_DIGITS),
        vote_count=int(row['vote_count']),
    )


class MoviesService:
    """Business logic for movies and their ratings."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        """Init repositories over the given database."""
        self.repo = MoviesRepo(db)
        self.ratings = RatingsRepo(db)

    # ---------- LIST ----------

    async def list_movies(
        self,
        genre: Optional[str] = None,
        year: object = None,
        page: object = None,
        limit: object = None,
    ) -> MovieListResponse:
        """Filter by genre substring and/or exact year, one page at a time."""
        paging = Page.from_raw(page, limit)
        query = movie_filter(genre=clean_text(genre), year=parse_int(year))
        try:
            docs = await self.repo.list(
                query,
                skip=paging.skip,
                limit=paging.limit,
            )
            total = await self.repo.count(query)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_movie_list_error: {error}') from error

        return MovieListResponse(
            items=[to_movie_item(doc) for doc in docs],
            total=total,
            page=paging.page,
            limit=paging.limit,
            pages=paging.pages(total),
        )

    # ---------- TOP RATED ----------

    async def top_rated(
        self,
        genre: Optional[str] = None,
        min_votes: object = None,
        limit: object = None,
    ) -> TopRatedResponse:
        """Movies ranked by average rating among those with enough votes.

        Inputs are normalized first (see `TopRatedQuery`), and the effective
        values are echoed back in `meta`.
        """
        query = TopRatedQuery.from_raw(genre, min_votes, limit)
        try:
            rows = await self.ratings.top_rated_aggregates(
                genre=query.genre,
                min_votes=query.min_votes,
                limit=query.limit,
            )
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_top_rated_error: {error}') from error

        return TopRatedResponse(
            data=[to_top_rated_item(row) for row in rows],
            meta=TopRatedMeta(
                generated_at=datetime.now(timezone.utc),
                limit=query.limit,
                min_votes=query.min_votes,
                genre=query.genre,
            ),
        )

    # ---------- GET ONE ----------

    async def get_movie(self, movie_id: str) -> Optional[MovieItem]:
        oid = to_object_id(movie_id)
        if oid is None:
            return None
        try:
            doc = await self.repo.get(oid)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_movie_get_error: {error}') from error
        return to_movie_item(doc) if doc else None

    # ---------- CREATE / UPDATE ----------

    async def create_movie(self, data: MovieWriteRequest) -> MovieItem:
        try:
            doc = await self.repo.insert(data.model_dump())
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_movie_create_error: {error}') from error
        logger.info('movie_created', extra={'movie_id': str(doc['_id'])})
        return to_movie_item(doc)

    async def update_movie(
        self,
        movie_id: str,
        data: MovieWriteRequest,
    ) -> Optional[MovieItem]:
        oid = to_object_id(movie_id)
        if oid is None:
            return None
        try:
            doc = await self.repo.update(oid, data.model_dump())
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_movie_update_error: {error}') from error
        return to_movie_item(doc) if doc else None

    # ---------- DELETE ----------

    async def delete_movie(self, movie_id: str) -> bool:
        oid = to_object_id(movie_id)
        if oid is None:
            return False
        try:
            deleted = await self.repo.delete(oid)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_movie_delete_error: {error}') from error
        if deleted:
            logger.info('movie_deleted', extra={'movie_id': movie_id})
        return deleted

    # ---------- RATINGS ----------

    async def movie_ratings(
        self,
        movie_id: str,
    ) -> Optional[RatingListResponse]:
        """Ratings of an existing movie; None when the movie is unknown."""
        oid = to_object_id(movie_id)
        if oid is None:
            return None
        try:
            if await self.repo.get(oid) is None:
                return None
            docs = await self.ratings.list_by_movie(oid)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_rating_list_error: {error}') from error
        items = [to_rating_item(doc) for doc in docs]
        return RatingListResponse(items=items, total=len(items))
