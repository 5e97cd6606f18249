from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from movies_api.models.base import CamelModel


class MovieWriteRequest(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    genre: Optional[str] = Field(default=None, max_length=200)
    release_year: Optional[int] = Field(default=None, ge=1888, le=2100)
    description: Optional[str] = Field(default=None, max_length=10_000)


class MovieItem(CamelModel):
    movie_id: str
    title: str
    genre: Optional[str] = None
    release_year: Optional[int] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MovieListResponse(CamelModel):
    items: List[MovieItem]
    total: int
    page: int
    limit: int
    pages: int


class TopRatedItem(CamelModel):
    movie_id: str
    title: str
    genre: Optional[str] = None
    avg_rating: float
    vote_count: int


class TopRatedMeta(CamelModel):
    generated_at: datetime
    limit: int
    min_votes: int
    genre: Optional[str] = None


class TopRatedResponse(CamelModel):
    data: List[TopRatedItem]
    meta: TopRatedMeta
