import time
from typing import Any, Dict, Optional

import jwt
from bson import ObjectId

from movies_api.core.config import settings
from movies_api.db.mongo import ACTORS, MOVIES, RATINGS


def make_token(claims: Optional[dict] = None, ttl_s: int = 300,
               secret: Optional[str] = None) -> str:
    payload = {"sub": "tester", "exp": int(time.time()) + ttl_s}
    payload.update(claims or {})
    return jwt.encode(payload, secret or settings.jwt_secret,
                      algorithm=settings.jwt_algorithm)


def auth_header(token: Optional[str] = None) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token or make_token()}"}


async def add_movie(db, title: str, genre: Optional[str] = None,
                    release_year: Optional[int] = None) -> ObjectId:
    res = await db[MOVIES].insert_one(
        {"title": title, "genre": genre, "release_year": release_year})
    return res.inserted_id


async def add_ratings(db, movie_id: ObjectId, *scores: Any) -> None:
    if scores:
        await db[RATINGS].insert_many(
            [{"movie": movie_id, "rating": s} for s in scores])


async def add_rated_movie(db, title: str, *scores: Any,
                          genre: Optional[str] = None) -> ObjectId:
    oid = await add_movie(db, title, genre=genre)
    await add_ratings(db, oid, *scores)
    return oid


async def add_actor(db, name: str,
                    birth_year: Optional[int] = None) -> ObjectId:
    res = await db[ACTORS].insert_one(
        {"name": name, "birth_year": birth_year})
    return res.inserted_id
