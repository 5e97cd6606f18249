"""Seed 'movies', 'ratings' and 'actors' with random demo data."""

from __future__ import annotations

import asyncio
import os
import random
import time
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from movies_api.core.config import settings
from movies_api.db.mongo import ACTORS, MOVIES, RATINGS

MOVIES_TOTAL = int(os.getenv("MOVIES_TOTAL", "200"))
RATINGS_PER_MOVIE = int(os.getenv("RATINGS_PER_MOVIE", "20"))
ACTORS_TOTAL = int(os.getenv("ACTORS_TOTAL", "100"))
BATCH = int(os.getenv("BATCH", "5000"))

GENRES = [
    "Action", "Adventure", "Comedy", "Drama", "Horror", "Sci-Fi",
    "Action/Adventure", "Sci-Fi Action", "Romantic Comedy", "Thriller",
]


async def main() -> None:
    """Insert demo movies, then a random number of ratings per movie."""
    client = AsyncIOMotorClient(settings.mongo_dsn)
    db = client[settings.mongo_db]
    now = datetime.now(timezone.utc)
    t0 = time.time()

    movies = [
        {
            "title": f"Movie {i:04d}",
            "genre": random.choice(GENRES),
            "release_year": random.randint(1950, 2025),
            "created_at": now,
            "updated_at": now,
        }
        for i in range(MOVIES_TOTAL)
    ]
    res = await db[MOVIES].insert_many(movies)

    ratings = []
    for movie_id in res.inserted_ids:
        # часть фильмов специально ниже порога голосов
        for _ in range(random.randint(0, RATINGS_PER_MOVIE)):
            ratings.append({
                "movie": movie_id,
                "rating": random.choice([0.5 * k for k in range(11)]),
                "created_at": now,
            })
    for i in range(0, len(ratings), BATCH):
        await db[RATINGS].insert_many(ratings[i:i + BATCH], ordered=False)

    actors = [{"name": f"Actor {i:04d}",
               "birth_year": random.randint(1930, 2005)}
              for i in range(ACTORS_TOTAL)]
    if actors:
        await db[ACTORS].insert_many(actors)

    dt = time.time() - t0
    print(f"[mongo] movies={len(movies)} ratings={len(ratings)} "
          f"actors={len(actors)} in {dt:.1f}s")

    client.close()


if __name__ == "__main__":
    asyncio.run(main())
