from pymongo import MongoClient, ASCENDING, DESCENDING
from movies_api.core.config import settings
from movies_api.db.mongo import ACTORS, MOVIES, RATINGS


def main():
    db = MongoClient(settings.mongo_dsn)[settings.mongo_db]

    print("Using DSN:", settings.mongo_dsn, "DB:", settings.mongo_db)

    # ratings: $lookup/$group идут по ссылке на фильм
    db[RATINGS].create_index([("movie", ASCENDING)], name="ratings_movie")
    db[RATINGS].create_index(
        [("movie", ASCENDING), ("created_at", DESCENDING)],
        name="ratings_movie_created_desc"
    )

    # movies: фильтры листинга
    db[MOVIES].create_index([("genre", ASCENDING)], name="movies_genre")
    db[MOVIES].create_index([("release_year", ASCENDING)],
                            name="movies_release_year")
    db[MOVIES].create_index([("title", ASCENDING)], name="movies_title")

    # actors
    db[ACTORS].create_index([("name", ASCENDING)], name="actors_name")

    print("Indexes ensured.")


if __name__ == "__main__":
    main()
