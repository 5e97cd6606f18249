from pymongo import MongoClient
from movies_api.core.config import settings
from movies_api.db.mongo import ACTORS, MOVIES, RATINGS


def dump(col_name: str):
    db = MongoClient(settings.mongo_dsn)[settings.mongo_db]
    idx = list(db[col_name].list_indexes())
    print(f"\nIndexes in '{col_name}':")
    for i in idx:
        print(" -", i)


if __name__ == "__main__":
    for name in (MOVIES, RATINGS, ACTORS):
        dump(name)
