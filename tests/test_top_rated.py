"""Top-rated endpoint: ranking, threshold, genre filter and meta echo."""

from __future__ import annotations

from datetime import datetime

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from movies_api.db.mongo import MOVIES, RATINGS
from movies_api.services.movies_service import MoviesService
from movies_api.services.repositories.ratings_repo import RatingsRepo
from tests.helpers import add_movie, add_rated_movie, add_ratings

URL = "/api/v1/movies/top-rated"


async def test_three_movies_ranked_by_average_and_drops_thin_votes(
        client, mongo_db):
    m1 = await add_rated_movie(mongo_db, "M1", 5, 4, 5, genre="Drama")
    m2 = await add_rated_movie(mongo_db, "M2", 3, 3, 3, 3, genre="Drama")
    await add_rated_movie(mongo_db, "M3", 5, genre="Drama")

    r = await client.get(URL, params={"minVotes": 3, "limit": 10})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data == [
        {"movieId": str(m1), "title": "M1", "genre": "Drama",
         "avgRating": 4.667, "voteCount": 3},
        {"movieId": str(m2), "title": "M2", "genre": "Drama",
         "avgRating": 3.0, "voteCount": 4},
    ]


async def test_ties_break_on_votes_then_title(client, mongo_db):
    await add_rated_movie(mongo_db, "Beta", *([4] * 5))
    await add_rated_movie(mongo_db, "Alpha", *([4] * 5))
    await add_rated_movie(mongo_db, "Zulu", *([4] * 6))

    r = await client.get(URL)
    titles = [row["title"] for row in r.json()["data"]]
    assert titles == ["Zulu", "Alpha", "Beta"]


async def test_title_tie_break_is_case_sensitive(mongo_db):
    for title in ("Beta", "Alpha", "alpha"):
        await add_rated_movie(mongo_db, title, *([4] * 5))

    resp = await MoviesService(mongo_db).top_rated()
    # бинарное сравнение: заглавные раньше строчных
    assert [i.title for i in resp.data] == ["Alpha", "Beta", "alpha"]


async def test_meta_echoes_effective_values_after_clamping(client):
    r = await client.get(URL, params={"minVotes": "500", "limit": "abc",
                                      "genre": "  action "})
    assert r.status_code == 200
    meta = r.json()["meta"]
    assert meta["minVotes"] == 100
    assert meta["limit"] == 10
    assert meta["genre"] == "action"
    # ISO-8601 с таймзоной
    assert datetime.fromisoformat(
        meta["generatedAt"].replace("Z", "+00:00")).tzinfo is not None


@pytest.mark.parametrize("raw", ["0", "-5", "abc"])
async def test_bad_min_votes_falls_back_to_default(client, mongo_db, raw):
    await add_rated_movie(mongo_db, "Three", 4, 4, 4)
    await add_rated_movie(mongo_db, "One", 5)

    r = await client.get(URL, params={"minVotes": raw})
    assert r.status_code == 200
    body = r.json()
    assert body["meta"]["minVotes"] == 3
    assert [row["title"] for row in body["data"]] == ["Three"]


async def test_min_votes_threshold_is_inclusive(client, mongo_db):
    await add_rated_movie(mongo_db, "Two", 5, 5)
    await add_rated_movie(mongo_db, "Five", *([3] * 5))

    r = await client.get(URL, params={"minVotes": 2})
    assert [row["title"] for row in r.json()["data"]] == ["Two", "Five"]

    r = await client.get(URL, params={"minVotes": 5})
    assert [row["title"] for row in r.json()["data"]] == ["Five"]

    r = await client.get(URL, params={"minVotes": 6})
    assert r.json()["data"] == []


async def test_blank_genre_is_same_as_no_filter(client, mongo_db):
    await add_rated_movie(mongo_db, "A", 4, 4, 4, genre="Comedy")
    await add_rated_movie(mongo_db, "B", 5, 5, 5, genre="Horror")

    plain = (await client.get(URL)).json()
    blank = (await client.get(URL, params={"genre": "   "})).json()
    assert blank["data"] == plain["data"]
    assert [row["title"] for row in blank["data"]] == ["B", "A"]
    assert blank["meta"]["genre"] is None


async def test_genre_filter_is_case_insensitive_substring(client, mongo_db):
    await add_rated_movie(mongo_db, "Arrival", 4, 4, 4,
                          genre="Sci-Fi Action")
    await add_rated_movie(mongo_db, "Jaws", 5, 5, 5,
                          genre="Action/Adventure")
    await add_rated_movie(mongo_db, "Quiet", 5, 5, 5, genre="Drama")
    await add_rated_movie(mongo_db, "Unknown", 5, 5, 5)

    r = await client.get(URL, params={"genre": "ACTION"})
    assert [row["title"] for row in r.json()["data"]] == ["Jaws", "Arrival"]

    r = await client.get(URL, params={"genre": "sci-fi"})
    assert [row["title"] for row in r.json()["data"]] == ["Arrival"]


async def test_genre_is_matched_literally(client, mongo_db):
    await add_rated_movie(mongo_db, "Plain", 4, 4, 4, genre="Drama")

    # спецсимволы regex не ломают запрос и не срабатывают как шаблон
    r = await client.get(URL, params={"genre": ".*"})
    assert r.status_code == 200
    assert r.json()["data"] == []


async def test_long_genre_is_accepted(client, mongo_db):
    await add_rated_movie(mongo_db, "Plain", 4, 4, 4, genre="Drama")
    genre = "x" * 5000

    r = await client.get(URL, params={"genre": genre})
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["meta"]["genre"] == genre


async def test_limit_truncates_results(client, mongo_db):
    for i in range(5):
        await add_rated_movie(mongo_db, f"T{i}", i, i, i)

    r = await client.get(URL, params={"limit": 2})
    body = r.json()
    assert len(body["data"]) == 2
    assert body["meta"]["limit"] == 2
    assert [row["title"] for row in body["data"]] == ["T4", "T3"]


async def test_ratings_of_missing_movies_are_ignored(client, mongo_db):
    await add_rated_movie(mongo_db, "Kept", 2, 2, 2)
    gone = await add_rated_movie(mongo_db, "Gone", 5, 5, 5)
    await mongo_db[MOVIES].delete_one({"_id": gone})
    await add_ratings(mongo_db, ObjectId(), 5, 5, 5)

    r = await client.get(URL)
    assert [row["title"] for row in r.json()["data"]] == ["Kept"]


async def test_non_numeric_ratings_do_not_vote(client, mongo_db):
    mixed = await add_rated_movie(mongo_db, "Mixed", 5, 4, 5, None, "5")
    await mongo_db[RATINGS].insert_one({"movie": mixed})
    # два числовых голоса: ниже порога, мусор не добирает до трёх
    await add_rated_movie(mongo_db, "Thin", 5, 5, None, "5")

    r = await client.get(URL)
    assert r.json()["data"] == [
        {"movieId": str(mixed), "title": "Mixed", "genre": None,
         "avgRating": 4.667, "voteCount": 3},
    ]


async def test_repeated_queries_return_identical_data(client, mongo_db):
    for i in range(20):
        await add_rated_movie(mongo_db, f"T{i:02d}", i % 5, (i * 3) % 5, 4)

    first = (await client.get(URL, params={"limit": 50})).json()["data"]
    second = (await client.get(URL, params={"limit": 50})).json()["data"]
    assert first == second
    assert len(first) == 20

    def key(row):
        return (-row["avgRating"], -row["voteCount"], row["title"])

    assert [key(row) for row in first] == sorted(key(row) for row in first)


async def test_rounding_happens_after_ranking(mongo_db):
    # 4.6666... и 4.6670 совпадают после округления, но порядок по сырому
    await add_rated_movie(mongo_db, "A-lower", 5, 4, 5)
    await add_rated_movie(mongo_db, "B-higher", *([4.667] * 3))

    resp = await MoviesService(mongo_db).top_rated()
    assert [i.title for i in resp.data] == ["B-higher", "A-lower"]
    assert [i.avg_rating for i in resp.data] == [4.667, 4.667]


async def test_repo_returns_raw_rows(mongo_db):
    oid = await add_movie(mongo_db, "Raw", genre="Drama")
    await add_ratings(mongo_db, oid, 1, 2, 2)

    rows = await RatingsRepo(mongo_db).top_rated_aggregates(
        None, min_votes=3, limit=10)
    assert len(rows) == 1
    row = rows[0]
    assert row["movie_id"] == oid
    assert row["vote_count"] == 3
    assert row["avg_rating"] == pytest.approx(5 / 3)
    assert "_id" not in row


@pytest.fixture
def broken_store(monkeypatch):
    async def boom(self, genre, min_votes, limit):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(RatingsRepo, "top_rated_aggregates", boom)


async def test_top_rated_store_failure_becomes_runtime_error(
        mongo_db, broken_store):
    with pytest.raises(RuntimeError, match="mongo_top_rated_error"):
        await MoviesService(mongo_db).top_rated()


async def test_top_rated_store_failure_returns_500(client, broken_store):
    r = await client.get(URL)
    assert r.status_code == 500
    # сервис остаётся живым
    assert (await client.get("/health")).status_code == 200
