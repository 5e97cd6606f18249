"""Lenient parsing of query-string values.

Bad numeric input never fails a request: it falls back to the default.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

DEFAULT_MIN_VOTES = 3
MAX_MIN_VOTES = 100
DEFAULT_TOP_LIMIT = 10
MAX_TOP_LIMIT = 50

DEFAULT_PAGE = 1
# выше клампится, чтобы skip оставался в пределах int64
MAX_PAGE = 1_000_000
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def parse_int(raw: object) -> Optional[int]:
    """Read a leading integer the way a query-string parser does.

    "12" -> 12, "12abc" -> 12, " 7 " -> 7, "abc" / "" / None -> None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


def positive_int(raw: object, default: int, cap: int) -> int:
    """Positive integer capped at `cap`; anything below 1 gives `default`."""
    value = parse_int(raw)
    if value is None or value < 1:
        return default
    return min(value, cap)


def clean_text(raw: Optional[str]) -> Optional[str]:
    """Trimmed text, or None when empty / whitespace-only."""
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def contains_regex(text: str) -> dict:
    """Case-insensitive substring match for a Mongo `$regex` query."""
    return {"$regex": re.escape(text), "$options": "i"}


@dataclass(frozen=True)
class TopRatedQuery:
    genre: Optional[str]
    min_votes: int
    limit: int

    @classmethod
    def from_raw(
        cls,
        genre: Optional[str] = None,
        min_votes: object = None,
        limit: object = None,
    ) -> "TopRatedQuery":
        return cls(
            genre=clean_text(genre),
            min_votes=positive_int(
                min_votes, DEFAULT_MIN_VOTES, MAX_MIN_VOTES),
            limit=positive_int(limit, DEFAULT_TOP_LIMIT, MAX_TOP_LIMIT),
        )


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    @classmethod
    def from_raw(cls, page: object = None, limit: object = None) -> "Page":
        return cls(
            page=positive_int(page, DEFAULT_PAGE, MAX_PAGE),
            limit=positive_int(limit, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT),
        )
