"""Filter, sort and paginate an in-memory review collection.

``run_query`` is a pure function of (reviews, params). It never raises on odd
parameters: unknown sort keys leave the order untouched and out-of-range pages
come back empty.
"""
from __future__ import annotations

import locale
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Sequence, Union

ALL_RATINGS = "all"

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_RATING_HIGH = "rating-high"
SORT_RATING_LOW = "rating-low"
SORT_COMPANY = "company"

SEARCH_FIELDS = ("company_name", "content", "author")


@dataclass(frozen=True)
class ReviewQuery:
    search_text: str = ""
    sort_key: str = SORT_NEWEST
    rating_filter: Union[str, int] = ALL_RATINGS
    page: int = 1
    page_size: int = 12


@dataclass
class QueryResult:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 12

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


def total_pages(total: int, page_size: int) -> int:
    if page_size < 1:
        return 0
    return math.ceil(total / page_size)


def _timestamp(review: Any) -> float:
    created_at = getattr(review, "created_at", None)
    if isinstance(created_at, datetime):
        return created_at.timestamp()
    return 0.0


def _company_key(review: Any) -> str:
    return locale.strxfrm((getattr(review, "company_name", "") or "").casefold())


# key function, descending
_SORTS: Dict[str, tuple[Callable[[Any], Any], bool]] = {
    SORT_NEWEST: (_timestamp, True),
    SORT_OLDEST: (_timestamp, False),
    SORT_RATING_HIGH: (lambda review: review.rating, True),
    SORT_RATING_LOW: (lambda review: review.rating, False),
    SORT_COMPANY: (_company_key, False),
}


def filter_by_rating(reviews: Sequence[Any], rating_filter: Union[str, int]) -> List[Any]:
    wanted = str(rating_filter).strip()
    if wanted == ALL_RATINGS:
        return list(reviews)
    return [review for review in reviews if str(review.rating) == wanted]


def filter_by_search(reviews: Sequence[Any], search_text: str) -> List[Any]:
    needle = (search_text or "").casefold()
    if not needle:
        return list(reviews)
    return [
        review
        for review in reviews
        if any(needle in (getattr(review, name, None) or "").casefold() for name in SEARCH_FIELDS)
    ]


def sort_reviews(reviews: Sequence[Any], sort_key: str) -> List[Any]:
    if sort_key not in _SORTS:
        return list(reviews)
    key, descending = _SORTS[sort_key]
    return sorted(reviews, key=key, reverse=descending)


def paginate(reviews: Sequence[Any], page: int, page_size: int) -> List[Any]:
    if page < 1 or page_size < 1:
        return []
    start = (page - 1) * page_size
    return list(reviews[start : start + page_size])


def run_query(reviews: Sequence[Any], params: ReviewQuery) -> QueryResult:
    matched = filter_by_rating(reviews, params.rating_filter)
    matched = filter_by_search(matched, params.search_text)
    ordered = sort_reviews(matched, params.sort_key)
    return QueryResult(
        items=paginate(ordered, params.page, params.page_size),
        total=len(ordered),
        page=params.page,
        page_size=params.page_size,
    )
