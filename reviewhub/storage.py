"""Record store for reviews and users, backed by a SQLAlchemy session."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import UpstreamFailure
from .models import Review, User

logger = logging.getLogger(__name__)

_USER_PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url", "role")


class ReviewStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Record store failed to %s", action)
            raise UpstreamFailure() from exc

    def _read(self, query, action: str):
        try:
            return query()
        except SQLAlchemyError as exc:
            logger.exception("Record store failed to %s", action)
            raise UpstreamFailure() from exc

    # reviews

    def get_review(self, review_id: int) -> Optional[Review]:
        return self._read(lambda: self.db.get(Review, review_id), "load review")

    def list_reviews(self) -> List[Review]:
        return self._read(
            lambda: self.db.query(Review).order_by(Review.created_at.asc(), Review.id.asc()).all(),
            "list reviews",
        )

    def rating_stats(self) -> Tuple[int, Optional[float], Dict[int, int]]:
        """Review count, average rating and per-rating counts, computed in the database."""

        def query():
            totals = self.db.query(
                func.count(Review.id).label("total_reviews"),
                func.avg(Review.rating).label("average_rating"),
            ).one()
            per_rating = (
                self.db.query(Review.rating, func.count(Review.id))
                .group_by(Review.rating)
                .all()
            )
            return totals, per_rating

        totals, per_rating = self._read(query, "aggregate ratings")
        average = float(totals.average_rating) if totals.average_rating is not None else None
        return totals.total_reviews, average, {rating: count for rating, count in per_rating}

    def create_review(self, data: Mapping[str, Any]) -> Review:
        review = Review(**data)
        with self._transaction("create review"):
            self.db.add(review)
        self.db.refresh(review)
        return review

    def update_review(self, review_id: int, data: Mapping[str, Any]) -> Optional[Review]:
        review = self.get_review(review_id)
        if review is None:
            return None
        with self._transaction("update review"):
            for key, value in data.items():
                setattr(review, key, value)
        self.db.refresh(review)
        return review

    def delete_review(self, review_id: int) -> bool:
        review = self.get_review(review_id)
        if review is None:
            return False
        with self._transaction("delete review"):
            self.db.delete(review)
        return True

    # users

    def get_user(self, user_id: str) -> Optional[User]:
        return self._read(lambda: self.db.get(User, user_id), "load user")

    def upsert_user(self, data: Mapping[str, Any]) -> User:
        """Insert a user, or refresh its profile fields if the id already exists."""
        user = self.get_user(data["id"])
        with self._transaction("upsert user"):
            if user is None:
                user = User(**data)
                self.db.add(user)
            else:
                for key in _USER_PROFILE_FIELDS:
                    if key in data:
                        setattr(user, key, data[key])
                user.updated_at = datetime.utcnow()
        self.db.refresh(user)
        return user
