"""Review service: access gate, validation gate and record store in one pipeline."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .access import AccessLevel, Caller, require
from .errors import FieldError, NotFound, UpstreamFailure
from .models import Review
from .query import QueryResult, ReviewQuery, run_query
from .storage import ReviewStore
from .uploads import ImageStorage, Upload
from .validation import Mode, validate

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, store: ReviewStore, images: ImageStorage) -> None:
        self.store = store
        self.images = images

    def list_reviews(self) -> List[Review]:
        return self.store.list_reviews()

    def get_review(self, review_id: int) -> Review:
        review = self.store.get_review(review_id)
        if review is None:
            raise NotFound()
        return review

    def search_reviews(self, params: ReviewQuery) -> QueryResult:
        return run_query(self.store.list_reviews(), params)

    def review_stats(self) -> dict[str, Any]:
        total, average, per_rating = self.store.rating_stats()
        distribution = {star: per_rating.get(star, 0) for star in range(1, 6)}
        return {
            "total": total,
            "average_rating": round(average, 2) if average is not None else 0.0,
            "distribution": distribution,
        }

    def create_review(self, payload: Mapping[str, Any], caller: Caller, image: Optional[Upload] = None) -> Review:
        require(caller, AccessLevel.ADMIN)
        data, image_data = self._validated(payload, Mode.CREATE, image)
        review = self._persist(data, image, image_data, self.store.create_review)
        logger.info("Review %s created by %s", review.id, caller.user_id)
        return review

    def update_review(
        self,
        review_id: int,
        payload: Mapping[str, Any],
        caller: Caller,
        image: Optional[Upload] = None,
    ) -> Review:
        require(caller, AccessLevel.ADMIN)
        self.get_review(review_id)
        data, image_data = self._validated(payload, Mode.UPDATE, image)
        review = self._persist(data, image, image_data, lambda values: self.store.update_review(review_id, values))
        if review is None:
            raise NotFound()
        logger.info("Review %s updated by %s (%s)", review_id, caller.user_id, ", ".join(sorted(data)) or "no fields")
        return review

    def delete_review(self, review_id: int, caller: Caller) -> bool:
        require(caller, AccessLevel.AUTHENTICATED)
        if not self.store.delete_review(review_id):
            raise NotFound()
        logger.info("Review %s deleted by %s", review_id, caller.user_id)
        return True

    def _validated(
        self, payload: Mapping[str, Any], mode: Mode, image: Optional[Upload]
    ) -> Tuple[dict[str, Any], Optional[bytes]]:
        image_data: Optional[bytes] = None
        image_errors: List[FieldError] = []
        if image is not None:
            image_data, image_errors = self.images.check(image)
        return validate(payload, mode, extra_errors=image_errors), image_data

    def _persist(
        self,
        data: dict[str, Any],
        image: Optional[Upload],
        image_data: Optional[bytes],
        write: Callable[[dict[str, Any]], Optional[Review]],
    ) -> Optional[Review]:
        # the image file is written only once the payload is known to be valid
        image_url = None
        if image is not None and image_data is not None:
            image_url = self.images.save(image_data, image.filename)
            data["image_url"] = image_url
        try:
            return write(data)
        except UpstreamFailure:
            if image_url:
                self.images.discard(image_url)
            raise
