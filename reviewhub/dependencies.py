"""Reusable FastAPI dependencies for auth, storage and the review service."""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .access import Caller, classify
from .config import get_settings
from .database import get_db
from .errors import InvalidIdentifier
from .service import ReviewService
from .storage import ReviewStore
from .uploads import ImageStorage

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(db: Session = Depends(get_db)) -> ReviewStore:
    return ReviewStore(db)


def get_image_storage() -> ImageStorage:
    settings = get_settings()
    return ImageStorage(settings.upload_dir, settings.max_upload_bytes)


def get_review_service(
    store: ReviewStore = Depends(get_store),
    images: ImageStorage = Depends(get_image_storage),
) -> ReviewService:
    return ReviewService(store, images)


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(get_settings().auth_cookie_name)


def get_caller(token: Optional[str] = Depends(get_token), store: ReviewStore = Depends(get_store)) -> Caller:
    return classify(token, store)


def parse_review_id(review_id: str) -> int:
    # plain ASCII digits only; int() would also take " 7 " or "1_000"
    if not (review_id.isascii() and review_id.isdigit()):
        raise InvalidIdentifier()
    return int(review_id)
