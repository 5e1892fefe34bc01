import os
import tempfile
from typing import Generator

import pytest
from fastapi.testclient import TestClient

_TMP_DIR = tempfile.mkdtemp(prefix="reviewhub-tests-")

os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TMP_DIR, "uploads"))
os.environ.setdefault("LOG_DIR", os.path.join(_TMP_DIR, "logs"))

from reviewhub.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from reviewhub.auth import create_access_token  # noqa: E402
from reviewhub.database import Base, SessionLocal, engine  # noqa: E402
from reviewhub.app import app as reviews_app  # noqa: E402
from reviewhub.models import RoleEnum  # noqa: E402
from reviewhub.storage import ReviewStore  # noqa: E402

CONTENT = (
    "The onboarding was thorough and the team was welcoming. "
    "Management communicates clearly and deadlines are realistic."
)


def review_form(**overrides) -> dict[str, str]:
    data = {
        "companyName": "Acme Corp",
        "reviewDate": "2024-05-01",
        "content": CONTENT,
        "websiteUrl": "https://acme.example.com",
        "rating": "4",
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db_session) -> ReviewStore:
    return ReviewStore(db_session)


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(reviews_app) as test_client:
        yield test_client


def _headers_for(store: ReviewStore, user_id: str, role: RoleEnum) -> dict[str, str]:
    store.upsert_user({"id": user_id, "email": f"{user_id}@example.com", "role": role})
    token = create_access_token({"sub": user_id, "role": role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(store) -> dict[str, str]:
    return _headers_for(store, "admin", RoleEnum.ADMIN)


@pytest.fixture()
def user_headers(store) -> dict[str, str]:
    return _headers_for(store, "reader", RoleEnum.REGULAR)
