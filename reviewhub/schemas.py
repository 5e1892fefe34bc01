"""Pydantic schemas for the reviews API.

Attributes are snake_case in Python and camelCase on the wire.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from .config import get_settings
from .models import RoleEnum

_url_adapter = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewFields(CamelModel):
    """Field rules shared by create and update payloads."""

    @field_validator(
        "company_name", "review_date", "content", "website_url", "rating", mode="before", check_fields=False
    )
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # an omitted field is left unset, an explicit null is a violation
        if value is None:
            raise ValueError("Field may not be null")
        return value

    @field_validator("rating", mode="before", check_fields=False)
    @classmethod
    def _rating_not_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("Rating must be a whole number from 1 to 5")
        return value

    @field_validator("company_name", check_fields=False)
    @classmethod
    def _company_name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Company name is required")
        return value

    @field_validator("content", check_fields=False)
    @classmethod
    def _content_min_length(cls, value: Optional[str]) -> Optional[str]:
        minimum = get_settings().review_content_min_length
        if value is not None and len(value) < minimum:
            raise ValueError(f"Review content must be at least {minimum} characters")
        return value

    @field_validator("website_url", check_fields=False)
    @classmethod
    def _website_url_valid(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                _url_adapter.validate_python(value)
            except ValueError as exc:
                raise ValueError("Please enter a valid website URL") from exc
        return value


class ReviewCreate(ReviewFields):
    company_name: str
    review_date: date
    content: str
    website_url: str
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    image_url: Optional[str] = None


class ReviewUpdate(ReviewFields):
    company_name: Optional[str] = None
    review_date: Optional[date] = None
    content: Optional[str] = None
    website_url: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating from 1 to 5")
    image_url: Optional[str] = None


class ReviewRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    company_name: str
    review_date: date
    content: str
    website_url: str
    rating: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ReviewPage(CamelModel):
    items: List[ReviewRead]
    total: int
    page: int
    page_size: int
    total_pages: int


class ReviewStats(CamelModel):
    total: int
    average_rating: float
    distribution: Dict[int, int]


class UserRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: RoleEnum
    created_at: datetime
    updated_at: datetime


class UserUpsert(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: RoleEnum = RoleEnum.REGULAR
