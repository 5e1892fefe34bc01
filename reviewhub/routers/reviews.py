from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from ..access import Caller
from ..config import get_settings
from ..dependencies import get_caller, get_review_service, parse_review_id
from ..query import ALL_RATINGS, SORT_NEWEST, ReviewQuery
from ..schemas import ReviewPage, ReviewRead, ReviewStats
from ..service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


def _as_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _form_payload(**fields: Optional[str]) -> Dict[str, Any]:
    return {name: value for name, value in fields.items() if value is not None}


def _image_or_none(image: Optional[UploadFile]) -> Optional[UploadFile]:
    # browsers submit an empty file part when no file was picked
    if image is None or not image.filename:
        return None
    return image


@router.get("", response_model=List[ReviewRead])
def list_reviews(service: ReviewService = Depends(get_review_service)):
    """
    List every review, oldest first.
    Public.
    """
    return service.list_reviews()


@router.get("/search", response_model=ReviewPage)
def search_reviews(
    search: str = Query("", description="Case-insensitive text to look for"),
    sort: str = Query(SORT_NEWEST, description="newest, oldest, rating-high, rating-low or company"),
    rating: str = Query(ALL_RATINGS, description="Star rating to keep, or 'all'"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: ReviewService = Depends(get_review_service),
) -> ReviewPage:
    """
    Filter, sort and paginate the review list.
    Malformed paging values fall back to defaults instead of failing.
    """
    params = ReviewQuery(
        search_text=search,
        sort_key=sort,
        rating_filter=rating,
        page=_as_int(page, 1),
        page_size=_as_int(page_size, get_settings().default_page_size),
    )
    result = service.search_reviews(params)
    return ReviewPage(
        items=[ReviewRead.model_validate(review) for review in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/stats", response_model=ReviewStats)
def review_stats(service: ReviewService = Depends(get_review_service)) -> ReviewStats:
    """
    Average rating and per-star counts across all reviews.
    """
    return ReviewStats(**service.review_stats())


@router.get("/{review_id}", response_model=ReviewRead)
def get_review(review_id: str, service: ReviewService = Depends(get_review_service)):
    return service.get_review(parse_review_id(review_id))


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
def create_review(
    company_name: Optional[str] = Form(None, alias="companyName"),
    review_date: Optional[str] = Form(None, alias="reviewDate"),
    content: Optional[str] = Form(None),
    website_url: Optional[str] = Form(None, alias="websiteUrl"),
    rating: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    caller: Caller = Depends(get_caller),
    service: ReviewService = Depends(get_review_service),
):
    """
    Create a review from a multipart form, with an optional image.
    Admins only.
    """
    payload = _form_payload(
        companyName=company_name,
        reviewDate=review_date,
        content=content,
        websiteUrl=website_url,
        rating=rating,
    )
    return service.create_review(payload, caller, image=_image_or_none(image))


@router.put("/{review_id}", response_model=ReviewRead)
def update_review(
    review_id: str,
    company_name: Optional[str] = Form(None, alias="companyName"),
    review_date: Optional[str] = Form(None, alias="reviewDate"),
    content: Optional[str] = Form(None),
    website_url: Optional[str] = Form(None, alias="websiteUrl"),
    rating: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    caller: Caller = Depends(get_caller),
    service: ReviewService = Depends(get_review_service),
):
    """
    Partially update a review; only submitted fields change.
    Admins only.
    """
    payload = _form_payload(
        companyName=company_name,
        reviewDate=review_date,
        content=content,
        websiteUrl=website_url,
        rating=rating,
    )
    return service.update_review(parse_review_id(review_id), payload, caller, image=_image_or_none(image))


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: str,
    caller: Caller = Depends(get_caller),
    service: ReviewService = Depends(get_review_service),
) -> Response:
    """
    Delete a review.
    Any signed-in user.
    """
    service.delete_review(parse_review_id(review_id), caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
