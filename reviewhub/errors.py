"""Error taxonomy shared by the service layer and the HTTP handlers."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


@dataclass(frozen=True)
class FieldError:
    field: str
    reason: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


class ReviewHubError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = "error"
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"message": self.message, "reason": self.reason}


class ValidationFailed(ReviewHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    reason = "validation_error"
    message = "Validation error"

    def __init__(self, errors: List[FieldError]) -> None:
        super().__init__()
        self.errors = list(errors)

    def to_body(self) -> dict:
        body = super().to_body()
        body["errors"] = [error.as_dict() for error in self.errors]
        return body


class InvalidIdentifier(ReviewHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    reason = "invalid_id"
    message = "Invalid review ID"


class NotFound(ReviewHubError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "not_found"
    message = "Review not found"


class Unauthorized(ReviewHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "unauthorized"
    message = "Unauthorized"


class Forbidden(ReviewHubError):
    status_code = status.HTTP_403_FORBIDDEN
    reason = "forbidden"
    message = "Admin access required"


class UpstreamFailure(ReviewHubError):
    """Store or file system failed; the client only ever sees the opaque message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason = "upstream_failure"
    message = "Internal server error"


def review_error_handler(_: Request, exc: ReviewHubError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


def apply_error_handlers(app: FastAPI) -> None:
    """Attach the ReviewHubError handler to an app."""

    app.add_exception_handler(ReviewHubError, review_error_handler)
