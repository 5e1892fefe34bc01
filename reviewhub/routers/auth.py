from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse

from ..access import AccessLevel, Caller, require
from ..auth import create_access_token
from ..config import get_settings
from ..dependencies import get_caller, get_store
from ..errors import Unauthorized
from ..models import RoleEnum
from ..schemas import UserRead, UserUpsert
from ..storage import ReviewStore

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/auth/user", response_model=UserRead)
def current_user(caller: Caller = Depends(get_caller), store: ReviewStore = Depends(get_store)):
    require(caller, AccessLevel.AUTHENTICATED)
    user = store.get_user(caller.user_id)
    if user is None:
        raise Unauthorized()
    return user


@router.get("/login")
def login(store: ReviewStore = Depends(get_store)) -> RedirectResponse:
    """
    Sign in as the configured development identity and return to the site root.
    """
    settings = get_settings()
    identity = UserUpsert(
        id=settings.dev_login_user_id,
        email=settings.dev_login_email,
        role=RoleEnum(settings.dev_login_role),
    )
    user = store.upsert_user(identity.model_dump(exclude_none=True))
    token = create_access_token({"sub": user.id, "role": user.role.value})

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        httponly=True,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return response


@router.post("/logout")
def logout() -> JSONResponse:
    response = JSONResponse({"message": "Logged out"})
    response.delete_cookie(get_settings().auth_cookie_name)
    return response
