# repair_cafe/api/v1/endpoints/auth.py
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.api import deps
from repair_cafe.core.config import settings
from repair_cafe.core.exceptions import UnauthorizedError
from repair_cafe.core.limiter import limiter, magic_link_rate
from repair_cafe.db.session import get_db
from repair_cafe.schemas.auth import (
    MagicLinkRequest,
    MagicLinkResponse,
    PrincipalResponse,
    VerifyResponse,
)
from repair_cafe.services import auth_service, notification_service
from repair_cafe.services.auth_service import Principal

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/magic-link", response_model=MagicLinkResponse)
@limiter.limit(magic_link_rate)
def request_magic_link(
    request: Request,
    link_in: MagicLinkRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Emails a one-hour, single-use sign-in link. Unknown emails get an
    account created on the fly.
    """
    _, notification_ids = auth_service.request_magic_link(
        db, email=link_in.email, name=link_in.name
    )
    background_tasks.add_task(notification_service.dispatch_pending, notification_ids)
    return MagicLinkResponse(message="Check your email for a sign-in link")


@router.get("/verify", response_model=VerifyResponse)
def verify_magic_link(
    response: Response,
    token: str = Query(""),
    db: Session = Depends(get_db),
):
    db_user, session_token = auth_service.verify_magic_link(db, token=token)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_token,
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.ENV != "local",
        samesite="lax",
        path="/",
    )
    return VerifyResponse(user=db_user)


@router.get("/me", response_model=PrincipalResponse)
def read_current_user(
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    db_user = crud.user.get(db, id=principal.user_id)
    if not db_user:
        raise UnauthorizedError()
    return PrincipalResponse(user=db_user)


@router.post("/logout", response_model=MagicLinkResponse)
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return MagicLinkResponse(message="Signed out")
