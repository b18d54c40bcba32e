# repair_cafe/api/deps.py
from typing import Optional

from fastapi import Depends, Query, Security
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from repair_cafe.core.config import settings
from repair_cafe.core.exceptions import ForbiddenError, UnauthorizedError
from repair_cafe.db.session import get_db
from repair_cafe.services.auth_service import (
    Principal,
    RegistrationTokenCredential,
    SessionCredential,
    resolve_principal,
)

# The session lives in an HTTP-only cookie set by /auth/verify
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


def get_current_principal(
    db: Session = Depends(get_db),
    session_token: Optional[str] = Security(session_cookie),
) -> Principal:
    if not session_token:
        raise UnauthorizedError()
    return resolve_principal(db, [SessionCredential(session_token)])


def get_registration_principal(
    registration_id: str,
    token: Optional[str] = Query(None, description="Management token from the emailed link"),
    db: Session = Depends(get_db),
    session_token: Optional[str] = Security(session_cookie),
) -> Principal:
    """
    Either the holder of the registration's management token or the
    signed-in user. A token that does not check out falls back to the
    session.
    """
    credentials = []
    if token:
        credentials.append(RegistrationTokenCredential(registration_id, token))
    if session_token:
        credentials.append(SessionCredential(session_token))
    return resolve_principal(db, credentials)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
    return principal


def require_fixer_or_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.is_fixer:
        raise ForbiddenError("Fixer access required")
    return principal
