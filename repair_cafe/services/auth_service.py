# repair_cafe/services/auth_service.py
"""
Sign-in and credential resolution.

Two kinds of credential reach the API: the session cookie (a signed JWT
naming the user) and the per-registration management token from emailed
links. Both are resolved to a `Principal` before any business logic runs,
so services only ever see one shape of caller.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.config import settings
from repair_cafe.core.exceptions import UnauthorizedError, ValidationError
from repair_cafe.crud import crud_auth_token
from repair_cafe.models.user import User
from repair_cafe.schemas.auth import SessionTokenPayload
from repair_cafe.services import notification_service

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str
    name: str
    role: str
    # "session" or "registration_token"
    via: str
    # Set only for token principals: the one registration they may touch
    registration_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_fixer(self) -> bool:
        return self.role in ("fixer", "admin")

    def can_manage_registration(self, registration) -> bool:
        if self.via == "registration_token":
            return self.registration_id == registration.id
        return self.user_id == registration.user_id


def _principal_for(db_user: User, via: str, registration_id: Optional[str] = None) -> Principal:
    return Principal(
        user_id=db_user.id,
        email=db_user.email,
        name=db_user.name,
        role=db_user.role,
        via=via,
        registration_id=registration_id,
    )


@dataclass(frozen=True)
class SessionCredential:
    token: str

    def resolve(self, db: Session) -> Principal:
        payload = decode_session_token(self.token)
        db_user = crud.user.get(db, id=payload.sub)
        if not db_user:
            raise UnauthorizedError("Session is no longer valid")
        # Role is read from the database so promotions apply immediately
        return _principal_for(db_user, "session")


@dataclass(frozen=True)
class RegistrationTokenCredential:
    registration_id: str
    token: str

    def resolve(self, db: Session) -> Principal:
        reg = crud.registration.get(db, id=self.registration_id)
        if (
            not reg
            or not reg.management_token
            or not secrets.compare_digest(reg.management_token, self.token)
        ):
            raise UnauthorizedError("Invalid registration token")
        return _principal_for(reg.user, "registration_token", registration_id=reg.id)


def resolve_principal(db: Session, credentials: List[object]) -> Principal:
    """
    Resolves the first credential that checks out.

    Raises UnauthorizedError when none are given or none are valid.
    """
    last_error: Optional[UnauthorizedError] = None
    for credential in credentials:
        try:
            return credential.resolve(db)
        except UnauthorizedError as e:
            last_error = e
    raise last_error or UnauthorizedError()


# --- session tokens ---------------------------------------------------------


def create_session_token(db_user: User, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    expires = now + timedelta(days=settings.SESSION_TTL_DAYS)
    to_encode = {"sub": db_user.id, "role": db_user.role, "exp": int(expires.timestamp())}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str) -> SessionTokenPayload:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
        return SessionTokenPayload(**payload)
    except (JWTError, ValueError):
        raise UnauthorizedError("Invalid or expired session")


# --- magic links ------------------------------------------------------------


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def request_magic_link(
    db: Session, *, email: str, name: Optional[str] = None
) -> Tuple[User, List[str]]:
    """
    Issues a single-use sign-in link and queues the email carrying it.

    Returns the user and the outbox ids to dispatch after the response.
    """
    db_user = crud.user.get_or_create(db, email=email, name=name)
    token = secrets.token_hex(32)
    expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=settings.MAGIC_LINK_TTL_MINUTES
    )
    crud_auth_token.create_magic_link_token(
        db, user_id=db_user.id, token_hash=hash_token(token), expires_at=expires_at
    )

    url = f"{settings.APP_URL}/auth/verify?token={token}"
    message = notification_service.enqueue_magic_link(db, db_user=db_user, url=url)
    db.commit()
    logger.info(f"Magic link issued for user {db_user.id}")
    return db_user, [message.id]


def verify_magic_link(db: Session, *, token: str) -> Tuple[User, str]:
    """
    Consumes the token and returns the user plus a fresh session token.
    """
    if not token:
        raise ValidationError("Token is required", field="token")

    auth_token = crud_auth_token.get_usable_token(db, token_hash=hash_token(token))
    if not auth_token:
        raise ValidationError("Invalid or expired token", field="token")

    crud_auth_token.mark_used(db, db_obj=auth_token)
    db_user = auth_token.user
    db_user.email_verified = True
    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    logger.info(f"User {db_user.id} signed in via magic link")
    return db_user, create_session_token(db_user)
