# repair_cafe/crud/crud_auth_token.py
"""CRUD operations for magic-link tokens."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from repair_cafe.models.auth_token import AuthToken


def create_magic_link_token(
    db: Session, *, user_id: str, token_hash: str, expires_at: datetime
) -> AuthToken:
    db_obj = AuthToken(
        user_id=user_id,
        token_hash=token_hash,
        type="magic_link",
        expires_at=expires_at,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_usable_token(db: Session, *, token_hash: str) -> Optional[AuthToken]:
    """Unused, unexpired magic-link token with this hash."""
    now = datetime.now(timezone.utc)
    return (
        db.query(AuthToken)
        .filter(
            AuthToken.token_hash == token_hash,
            AuthToken.type == "magic_link",
            AuthToken.used_at.is_(None),
            AuthToken.expires_at > now,
        )
        .first()
    )


def mark_used(db: Session, *, db_obj: AuthToken) -> AuthToken:
    db_obj.used_at = datetime.now(timezone.utc)
    db.add(db_obj)
    db.flush()
    return db_obj
