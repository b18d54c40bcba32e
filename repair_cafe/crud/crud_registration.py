# repair_cafe/crud/crud_registration.py
import secrets
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from repair_cafe.models.registration import Registration
from repair_cafe.models.user import User
from repair_cafe.schemas.registration import RegistrationCreate
from .base import CRUDBase


def generate_token() -> str:
    """Random 32-character hex token, used for QR codes and management links."""
    return secrets.token_hex(16)


def escape_like(value: str) -> str:
    """Escapes LIKE wildcards with a backslash."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CRUDRegistration(CRUDBase[Registration, RegistrationCreate, RegistrationCreate]):
    def get_active_for_user(
        self, db: Session, *, event_id: str, user_id: str
    ) -> Optional[Registration]:
        """
        The user's non-cancelled registration for this event, if any.
        """
        return (
            db.query(self.model)
            .filter(
                and_(
                    self.model.event_id == event_id,
                    self.model.user_id == user_id,
                    self.model.status != "cancelled",
                )
            )
            .first()
        )

    def next_position(self, db: Session, *, event_id: str) -> int:
        current = (
            db.query(func.max(self.model.position))
            .filter(self.model.event_id == event_id)
            .scalar()
        )
        return (current or 0) + 1

    def create_for_event(
        self, db: Session, *, event_id: str, user_id: str, status: str
    ) -> Registration:
        """
        Adds a registration with a fresh QR code and management token.

        Only flushes; the caller owns the transaction.
        """
        db_obj = self.model(
            event_id=event_id,
            user_id=user_id,
            status=status,
            position=self.next_position(db, event_id=event_id),
            qr_code=generate_token(),
            management_token=generate_token(),
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def get_by_management_token(
        self, db: Session, *, token: str
    ) -> Optional[Registration]:
        return db.query(self.model).filter(self.model.management_token == token).first()

    def ensure_management_token(self, db: Session, *, db_obj: Registration) -> str:
        """Registrations created before tokens existed get one lazily."""
        if not db_obj.management_token:
            db_obj.management_token = generate_token()
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        return db_obj.management_token

    def get_by_qr(
        self, db: Session, *, event_id: str, qr_code: str
    ) -> Optional[Registration]:
        return (
            db.query(self.model)
            .filter(
                self.model.event_id == event_id,
                self.model.qr_code == qr_code,
                self.model.status != "cancelled",
            )
            .first()
        )

    def get_active_in_event(
        self, db: Session, *, event_id: str, registration_id: str
    ) -> Optional[Registration]:
        return (
            db.query(self.model)
            .filter(
                self.model.id == registration_id,
                self.model.event_id == event_id,
                self.model.status != "cancelled",
            )
            .first()
        )

    def search(
        self, db: Session, *, event_id: str, query: str, limit: int = 20
    ) -> List[Registration]:
        """
        Case-insensitive substring match on attendee name or email. `%` and
        `_` in the query match literally.
        """
        pattern = f"%{escape_like(query.lower())}%"
        return (
            db.query(self.model)
            .join(User, User.id == self.model.user_id)
            .filter(
                self.model.event_id == event_id,
                self.model.status != "cancelled",
                or_(
                    func.lower(User.name).like(pattern, escape="\\"),
                    func.lower(User.email).like(pattern, escape="\\"),
                ),
            )
            .order_by(User.name.asc())
            .limit(limit)
            .all()
        )

    def get_multi_by_event(self, db: Session, *, event_id: str) -> List[Registration]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id)
            .order_by(self.model.position.asc())
            .all()
        )

    def get_active_by_event(self, db: Session, *, event_id: str) -> List[Registration]:
        return (
            db.query(self.model)
            .filter(
                self.model.event_id == event_id, self.model.status != "cancelled"
            )
            .order_by(self.model.position.asc())
            .all()
        )

    def count_by_status(self, db: Session, *, event_id: str) -> dict:
        rows = (
            db.query(self.model.status, func.count(self.model.id))
            .filter(self.model.event_id == event_id)
            .group_by(self.model.status)
            .all()
        )
        return {status: count for status, count in rows}

    def mark_checked_in(self, db: Session, *, db_obj: Registration) -> Registration:
        db_obj.status = "checked_in"
        db_obj.checked_in_at = datetime.now(timezone.utc)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


registration = CRUDRegistration(Registration)
