# repair_cafe/crud/crud_user.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from repair_cafe.core.config import settings
from repair_cafe.models.user import User
from repair_cafe.schemas.user import UserCreate, UserUpdate
from .base import CRUDBase

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return (
            db.query(self.model)
            .filter(self.model.email == email.strip().lower())
            .first()
        )

    def get_or_create(
        self, db: Session, *, email: str, name: Optional[str] = None, commit: bool = True
    ) -> User:
        """
        Looks a user up by lower-cased email, creating one if absent.

        New users on the configured admin allow-list get the `admin` role,
        everyone else starts as an `attendee`. With `commit=False` the new
        row is only flushed so the caller can fold it into a larger
        transaction.
        """
        email = email.strip().lower()
        existing = self.get_by_email(db, email=email)
        if existing:
            return existing

        role = "admin" if email in settings.admin_emails else "attendee"
        db_obj = self.model(email=email, name=name or email.split("@")[0], role=role)
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        logger.info(f"Created user {db_obj.id} with role {role}")
        return db_obj

    def set_role(self, db: Session, *, db_obj: User, role: str) -> User:
        db_obj.role = role
        db.add(db_obj)
        db.flush()
        return db_obj


user = CRUDUser(User)
