# repair_cafe/crud/crud_fixer_interest.py
from typing import Dict, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from repair_cafe.models.fixer_interest import FixerInterest
from repair_cafe.schemas.item_activity import InterestUpdate
from .base import CRUDBase


class CRUDFixerInterest(CRUDBase[FixerInterest, InterestUpdate, InterestUpdate]):
    def get_for_user(
        self, db: Session, *, item_id: str, user_id: str
    ) -> Optional[FixerInterest]:
        return (
            db.query(self.model)
            .filter(self.model.item_id == item_id, self.model.user_id == user_id)
            .first()
        )

    def upsert(
        self, db: Session, *, item_id: str, user_id: str, obj_in: InterestUpdate
    ) -> FixerInterest:
        """
        Creates the interest, or fills in the fields that were sent on an
        existing one. Flush only.
        """
        db_obj = self.get_for_user(db, item_id=item_id, user_id=user_id)
        if db_obj is None:
            db_obj = self.model(item_id=item_id, user_id=user_id)
        for field in ("notes", "suggested_parts", "questions"):
            value = getattr(obj_in, field)
            if value:
                setattr(db_obj, field, value)
        db.add(db_obj)
        db.flush()
        return db_obj

    def remove_for_user(self, db: Session, *, item_id: str, user_id: str) -> int:
        deleted = (
            db.query(self.model)
            .filter(self.model.item_id == item_id, self.model.user_id == user_id)
            .delete(synchronize_session="fetch")
        )
        db.flush()
        return deleted

    def count_by_items(self, db: Session, *, item_ids: List[str]) -> Dict[str, int]:
        if not item_ids:
            return {}
        rows = (
            db.query(self.model.item_id, func.count(self.model.id))
            .filter(self.model.item_id.in_(item_ids))
            .group_by(self.model.item_id)
            .all()
        )
        return {item_id: count for item_id, count in rows}

    def item_ids_for_user(self, db: Session, *, user_id: str, item_ids: List[str]) -> Set[str]:
        if not item_ids:
            return set()
        rows = (
            db.query(self.model.item_id)
            .filter(self.model.user_id == user_id, self.model.item_id.in_(item_ids))
            .all()
        )
        return {item_id for (item_id,) in rows}


fixer_interest = CRUDFixerInterest(FixerInterest)
