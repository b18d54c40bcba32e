# repair_cafe/crud/crud_item_feedback.py
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from repair_cafe.models.item_feedback import ItemFeedback
from repair_cafe.schemas.item_activity import FeedbackCreate
from .base import CRUDBase


class CRUDItemFeedback(CRUDBase[ItemFeedback, FeedbackCreate, FeedbackCreate]):
    def get_for_user(
        self, db: Session, *, item_id: str, user_id: str
    ) -> Optional[ItemFeedback]:
        return (
            db.query(self.model)
            .filter(self.model.item_id == item_id, self.model.user_id == user_id)
            .first()
        )

    def upsert(
        self, db: Session, *, item_id: str, user_id: str, obj_in: FeedbackCreate
    ) -> ItemFeedback:
        """A second submission replaces the first. Flush only."""
        db_obj = self.get_for_user(db, item_id=item_id, user_id=user_id)
        if db_obj is None:
            db_obj = self.model(item_id=item_id, user_id=user_id)
        db_obj.rating = obj_in.rating
        db_obj.comment = obj_in.comment or ""
        db.add(db_obj)
        db.flush()
        return db_obj

    def ratings_by_items(self, db: Session, *, item_ids: List[str]) -> Dict[str, List[int]]:
        ratings = defaultdict(list)
        if not item_ids:
            return ratings
        rows = (
            db.query(self.model.item_id, self.model.rating)
            .filter(self.model.item_id.in_(item_ids))
            .all()
        )
        for item_id, rating in rows:
            ratings[item_id].append(rating)
        return ratings


item_feedback = CRUDItemFeedback(ItemFeedback)
