# repair_cafe/crud/crud_item_comment.py
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from repair_cafe.models.item_comment import ItemComment
from repair_cafe.schemas.item_activity import CommentCreate
from .base import CRUDBase


class CRUDItemComment(CRUDBase[ItemComment, CommentCreate, CommentCreate]):
    def add(self, db: Session, *, item_id: str, user_id: str, comment: str) -> ItemComment:
        """Flush only."""
        db_obj = self.model(item_id=item_id, user_id=user_id, comment=comment)
        db.add(db_obj)
        db.flush()
        return db_obj

    def get_by_item(self, db: Session, *, item_id: str) -> List[ItemComment]:
        return (
            db.query(self.model)
            .filter(self.model.item_id == item_id)
            .order_by(self.model.created_at.asc())
            .all()
        )

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


item_comment = CRUDItemComment(ItemComment)
