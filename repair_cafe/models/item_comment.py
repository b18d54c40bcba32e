# repair_cafe/models/item_comment.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class ItemComment(Base):
    """A note left on an item by its owner, a fixer or an admin."""

    __tablename__ = "item_comments"

    id = Column(
        String, primary_key=True, default=lambda: f"icm_{uuid.uuid4().hex[:12]}"
    )
    item_id = Column(
        String, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", lazy="joined")
