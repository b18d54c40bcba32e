# repair_cafe/models/fixer_interest.py
"""
Fixers flagging items they would like to look at before the event starts.

`user_id` is the fixer's user account: fixer profiles are matched to users
by email, and interest is always expressed by a signed-in user.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class FixerInterest(Base):
    __tablename__ = "fixer_interest"

    id = Column(
        String, primary_key=True, default=lambda: f"fin_{uuid.uuid4().hex[:12]}"
    )
    item_id = Column(
        String, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notes = Column(Text, nullable=True)
    suggested_parts = Column(Text, nullable=True)
    questions = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("User", lazy="joined")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_fixer_interest_item_user"),
    )
