"""Per-user notification opt-in/opt-out flags."""

import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class NotificationPreference(Base):
    """
    Absent rows mean "notify": callers fall back to the defaults in
    `crud_notification_preference.DEFAULT_PREFERENCES`.
    """

    __tablename__ = "notification_preferences"

    id = Column(
        String, primary_key=True, default=lambda: f"npref_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    notify_comments = Column(Boolean, nullable=False, server_default=text("true"))
    notify_events = Column(Boolean, nullable=False, server_default=text("true"))
    notify_daily_digest = Column(Boolean, nullable=False, server_default=text("false"))
    notify_weekly_digest = Column(Boolean, nullable=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("User", back_populates="notification_preference")

    def __repr__(self) -> str:
        return f"<NotificationPreference {self.id} user={self.user_id}>"
