# repair_cafe/models/notification_outbox.py
"""
Outbound email outbox.

Rows are written in the same transaction as the change that triggers them
and delivered afterwards, so a failed send is visible and retried instead
of disappearing into a log line.
"""
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class NotificationOutbox(Base):
    __tablename__ = "notification_outbox"

    id = Column(
        String, primary_key=True, default=lambda: f"ntf_{uuid.uuid4().hex[:12]}"
    )
    # registration_confirmation | item_in_progress | item_completed |
    # event_reminder | magic_link | item_comment
    kind = Column(String(50), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # Registration or item the message is about
    reference_id = Column(String, nullable=True, index=True)

    recipient_email = Column(String(255), nullable=False)
    subject = Column(String, nullable=False)
    text_body = Column(Text, nullable=False)
    html_body = Column(Text, nullable=False)

    # pending | sending | sent | failed | skipped
    status = Column(String(20), nullable=False, default="pending", server_default="pending")
    attempts = Column(Integer, nullable=False, default=0, server_default=text("0"))
    last_error = Column(Text, nullable=True)
    external_id = Column(String(255), nullable=True)
    # Set when a dispatcher takes the row; stale claims are retried
    claimed_at = Column(DateTime(timezone=True), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_notification_outbox_status_created", "status", "created_at"),
    )
