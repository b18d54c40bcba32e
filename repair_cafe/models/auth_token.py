# repair_cafe/models/auth_token.py
"""Single-use magic-link tokens. Only the SHA-256 hash is stored."""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class AuthToken(Base):
    __tablename__ = "auth_tokens"

    id = Column(
        String, primary_key=True, default=lambda: f"atk_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash = Column(String, nullable=False, unique=True, index=True)
    type = Column(String, nullable=False, default="magic_link")
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User")
