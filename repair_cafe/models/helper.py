# repair_cafe/models/helper.py
import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text, text
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class Helper(Base):
    """Non-repair volunteer (greeting, check-in desk, refreshments...)."""

    __tablename__ = "helpers"

    id = Column(
        String, primary_key=True, default=lambda: f"hlp_{uuid.uuid4().hex[:12]}"
    )
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    availability = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    has_volunteered_before = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    roles = Column(JSON, nullable=False, default=list)
    # pending | contacted | active | inactive
    status = Column(String, nullable=False, default="pending", server_default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
