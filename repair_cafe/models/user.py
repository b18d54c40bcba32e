# repair_cafe/models/user.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, String, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base
from repair_cafe.models.skill import user_skills


class User(Base):
    __tablename__ = "users"

    id = Column(
        String, primary_key=True, default=lambda: f"usr_{uuid.uuid4().hex[:12]}"
    )
    # Always stored lower-cased
    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="attendee", server_default="attendee")
    email_verified = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    registrations = relationship("Registration", back_populates="user")
    skills = relationship("Skill", secondary=user_skills, lazy="selectin")
    notification_preference = relationship(
        "NotificationPreference", back_populates="user", uselist=False
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email} role={self.role}>"
