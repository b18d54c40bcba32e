# repair_cafe/models/skill.py
import uuid
from sqlalchemy import Boolean, Column, ForeignKey, String, Table, Text, text
from repair_cafe.db.base_class import Base

# Structured skill tags of a user. No model class of its own.
user_skills = Table(
    "user_skills",
    Base.metadata,
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", String, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
    Column("self_rated", Boolean, nullable=False, server_default=text("false")),
)


class Skill(Base):
    __tablename__ = "skills"

    id = Column(
        String, primary_key=True, default=lambda: f"skl_{uuid.uuid4().hex[:12]}"
    )
    name = Column(String, nullable=False, unique=True)
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
