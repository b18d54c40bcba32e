# repair_cafe/crud/crud_skill.py
from typing import List

from sqlalchemy.orm import Session

from repair_cafe.models.skill import Skill
from repair_cafe.models.user import User
from repair_cafe.schemas.volunteer import Skill as SkillSchema
from .base import CRUDBase


class CRUDSkill(CRUDBase[Skill, SkillSchema, SkillSchema]):
    def get_all_ordered(self, db: Session) -> List[Skill]:
        return (
            db.query(self.model)
            .order_by(self.model.category.asc(), self.model.name.asc())
            .all()
        )

    def get_by_ids(self, db: Session, *, ids: List[str]) -> List[Skill]:
        if not ids:
            return []
        return db.query(self.model).filter(self.model.id.in_(ids)).all()

    def replace_for_user(self, db: Session, *, db_user: User, skill_ids: List[str]) -> List[Skill]:
        """Unknown skill ids are ignored. Flush only."""
        db_user.skills = self.get_by_ids(db, ids=skill_ids)
        db.add(db_user)
        db.flush()
        return db_user.skills


skill = CRUDSkill(Skill)
