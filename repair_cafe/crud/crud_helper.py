# repair_cafe/crud/crud_helper.py
from typing import List

from sqlalchemy.orm import Session

from repair_cafe.models.helper import Helper
from repair_cafe.schemas.volunteer import HelperCreate, HelperUpdate
from .base import CRUDBase


class CRUDHelper(CRUDBase[Helper, HelperCreate, HelperUpdate]):
    def create(self, db: Session, *, obj_in: HelperCreate) -> Helper:
        data = obj_in.model_dump()
        data["email"] = data["email"].strip().lower()
        data["status"] = "pending"
        db_obj = self.model(**data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_multi_ordered(self, db: Session) -> List[Helper]:
        return db.query(self.model).order_by(self.model.created_at.desc()).all()


helper = CRUDHelper(Helper)
