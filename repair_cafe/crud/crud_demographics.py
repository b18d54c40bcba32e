# repair_cafe/crud/crud_demographics.py
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from repair_cafe.models.registration_demographics import RegistrationDemographics
from repair_cafe.schemas.demographics import DemographicsSubmit
from .base import CRUDBase

ANSWER_FIELDS = ("age_group", "gender", "gender_self_describe", "newcomer_to_canada")


class CRUDDemographics(
    CRUDBase[RegistrationDemographics, DemographicsSubmit, DemographicsSubmit]
):
    def get_for_subject(
        self,
        db: Session,
        *,
        registration_id: Optional[str] = None,
        fixer_id: Optional[str] = None,
    ) -> Optional[RegistrationDemographics]:
        query = db.query(self.model)
        if registration_id:
            return query.filter(self.model.registration_id == registration_id).first()
        return query.filter(self.model.fixer_id == fixer_id).first()

    def upsert(
        self, db: Session, *, obj_in: DemographicsSubmit
    ) -> Tuple[RegistrationDemographics, bool]:
        """
        Stores the answers for the registration, or for the fixer when no
        registration is given. Resubmitting overwrites every answer.
        Returns (row, created). Flush only.
        """
        registration_id = obj_in.registration_id
        fixer_id = None if registration_id else obj_in.fixer_id
        db_obj = self.get_for_subject(
            db, registration_id=registration_id, fixer_id=fixer_id
        )
        created = db_obj is None
        if created:
            db_obj = self.model(registration_id=registration_id, fixer_id=fixer_id)
        for field in ANSWER_FIELDS:
            setattr(db_obj, field, getattr(obj_in, field))
        db.add(db_obj)
        db.flush()
        return db_obj, created


demographics = CRUDDemographics(RegistrationDemographics)
