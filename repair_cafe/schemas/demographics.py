# repair_cafe/schemas/demographics.py
from typing import Optional

from pydantic import BaseModel, model_validator


class DemographicsSubmit(BaseModel):
    """Answers for one registration or one fixer profile; every answer is optional."""

    registration_id: Optional[str] = None
    fixer_id: Optional[str] = None
    age_group: Optional[str] = None
    gender: Optional[str] = None
    gender_self_describe: Optional[str] = None
    newcomer_to_canada: Optional[bool] = None

    @model_validator(mode="after")
    def one_subject(self):
        if not self.registration_id and not self.fixer_id:
            raise ValueError("registration_id or fixer_id is required")
        return self


class Demographics(BaseModel):
    id: str
    registration_id: Optional[str] = None
    fixer_id: Optional[str] = None
    age_group: Optional[str] = None
    gender: Optional[str] = None
    gender_self_describe: Optional[str] = None
    newcomer_to_canada: Optional[bool] = None

    model_config = {"from_attributes": True}


class DemographicsResponse(BaseModel):
    success: bool = True
    demographics: Demographics
