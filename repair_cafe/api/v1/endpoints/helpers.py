# repair_cafe/api/v1/endpoints/helpers.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.schemas.volunteer import HelperCreate, HelperList, HelperResponse, HelperUpdate
from repair_cafe.services import volunteer_service

router = APIRouter(tags=["Helpers"])


@router.post("/helpers", response_model=HelperResponse, status_code=status.HTTP_201_CREATED)
def create_helper(helper_in: HelperCreate, db: Session = Depends(get_db)):
    db_helper = volunteer_service.create_helper(db, obj_in=helper_in)
    return HelperResponse(message="Thanks for volunteering!", helper=db_helper)


@router.get(
    "/admin/helpers",
    response_model=HelperList,
    dependencies=[Depends(deps.require_admin)],
)
def admin_list_helpers(db: Session = Depends(get_db)):
    return HelperList(helpers=crud.helper.get_multi_ordered(db))


@router.patch(
    "/admin/helpers/{helper_id}",
    response_model=HelperResponse,
    dependencies=[Depends(deps.require_admin)],
)
def admin_update_helper(
    helper_id: str, helper_in: HelperUpdate, db: Session = Depends(get_db)
):
    db_helper = volunteer_service.update_helper_status(
        db, helper_id=helper_id, status=helper_in.status.value
    )
    return HelperResponse(message="Helper updated", helper=db_helper)
