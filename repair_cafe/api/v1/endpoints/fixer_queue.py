# repair_cafe/api/v1/endpoints/fixer_queue.py
"""
Fixer-facing repair queue for a running event.

All routes need the `fixer` or `admin` role. Changing an item that is
already assigned needs to be its fixer or an admin.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.models.item import Item as ItemModel
from repair_cafe.schemas.item import (
    ClaimItemRequest,
    Item,
    ItemDetail,
    ItemDetailResponse,
    ItemResponse,
    MatchedItem,
    MatchedItemList,
    OutcomeRequest,
    QueueItem,
    QueueResponse,
    StatusUpdateRequest,
)
from repair_cafe.services import item_service, notification_service
from repair_cafe.services.auth_service import Principal


router = APIRouter(prefix="/fixer/events/{event_id}", tags=["Fixer Queue"])


def _names(db_item: ItemModel) -> dict:
    return {
        "owner_name": db_item.owner.name if db_item.owner else None,
        "fixer_name": db_item.fixer.name if db_item.fixer else None,
    }


@router.get("/queue", response_model=QueueResponse)
def get_queue(
    event_id: str,
    status_filter: str = Query(
        "all", alias="filter", pattern="^(all|queued|in-progress|completed)$"
    ),
    sort: str = Query("position", pattern="^(position|name)$"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.require_fixer_or_admin),
):
    event, items = item_service.get_queue(
        db, event_id=event_id, status_filter=status_filter, sort=sort
    )
    return QueueResponse(
        event_title=event.title,
        items=[
            QueueItem(
                id=i.id,
                name=i.name,
                problem=i.problem,
                status=i.status,
                queue_position=i.queue_position,
                **_names(i),
            )
            for i in items
        ],
    )


@router.get("/items", response_model=MatchedItemList)
def list_matched_items(
    event_id: str,
    skill: Optional[str] = Query(None),
    item_type: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.require_fixer_or_admin),
):
    """Items with the ones matching the caller's skills first."""
    is_fixer, user_skills, matches = item_service.match_items(
        db, event_id=event_id, principal=principal, skill=skill, item_type=item_type
    )
    item_ids = [m.item.id for m in matches]
    comment_counts = crud.item_comment.count_by_items(db, item_ids=item_ids)
    interest_counts = crud.fixer_interest.count_by_items(db, item_ids=item_ids)
    mine = crud.fixer_interest.item_ids_for_user(
        db, user_id=principal.user_id, item_ids=item_ids
    )
    return MatchedItemList(
        is_fixer=is_fixer,
        user_skills=user_skills,
        items=[
            MatchedItem(
                **Item.model_validate(m.item).model_dump(),
                owner_name=m.item.owner.name if m.item.owner else None,
                suggested_skills=m.suggested_skills,
                skill_match=m.skill_match,
                comment_count=comment_counts.get(m.item.id, 0),
                interest_count=interest_counts.get(m.item.id, 0),
                user_interested=m.item.id in mine,
            )
            for m in matches
        ],
    )


@router.get("/items/{item_id}", response_model=ItemDetailResponse)
def get_item(
    event_id: str,
    item_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.require_fixer_or_admin),
):
    db_item = item_service.get_item_detail(db, event_id=event_id, item_id=item_id)
    return ItemDetailResponse(
        item=ItemDetail(**Item.model_validate(db_item).model_dump(), **_names(db_item))
    )


@router.post("/claim-item", response_model=ItemResponse)
def claim_item(
    event_id: str,
    claim_in: ClaimItemRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.require_fixer_or_admin),
):
    change = item_service.claim_item(
        db, event_id=event_id, item_id=claim_in.item_id, principal=principal
    )
    background_tasks.add_task(notification_service.dispatch_pending, change.notification_ids)
    return ItemResponse(message=change.message, item=change.item)


@router.post("/items/{item_id}/outcome", response_model=ItemResponse)
def log_outcome(
    event_id: str,
    item_id: str,
    outcome_in: OutcomeRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.require_fixer_or_admin),
):
    change = item_service.log_outcome(
        db,
        event_id=event_id,
        item_id=item_id,
        principal=principal,
        outcome=outcome_in.outcome,
        outcome_notes=outcome_in.outcome_notes,
        repair_method=outcome_in.repair_method,
        parts_used=outcome_in.parts_used,
    )
    background_tasks.add_task(notification_service.dispatch_pending, change.notification_ids)
    return ItemResponse(message=change.message, item=change.item)


@router.post("/update-item", response_model=ItemResponse)
def update_item_status(
    event_id: str,
    update_in: StatusUpdateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.require_fixer_or_admin),
):
    change = item_service.update_status(
        db,
        event_id=event_id,
        item_id=update_in.item_id,
        principal=principal,
        status=update_in.status.value,
        outcome=update_in.outcome,
        outcome_notes=update_in.outcome_notes,
        repair_method=update_in.repair_method,
        parts_used=update_in.parts_used,
    )
    if change.notification_ids:
        background_tasks.add_task(
            notification_service.dispatch_pending, change.notification_ids
        )
    return ItemResponse(message=change.message, item=change.item)
