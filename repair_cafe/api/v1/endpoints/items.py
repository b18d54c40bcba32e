# repair_cafe/api/v1/endpoints/items.py
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.models.item_comment import ItemComment as ItemCommentModel
from repair_cafe.schemas.item import Item, MyItem, MyItemList
from repair_cafe.schemas.item_activity import (
    CommentCreate,
    CommentList,
    CommentResponse,
    FeedbackCreate,
    FeedbackResponse,
    InterestResponse,
    InterestUpdate,
    ItemComment,
)
from repair_cafe.services import item_activity_service, item_service, notification_service
from repair_cafe.services.auth_service import Principal

router = APIRouter(tags=["Items"])


def _comment(db_comment: ItemCommentModel) -> ItemComment:
    return ItemComment.model_validate(db_comment).model_copy(
        update={"user_name": db_comment.user.name if db_comment.user else None}
    )


@router.get("/items/my", response_model=MyItemList)
def list_my_items(
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    """The caller's items across all events, newest event first."""
    items = item_service.get_my_items(db, principal=principal)
    ratings = crud.item_feedback.ratings_by_items(db, item_ids=[i.id for i in items])
    return MyItemList(
        items=[
            MyItem(
                **Item.model_validate(i).model_dump(),
                event_title=i.registration.event.title,
                ratings=ratings.get(i.id, []),
            )
            for i in items
        ]
    )


@router.get("/items/{item_id}/comments", response_model=CommentList)
def list_comments(
    item_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    """Comments on an item, oldest first."""
    comments = item_activity_service.list_comments(db, item_id=item_id)
    return CommentList(comments=[_comment(c) for c in comments])


@router.post(
    "/items/{item_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    item_id: str,
    comment_in: CommentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    """
    Leave a comment on an item. The item's owner gets an email about it
    unless they wrote it themselves or have comment emails turned off.
    """
    result = item_activity_service.add_comment(
        db, item_id=item_id, principal=principal, comment=comment_in.comment
    )
    background_tasks.add_task(
        notification_service.dispatch_pending, result.notification_ids
    )
    return CommentResponse(comment=_comment(result.comment))


@router.get("/items/{item_id}/feedback", response_model=FeedbackResponse)
def get_feedback(
    item_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    feedback = item_activity_service.get_feedback(
        db, item_id=item_id, principal=principal
    )
    return FeedbackResponse(feedback=feedback)


@router.post("/items/{item_id}/feedback", response_model=FeedbackResponse)
def submit_feedback(
    item_id: str,
    feedback_in: FeedbackCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    """Rate the repair from 1 to 5. Only the item's owner may; resubmitting replaces the rating."""
    feedback = item_activity_service.submit_feedback(
        db, item_id=item_id, principal=principal, obj_in=feedback_in
    )
    return FeedbackResponse(feedback=feedback)


@router.get("/items/{item_id}/interest", response_model=InterestResponse)
def get_interest(
    item_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    interest = item_activity_service.get_interest(
        db, item_id=item_id, principal=principal
    )
    return InterestResponse(interested=interest is not None, interest=interest)


@router.patch("/items/{item_id}/interest", response_model=InterestResponse)
def update_interest(
    item_id: str,
    interest_in: InterestUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    """Flag or withdraw interest in fixing an item. Fixers only."""
    interest = item_activity_service.set_interest(
        db, item_id=item_id, principal=principal, obj_in=interest_in
    )
    return InterestResponse(interested=interest is not None, interest=interest)
