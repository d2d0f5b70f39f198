from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import Forbidden
from core.security import Principal, get_current_principal
from schemas.message import (
    MessageCreate,
    MessageCreatedResponse,
    MessageListResponse,
    MessageRead,
    ThreadListResponse,
)
from services import messaging_gate
from services.ownership import load_owned_wrestler

router = APIRouter(prefix="/messages", tags=["messages"])
threads_router = APIRouter(tags=["messages"])


@router.get(
    "/{match_id}",
    response_model=MessageListResponse,
    summary="Переписка по подтверждённому матчу",
)
async def get_messages(
    match_id: int,
    mark_read: bool = Query(False, alias="markRead"),
    limit: int = Query(messaging_gate.DEFAULT_PAGE_SIZE, ge=1, le=messaging_gate.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MessageListResponse:
    match, messages = await messaging_gate.list_messages(
        db, match_id, current_user, mark_read=mark_read, limit=limit, offset=offset
    )
    return MessageListResponse(
        match_id=match.id,
        match_status=match.status,
        messages=[MessageRead.model_validate(m) for m in messages],
    )


@router.post(
    "/{match_id}",
    response_model=MessageCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Написать сообщение по подтверждённому матчу",
)
async def send_message(
    match_id: int,
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MessageCreatedResponse:
    message = await messaging_gate.post_message(db, match_id, current_user, payload.text)
    return MessageCreatedResponse(message=MessageRead.model_validate(message))


@threads_router.get(
    "/wrestlers/{wrestler_id}/messages",
    response_model=ThreadListResponse,
    summary="Переписки борца по подтверждённым матчам",
)
async def wrestler_threads(
    wrestler_id: int,
    limit: int = Query(messaging_gate.DEFAULT_PAGE_SIZE, ge=1, le=messaging_gate.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> ThreadListResponse:
    wrestler = await load_owned_wrestler(db, wrestler_id, current_user)
    threads = await messaging_gate.list_threads(
        db, wrestler.parent_user_id, wrestler_id=wrestler.id, limit=limit, offset=offset
    )
    return ThreadListResponse(threads=threads, limit=limit, offset=offset)


@threads_router.get(
    "/coach/messages",
    response_model=ThreadListResponse,
    summary="Переписки тренера по подтверждённым матчам",
)
async def coach_threads(
    limit: int = Query(messaging_gate.DEFAULT_PAGE_SIZE, ge=1, le=messaging_gate.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> ThreadListResponse:
    if not (current_user.is_coach or current_user.is_admin):
        raise Forbidden("Only coaches have a coach inbox")
    threads = await messaging_gate.list_threads(
        db, current_user.user_id, coach_user_id=current_user.user_id, limit=limit, offset=offset
    )
    return ThreadListResponse(threads=threads, limit=limit, offset=offset)
