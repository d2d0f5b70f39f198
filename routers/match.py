# routers/match.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import Forbidden
from core.security import Principal, get_current_principal
from schemas.match import (
    MatchCreate,
    MatchDetailResponse,
    MatchEnvelope,
    MatchListResponse,
    MatchSideRequest,
)
from services import confirmation, match_repository
from services.ownership import is_participant, load_owned_need, load_owned_wrestler
from utils.match_helpers import to_match_read

router = APIRouter(prefix="/matches", tags=["matches"])


@router.post(
    "",
    response_model=MatchEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Предложить матч или подтвердить существующий для пары запрос/заявка",
)
async def create_match(
    payload: MatchCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchEnvelope:
    side = confirmation.parse_side(payload.side, current_user)
    match, created = await match_repository.create_or_touch(
        db, payload.need_id, payload.interest_id, side, current_user
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return MatchEnvelope(match=to_match_read(match), already_exists=not created)


@router.get(
    "",
    response_model=MatchListResponse,
    summary="Мои матчи: у тренера по запросам, у родителя по борцам",
)
async def list_matches(
    status_filter: str = Query(match_repository.DEFAULT_LIST_STATUS, alias="status"),
    need_id: Optional[int] = Query(None, alias="needId"),
    wrestler_id: Optional[int] = Query(None, alias="wrestlerId"),
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchListResponse:
    if current_user.is_coach:
        if need_id is not None:
            await load_owned_need(db, need_id, current_user)
        matches = await match_repository.list_for_coach(
            db, current_user.user_id, status=status_filter, need_id=need_id
        )
    elif current_user.is_parent:
        if wrestler_id is not None:
            await load_owned_wrestler(db, wrestler_id, current_user)
            matches = await match_repository.list_for_parent_wrestler(
                db, wrestler_id, status=status_filter
            )
        else:
            matches = await match_repository.list_for_parent(
                db, current_user.user_id, status=status_filter
            )
    elif current_user.is_admin:
        if need_id is not None:
            matches = await match_repository.list_for_need(db, need_id, status=status_filter)
        elif wrestler_id is not None:
            matches = await match_repository.list_for_parent_wrestler(
                db, wrestler_id, status=status_filter
            )
        else:
            matches = await match_repository.list_all(db, status=status_filter)
    else:
        raise Forbidden("Only coaches and parents have matches")

    return MatchListResponse(matches=matches, total=len(matches))


@router.get(
    "/{match_id}",
    response_model=MatchDetailResponse,
    summary="Карточка матча",
)
async def get_match(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchDetailResponse:
    match = await match_repository.get_by_id(db, match_id)
    if not await is_participant(db, match, current_user):
        raise Forbidden("You are not a participant of this match")
    return MatchDetailResponse(match=await match_repository.get_detail(db, match_id))


@router.post(
    "/{match_id}/confirm",
    response_model=MatchEnvelope,
    summary="Подтвердить матч от своей стороны",
)
async def confirm_match(
    match_id: int,
    payload: Optional[MatchSideRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchEnvelope:
    side = confirmation.parse_side(payload.side if payload else None, current_user)
    match = await confirmation.confirm(db, match_id, side, current_user)
    return MatchEnvelope(match=to_match_read(match))


@router.post(
    "/{match_id}/decline",
    response_model=MatchEnvelope,
    summary="Отклонить предложенный матч",
)
async def decline_match(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchEnvelope:
    match = await confirmation.decline(db, match_id, current_user)
    return MatchEnvelope(match=to_match_read(match))


@router.post(
    "/{match_id}/cancel",
    response_model=MatchEnvelope,
    summary="Отменить матч",
)
async def cancel_match(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchEnvelope:
    match = await confirmation.cancel(db, match_id, current_user)
    return MatchEnvelope(match=to_match_read(match))
