from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import Forbidden
from core.security import Principal, get_current_principal
from models.interest import Interest
from models.wrestler import Wrestler
from schemas.interest import InterestCreate, InterestRead
from schemas.match import MatchListResponse
from schemas.wrestler import WrestlerCreate, WrestlerRead
from services import match_repository
from services.ownership import load_owned_wrestler
from utils.age_group import normalize_age_group

router = APIRouter(prefix="/wrestlers", tags=["wrestlers"])


@router.post(
    "",
    response_model=WrestlerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Добавить борца",
)
async def create_wrestler(
    payload: WrestlerCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> WrestlerRead:
    if not (current_user.is_parent or current_user.is_admin):
        raise Forbidden("Only parents can add wrestlers")

    wrestler = Wrestler(parent_user_id=current_user.user_id, **payload.model_dump())
    db.add(wrestler)
    await db.commit()
    await db.refresh(wrestler)
    return WrestlerRead.model_validate(wrestler)


@router.get(
    "",
    response_model=List[WrestlerRead],
    summary="Мои борцы",
)
async def list_my_wrestlers(
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> List[WrestlerRead]:
    stmt = (
        select(Wrestler)
        .where(Wrestler.parent_user_id == current_user.user_id)
        .order_by(Wrestler.last_name, Wrestler.first_name, Wrestler.id)
    )
    result = await db.execute(stmt)
    return [WrestlerRead.model_validate(w) for w in result.scalars().all()]


@router.post(
    "/{wrestler_id}/interests",
    response_model=InterestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Создать заявку борца на турнир",
)
async def create_interest(
    wrestler_id: int,
    payload: InterestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> InterestRead:
    wrestler = await load_owned_wrestler(db, wrestler_id, current_user)

    interest = Interest(
        wrestler_id=wrestler.id,
        event_name=(payload.event_name or "").strip() or None,
        event_date=payload.event_date,
        weight_class=payload.weight_class.strip(),
        age_group=payload.age_group.strip(),
        age_group_normalized=normalize_age_group(payload.age_group),
        notes=payload.notes,
    )
    db.add(interest)
    await db.commit()
    await db.refresh(interest)
    return InterestRead.model_validate(interest)


@router.get(
    "/{wrestler_id}/interests",
    response_model=List[InterestRead],
    summary="Заявки борца",
)
async def list_interests(
    wrestler_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> List[InterestRead]:
    wrestler = await load_owned_wrestler(db, wrestler_id, current_user)
    stmt = (
        select(Interest)
        .where(Interest.wrestler_id == wrestler.id)
        .order_by(Interest.created_at.desc(), Interest.id.desc())
    )
    result = await db.execute(stmt)
    return [InterestRead.model_validate(i) for i in result.scalars().all()]


@router.get(
    "/{wrestler_id}/matches",
    response_model=MatchListResponse,
    summary="Матчи борца",
)
async def wrestler_matches(
    wrestler_id: int,
    status_filter: str = Query(match_repository.DEFAULT_LIST_STATUS, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchListResponse:
    wrestler = await load_owned_wrestler(db, wrestler_id, current_user)
    matches = await match_repository.list_for_parent_wrestler(db, wrestler.id, status=status_filter)
    return MatchListResponse(matches=matches, total=len(matches))
