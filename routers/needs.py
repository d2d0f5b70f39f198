from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import Forbidden, InvalidArgument
from core.security import Principal, get_current_principal
from models.need import Need
from schemas.candidate import NeedCandidatesResponse
from schemas.match import MatchListResponse
from schemas.need import NeedCreate, NeedRead, NeedUpdate
from services import match_repository
from services.compatibility import find_candidates_for_need
from services.ownership import load_owned_need
from utils.age_group import normalize_age_group

router = APIRouter(prefix="/needs", tags=["needs"])


@router.post(
    "",
    response_model=NeedRead,
    status_code=status.HTTP_201_CREATED,
    summary="Создать запрос команды на борца",
)
async def create_need(
    payload: NeedCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> NeedRead:
    if not (current_user.is_coach or current_user.is_admin):
        raise Forbidden("Only coaches can post needs")

    need = Need(
        coach_user_id=current_user.user_id,
        event_name=payload.event_name.strip(),
        event_date=payload.event_date,
        weight_class=payload.weight_class.strip(),
        age_group=payload.age_group.strip(),
        age_group_normalized=normalize_age_group(payload.age_group),
        city=payload.city,
        state=payload.state,
        notes=payload.notes,
        is_open=True,
    )
    db.add(need)
    await db.commit()
    await db.refresh(need)
    return NeedRead.model_validate(need)


@router.get(
    "",
    response_model=List[NeedRead],
    summary="Мои запросы",
)
async def list_my_needs(
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> List[NeedRead]:
    stmt = (
        select(Need)
        .where(Need.coach_user_id == current_user.user_id)
        .order_by(Need.created_at.desc(), Need.id.desc())
    )
    result = await db.execute(stmt)
    return [NeedRead.model_validate(n) for n in result.scalars().all()]


@router.get(
    "/{need_id}",
    response_model=NeedRead,
    summary="Получить запрос",
)
async def get_need(
    need_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> NeedRead:
    need = await load_owned_need(db, need_id, current_user)
    return NeedRead.model_validate(need)


@router.patch(
    "/{need_id}",
    response_model=NeedRead,
    summary="Частично обновить или закрыть запрос",
)
async def update_need(
    need_id: int,
    payload: NeedUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> NeedRead:
    need = await load_owned_need(db, need_id, current_user)

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidArgument("No fields to update")

    for field, value in changes.items():
        if field in ("event_name", "weight_class") and value is not None:
            value = value.strip()
        if field in ("event_name", "weight_class", "age_group", "is_open") and value is None:
            raise InvalidArgument(f"{field} cannot be null")
        setattr(need, field, value)

    if "age_group" in changes:
        need.age_group = changes["age_group"].strip()
        need.age_group_normalized = normalize_age_group(changes["age_group"])

    await db.commit()
    await db.refresh(need)
    return NeedRead.model_validate(need)


@router.delete(
    "/{need_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить запрос (нельзя при подтверждённом матче)",
)
async def delete_need(
    need_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
):
    need = await load_owned_need(db, need_id, current_user)
    await match_repository.delete_need(db, need)
    return


@router.get(
    "/{need_id}/candidates",
    response_model=NeedCandidatesResponse,
    summary="Подходящие заявки борцов для запроса",
)
async def need_candidates(
    need_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> NeedCandidatesResponse:
    need = await load_owned_need(db, need_id, current_user)
    search = await find_candidates_for_need(db, need)
    return NeedCandidatesResponse(
        need=NeedRead.model_validate(need),
        candidates=search.items,
        error=search.error,
    )


@router.get(
    "/{need_id}/matches",
    response_model=MatchListResponse,
    summary="Матчи по запросу",
)
async def need_matches(
    need_id: int,
    status_filter: str = Query("all", alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> MatchListResponse:
    need = await load_owned_need(db, need_id, current_user)
    matches = await match_repository.list_for_need(db, need.id, status=status_filter)
    return MatchListResponse(matches=matches, total=len(matches))
