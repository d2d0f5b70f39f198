from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import InvalidArgument
from core.security import Principal, get_current_principal
from schemas.candidate import InterestCandidatesResponse
from schemas.interest import InterestRead, InterestUpdate
from services import match_repository
from services.compatibility import find_candidates_for_interest
from services.ownership import load_owned_interest
from utils.age_group import normalize_age_group

router = APIRouter(prefix="/interests", tags=["interests"])


@router.get(
    "/{interest_id}",
    response_model=InterestRead,
    summary="Получить заявку",
)
async def get_interest(
    interest_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> InterestRead:
    interest = await load_owned_interest(db, interest_id, current_user)
    return InterestRead.model_validate(interest)


@router.patch(
    "/{interest_id}",
    response_model=InterestRead,
    summary="Частично обновить заявку",
)
async def update_interest(
    interest_id: int,
    payload: InterestUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> InterestRead:
    interest = await load_owned_interest(db, interest_id, current_user)

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidArgument("Nothing to update")

    if "event_name" in changes:
        interest.event_name = (changes["event_name"] or "").strip() or None
    if "event_date" in changes:
        interest.event_date = changes["event_date"]
    if "weight_class" in changes:
        if changes["weight_class"] is None:
            raise InvalidArgument("weight_class cannot be null")
        interest.weight_class = changes["weight_class"].strip()
    if "age_group" in changes:
        if changes["age_group"] is None:
            raise InvalidArgument("age_group cannot be null")
        interest.age_group = changes["age_group"].strip()
        interest.age_group_normalized = normalize_age_group(changes["age_group"])
    if "notes" in changes:
        interest.notes = changes["notes"]
    for flag in ("parent_ok", "coach_ok"):
        if changes.get(flag) is not None:
            setattr(interest, flag, changes[flag])

    await db.commit()
    await db.refresh(interest)
    return InterestRead.model_validate(interest)


@router.delete(
    "/{interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить заявку (нельзя при подтверждённом матче)",
)
async def delete_interest(
    interest_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
):
    interest = await load_owned_interest(db, interest_id, current_user)
    await match_repository.delete_interest(db, interest)
    return


@router.get(
    "/{interest_id}/candidates",
    response_model=InterestCandidatesResponse,
    summary="Открытые запросы команд, подходящие под заявку",
)
async def interest_candidates(
    interest_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> InterestCandidatesResponse:
    interest = await load_owned_interest(db, interest_id, current_user)
    search = await find_candidates_for_interest(db, interest)
    return InterestCandidatesResponse(
        interest=InterestRead.model_validate(interest),
        candidates=search.items,
        error=search.error,
    )
