"""Проверки, от чьего имени действует пользователь: тренер запроса или родитель борца."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import Forbidden, NotFound
from core.security import Principal
from models.interest import Interest
from models.match import Match, SIDE_COACH, SIDE_PARENT
from models.need import Need
from models.wrestler import Wrestler


async def parent_user_id_for_interest(db: AsyncSession, interest_id: int) -> int | None:
    stmt = (
        select(Wrestler.parent_user_id)
        .join(Interest, Interest.wrestler_id == Wrestler.id)
        .where(Interest.id == interest_id)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


def can_act_as_coach(principal: Principal, coach_user_id: int) -> bool:
    return principal.is_admin or (principal.is_coach and principal.user_id == coach_user_id)


def can_act_as_parent(principal: Principal, parent_user_id: int | None) -> bool:
    return principal.is_admin or (principal.is_parent and principal.user_id == parent_user_id)


async def assert_side_owner(
    db: AsyncSession,
    side: str,
    principal: Principal,
    *,
    coach_user_id: int,
    interest_id: int,
) -> None:
    if side == SIDE_COACH:
        if not can_act_as_coach(principal, coach_user_id):
            raise Forbidden("Only the coach who posted this need can act for the coach side")
        return

    parent_user_id = await parent_user_id_for_interest(db, interest_id)
    if not can_act_as_parent(principal, parent_user_id):
        raise Forbidden("Only the wrestler's parent can act for the parent side")


async def participants(db: AsyncSession, match: Match) -> tuple[int, int | None]:
    """(coach_user_id, parent_user_id) матча."""
    parent_user_id = await parent_user_id_for_interest(db, match.wrestler_interest_id)
    return match.coach_user_id, parent_user_id


async def is_participant(db: AsyncSession, match: Match, principal: Principal) -> bool:
    if principal.is_admin:
        return True
    coach_user_id, parent_user_id = await participants(db, match)
    if principal.is_coach:
        return principal.user_id == coach_user_id
    if principal.is_parent:
        return principal.user_id == parent_user_id
    return False


def side_of(principal: Principal) -> str | None:
    if principal.is_coach:
        return SIDE_COACH
    if principal.is_parent:
        return SIDE_PARENT
    return None


async def load_owned_need(db: AsyncSession, need_id: int, principal: Principal) -> Need:
    need = await db.get(Need, need_id)
    if need is None:
        raise NotFound(f"Need {need_id} not found")
    if not can_act_as_coach(principal, need.coach_user_id):
        raise Forbidden("This need belongs to another coach")
    return need


async def load_owned_wrestler(db: AsyncSession, wrestler_id: int, principal: Principal) -> Wrestler:
    wrestler = await db.get(Wrestler, wrestler_id)
    if wrestler is None:
        raise NotFound(f"Wrestler {wrestler_id} not found")
    if not can_act_as_parent(principal, wrestler.parent_user_id):
        raise Forbidden("This wrestler belongs to another parent")
    return wrestler


async def load_owned_interest(db: AsyncSession, interest_id: int, principal: Principal) -> Interest:
    interest = await db.get(Interest, interest_id)
    if interest is None:
        raise NotFound(f"Interest {interest_id} not found")
    parent_user_id = await parent_user_id_for_interest(db, interest_id)
    if not can_act_as_parent(principal, parent_user_id):
        raise Forbidden("This interest belongs to another parent")
    return interest
