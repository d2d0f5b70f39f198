"""Машина состояний матча: pending → confirmed, либо declined/cancelled.

Статус никогда не пишется отдельно от флагов: confirmed вычисляется из
coach_ok и parent_ok внутри того же UPDATE, который ставит флаг. Флаги
только поднимаются, поэтому порядок подтверждений сторон не важен и
повторное подтверждение ничего не меняет.
"""
import logging

from sqlalchemy import and_, case, func, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import Conflict, Forbidden, Internal, InvalidArgument, NotFound
from core.security import Principal
from models.match import (
    Match,
    SIDES,
    SIDE_COACH,
    SIDE_PARENT,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_DECLINED,
    STATUS_PENDING,
    TERMINAL_FAILURE_STATUSES,
)
from services.ownership import assert_side_owner, is_participant, side_of

logger = logging.getLogger(__name__)

# Из каких статусов разрешён переход в терминальный
ALLOWED_TERMINAL_FROM = {
    STATUS_DECLINED: (STATUS_PENDING,),
    STATUS_CANCELLED: (STATUS_PENDING, STATUS_CONFIRMED),
}


def derive_status(coach_ok: bool, parent_ok: bool, current: str) -> str:
    if current in TERMINAL_FAILURE_STATUSES:
        return current
    return STATUS_CONFIRMED if coach_ok and parent_ok else STATUS_PENDING


def parse_side(raw: str | None, principal: Principal) -> str:
    """Сторона подтверждения: строго 'coach' или 'parent'.

    Если сторона не передана, она берётся из роли пользователя; админ
    передаёт её явно.
    """
    own_side = side_of(principal)

    if raw is None or raw == "":
        if own_side is None:
            raise InvalidArgument("side is required: expected 'coach' or 'parent'")
        return own_side

    if raw not in SIDES:
        raise InvalidArgument(f"Invalid side {raw!r}: expected 'coach' or 'parent'")

    if principal.is_admin:
        return raw
    if own_side != raw:
        raise Forbidden(f"Role {principal.role} cannot act for the {raw} side")
    return raw


async def _load(db: AsyncSession, match_id: int) -> Match:
    match = await db.get(Match, match_id, populate_existing=True)
    if match is None:
        raise NotFound(f"Match {match_id} not found")
    return match


async def confirm(db: AsyncSession, match_id: int, side: str, principal: Principal) -> Match:
    if side not in SIDES:
        raise InvalidArgument(f"Invalid side {side!r}: expected 'coach' or 'parent'")

    match = await _load(db, match_id)
    if match.status in TERMINAL_FAILURE_STATUSES:
        raise Conflict(f"Match {match_id} is {match.status}; create a new match to try again")

    await assert_side_owner(
        db,
        side,
        principal,
        coach_user_id=match.coach_user_id,
        interest_id=match.wrestler_interest_id,
    )

    already_set = match.coach_ok if side == SIDE_COACH else match.parent_ok
    if already_set:
        # Повторное подтверждение ничего не пишет
        return match

    new_coach_ok = true() if side == SIDE_COACH else Match.coach_ok
    new_parent_ok = true() if side == SIDE_PARENT else Match.parent_ok
    both = and_(new_coach_ok, new_parent_ok)

    stmt = (
        update(Match)
        .where(Match.id == match_id, Match.status.not_in(TERMINAL_FAILURE_STATUSES))
        .values(
            {
                Match.coach_ok: new_coach_ok,
                Match.parent_ok: new_parent_ok,
                Match.status: case((both, STATUS_CONFIRMED), else_=Match.status),
                Match.confirmed_at: case(
                    (and_(both, Match.confirmed_at.is_(None)), func.now()),
                    else_=Match.confirmed_at,
                ),
                Match.updated_at: func.now(),
            }
        )
        .execution_options(synchronize_session=False)
    )

    try:
        result = await db.execute(stmt)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Confirming match %s for %s failed", match_id, side)
        raise Internal("Could not record the confirmation") from exc

    if result.rowcount == 0:
        # Между чтением и записью матч успели отклонить или отменить
        raise Conflict(f"Match {match_id} was closed before the confirmation was recorded")

    match = await _load(db, match_id)
    expected = derive_status(match.coach_ok, match.parent_ok, match.status)
    if match.status != expected:
        logger.error(
            "Match %s has status=%s but flags coach_ok=%s parent_ok=%s imply %s",
            match.id, match.status, match.coach_ok, match.parent_ok, expected,
        )
        raise Internal(f"Match {match_id} is in an inconsistent state")

    logger.info(
        "Match %s confirmed by %s side (user %s): status=%s",
        match.id, side, principal.user_id, match.status,
    )
    return match


async def _terminate(db: AsyncSession, match_id: int, target: str, principal: Principal) -> Match:
    match = await _load(db, match_id)

    if not await is_participant(db, match, principal):
        raise Forbidden("Only the coach or the wrestler's parent can change this match")

    if match.status == target:
        return match

    allowed_from = ALLOWED_TERMINAL_FROM[target]
    if match.status not in allowed_from:
        raise Conflict(f"Match {match_id} is {match.status} and cannot be {target}")

    previous = match.status
    stmt = (
        update(Match)
        .where(Match.id == match_id, Match.status == previous)
        .values({Match.status: target, Match.updated_at: func.now()})
        .execution_options(synchronize_session=False)
    )

    try:
        result = await db.execute(stmt)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Moving match %s to %s failed", match_id, target)
        raise Internal(f"Could not mark the match as {target}") from exc

    if result.rowcount == 0:
        raise Conflict(f"Match {match_id} changed while it was being {target}")

    logger.info("Match %s %s -> %s by user %s", match_id, previous, target, principal.user_id)
    return await _load(db, match_id)


async def decline(db: AsyncSession, match_id: int, principal: Principal) -> Match:
    return await _terminate(db, match_id, STATUS_DECLINED, principal)


async def cancel(db: AsyncSession, match_id: int, principal: Principal) -> Match:
    return await _terminate(db, match_id, STATUS_CANCELLED, principal)
