"""Создание, поиск и выборки матчей.

Уникальность активного матча на пару (need, interest) держит partial unique
index uq_matches_active_pair; здесь только ловим его срабатывание и
превращаем гонку двух создателей в подтверждение уже созданной строки.
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, func, nulls_last, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import Conflict, Internal, InvalidArgument, NotFound
from core.security import Principal
from models.interest import Interest
from models.match import (
    Match,
    ACTIVE_STATUSES,
    MATCH_STATUSES,
    SIDES,
    SIDE_COACH,
    SIDE_PARENT,
    STATUS_CONFIRMED,
    STATUS_PENDING,
)
from models.message import Message
from models.need import Need
from models.team import Team
from models.wrestler import Wrestler
from schemas.match import MatchView
from services import confirmation
from services.ownership import assert_side_owner
from utils.match_helpers import to_match_view

logger = logging.getLogger(__name__)

STATUS_ALL = "all"
DEFAULT_LIST_STATUS = STATUS_PENDING
MAX_CREATE_ATTEMPTS = 2


async def get_by_id(db: AsyncSession, match_id: int) -> Match:
    match = await db.get(Match, match_id)
    if match is None:
        raise NotFound(f"Match {match_id} not found")
    return match


async def find_active(db: AsyncSession, need_id: int, interest_id: int) -> Optional[Match]:
    stmt = select(Match).where(
        Match.coach_need_id == need_id,
        Match.wrestler_interest_id == interest_id,
        Match.status.in_(ACTIVE_STATUSES),
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def _insert(
    db: AsyncSession, need_id: int, interest_id: int, side: str, principal: Principal
) -> Match:
    need = await db.get(Need, need_id)
    if need is None:
        raise NotFound(f"Need {need_id} not found")
    interest = await db.get(Interest, interest_id)
    if interest is None:
        raise NotFound(f"Interest {interest_id} not found")

    await assert_side_owner(
        db, side, principal, coach_user_id=need.coach_user_id, interest_id=interest.id
    )

    match = Match(
        coach_need_id=need.id,
        wrestler_interest_id=interest.id,
        coach_user_id=need.coach_user_id,
        status=STATUS_PENDING,
        coach_ok=side == SIDE_COACH,
        parent_ok=side == SIDE_PARENT,
    )
    db.add(match)
    await db.commit()
    await db.refresh(match)
    logger.info(
        "Match %s created for need=%s interest=%s by %s side (user %s)",
        match.id, need.id, interest.id, side, principal.user_id,
    )
    return match


async def create_or_touch(
    db: AsyncSession, need_id: int, interest_id: int, side: str, principal: Principal
) -> tuple[Match, bool]:
    """Создать матч для пары или подтвердить уже существующий.

    Возвращает (match, created). Повторный вызов для той же пары не ошибка:
    он сводится к confirm() от имени той же стороны.
    """
    if side not in SIDES:
        raise InvalidArgument(f"Invalid side {side!r}: expected 'coach' or 'parent'")

    for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
        existing = await find_active(db, need_id, interest_id)
        if existing is not None:
            match = await confirmation.confirm(db, existing.id, side, principal)
            return match, False

        try:
            return await _insert(db, need_id, interest_id, side, principal), True
        except IntegrityError:
            # Другая сторона успела вставить строку; повторяем как обновление
            await db.rollback()
            logger.warning(
                "Concurrent match creation for need=%s interest=%s (attempt %s), retrying as update",
                need_id, interest_id, attempt,
            )
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Creating match for need=%s interest=%s failed", need_id, interest_id)
            raise Internal("Could not create the match") from exc

    raise Conflict(f"Could not resolve a concurrent match for need {need_id} and interest {interest_id}")


def _status_clause(status: str):
    if status == STATUS_ALL:
        return None
    if status not in MATCH_STATUSES:
        raise InvalidArgument(
            f"Invalid status {status!r}: expected one of {', '.join(MATCH_STATUSES + (STATUS_ALL,))}"
        )
    return Match.status == status


def _view_query():
    return (
        select(Match, Need, Interest, Wrestler, Team)
        .select_from(Match)
        .join(Interest, Interest.id == Match.wrestler_interest_id)
        .join(Wrestler, Wrestler.id == Interest.wrestler_id)
        .join(Need, Need.id == Match.coach_need_id)
        .outerjoin(Team, Team.coach_user_id == Need.coach_user_id)
    )


async def _list(db: AsyncSession, *filters, status: str) -> List[MatchView]:
    clauses = [f for f in filters if f is not None]
    status_clause = _status_clause(status)
    if status_clause is not None:
        clauses.append(status_clause)

    stmt = (
        _view_query()
        .where(*clauses)
        .order_by(
            nulls_last(func.coalesce(Need.event_date, Interest.event_date).asc()),
            Need.event_name.asc(),
            Wrestler.last_name.asc(),
            Wrestler.first_name.asc(),
            Match.id.asc(),
        )
    )
    rows = (await db.execute(stmt)).all()
    return [to_match_view(*row) for row in rows]


async def list_for_coach(
    db: AsyncSession,
    coach_user_id: int,
    status: str = DEFAULT_LIST_STATUS,
    need_id: Optional[int] = None,
) -> List[MatchView]:
    return await _list(
        db,
        Match.coach_user_id == coach_user_id,
        Match.coach_need_id == need_id if need_id else None,
        status=status,
    )


async def list_for_parent_wrestler(
    db: AsyncSession, wrestler_id: int, status: str = DEFAULT_LIST_STATUS
) -> List[MatchView]:
    return await _list(db, Wrestler.id == wrestler_id, status=status)


async def list_for_parent(
    db: AsyncSession, parent_user_id: int, status: str = DEFAULT_LIST_STATUS
) -> List[MatchView]:
    return await _list(db, Wrestler.parent_user_id == parent_user_id, status=status)


async def list_for_need(db: AsyncSession, need_id: int, status: str = STATUS_ALL) -> List[MatchView]:
    return await _list(db, Match.coach_need_id == need_id, status=status)


async def list_all(db: AsyncSession, status: str = DEFAULT_LIST_STATUS) -> List[MatchView]:
    return await _list(db, status=status)


async def get_detail(db: AsyncSession, match_id: int) -> MatchView:
    row = (await db.execute(_view_query().where(Match.id == match_id))).first()
    if row is None:
        raise NotFound(f"Match {match_id} not found")
    return to_match_view(*row)


async def _release_matches(db: AsyncSession, column, row_id: int, label: str) -> None:
    confirmed = await db.scalar(
        select(func.count(Match.id)).where(column == row_id, Match.status == STATUS_CONFIRMED)
    )
    if confirmed:
        raise Conflict(f"Cannot delete a {label} with confirmed matches. Cancel those first.")

    match_ids = select(Match.id).where(column == row_id)
    await db.execute(delete(Message).where(Message.match_id.in_(match_ids)))
    await db.execute(delete(Match).where(column == row_id))


async def delete_need(db: AsyncSession, need: Need) -> None:
    """Удалить запрос вместе с неподтверждёнными матчами; подтверждённый матч блокирует удаление."""
    try:
        await _release_matches(db, Match.coach_need_id, need.id, "need")
        await db.execute(delete(Need).where(Need.id == need.id))
        await db.commit()
    except Conflict:
        await db.rollback()
        raise
    logger.info("Need %s deleted", need.id)


async def delete_interest(db: AsyncSession, interest: Interest) -> None:
    """Удалить заявку вместе с неподтверждёнными матчами; подтверждённый матч блокирует удаление."""
    try:
        await _release_matches(db, Match.wrestler_interest_id, interest.id, "interest")
        await db.execute(delete(Interest).where(Interest.id == interest.id))
        await db.commit()
    except Conflict:
        await db.rollback()
        raise
    logger.info("Interest %s deleted", interest.id)
