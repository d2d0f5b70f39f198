"""Поиск совместимых пар «запрос команды ↔ заявка борца».

Модуль только читает: матчи здесь не создаются. Обе стороны используют
один и тот же предикат из compatibility_predicate(), поэтому если заявка
видит запрос, то и запрос видит заявку.
"""
import logging
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.interest import Interest
from models.match import Match, ACTIVE_STATUSES
from models.need import Need
from models.team import Team
from models.wrestler import Wrestler
from schemas.candidate import InterestCandidate, NeedCandidate

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEGRADED_MESSAGE = "Candidate search is temporarily unavailable"


@dataclass
class CandidateSearch(Generic[T]):
    items: List[T] = field(default_factory=list)
    error: Optional[str] = None


def compatibility_predicate():
    """Условие совместимости Need и Interest; одинаково в обе стороны."""
    return and_(
        Need.is_open.is_(True),
        Need.weight_class == Interest.weight_class,
        Need.age_group_normalized == Interest.age_group_normalized,
        or_(Interest.event_date.is_(None), Need.event_date == Interest.event_date),
        or_(
            Interest.event_name.is_(None),
            func.lower(Need.event_name).contains(func.lower(Interest.event_name)),
        ),
    )


def _active_match_join():
    # Отклонённые и отменённые матчи не прячут кандидата: пара снова доступна
    return and_(
        Match.coach_need_id == Need.id,
        Match.wrestler_interest_id == Interest.id,
        Match.status.in_(ACTIVE_STATUSES),
    )


def _annotation(match: Match | None) -> dict:
    if match is None:
        return {}
    return {
        "match_id": match.id,
        "match_status": match.status,
        "coach_ok": match.coach_ok,
        "parent_ok": match.parent_ok,
    }


async def find_candidates_for_interest(
    db: AsyncSession, interest: Interest
) -> CandidateSearch[NeedCandidate]:
    stmt = (
        select(Need, Team.name, Match)
        .select_from(Need)
        .join(Interest, compatibility_predicate())
        .outerjoin(Team, Team.coach_user_id == Need.coach_user_id)
        .outerjoin(Match, _active_match_join())
        .where(Interest.id == interest.id)
        .order_by(Need.event_date.asc().nulls_last(), Need.created_at.desc(), Need.id.desc())
    )
    try:
        rows = (await db.execute(stmt)).all()
    except SQLAlchemyError:
        logger.exception("Candidate search failed for interest %s", interest.id)
        await db.rollback()
        return CandidateSearch(error=DEGRADED_MESSAGE)

    items = [
        NeedCandidate(
            need_id=need.id,
            coach_user_id=need.coach_user_id,
            team_name=team_name,
            event_name=need.event_name,
            event_date=need.event_date,
            weight_class=need.weight_class,
            age_group=need.age_group_normalized,
            city=need.city,
            state=need.state,
            notes=need.notes,
            created_at=need.created_at,
            **_annotation(match),
        )
        for need, team_name, match in rows
    ]
    return CandidateSearch(items=items)


async def find_candidates_for_need(
    db: AsyncSession, need: Need
) -> CandidateSearch[InterestCandidate]:
    stmt = (
        select(Interest, Wrestler, Match)
        .select_from(Interest)
        .join(Need, compatibility_predicate())
        .join(Wrestler, Wrestler.id == Interest.wrestler_id)
        .outerjoin(Match, _active_match_join())
        .where(Need.id == need.id)
        .order_by(Interest.event_date.asc().nulls_last(), Interest.created_at.desc(), Interest.id.desc())
    )
    try:
        rows = (await db.execute(stmt)).all()
    except SQLAlchemyError:
        logger.exception("Candidate search failed for need %s", need.id)
        await db.rollback()
        return CandidateSearch(error=DEGRADED_MESSAGE)

    items = [
        InterestCandidate(
            interest_id=interest.id,
            wrestler_id=wrestler.id,
            wrestler_name=wrestler.display_name,
            event_name=interest.event_name,
            event_date=interest.event_date,
            weight_class=interest.weight_class,
            age_group=interest.age_group_normalized,
            notes=interest.notes,
            created_at=interest.created_at,
            **_annotation(match),
        )
        for interest, wrestler, match in rows
    ]
    return CandidateSearch(items=items)
