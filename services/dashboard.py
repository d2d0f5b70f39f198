"""Счётчики для бейджей на дашбордах: матчи по статусам и сообщения.

Только чтение. При ошибке базы отдаём нули с заполненным error.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from models.interest import Interest
from models.match import Match, STATUS_CONFIRMED, STATUS_PENDING
from models.message import Message
from models.wrestler import Wrestler
from schemas.dashboard import DashboardSummary, MatchCounts, MessageCounts

logger = logging.getLogger(__name__)

SUMMARY_CACHE_CONTROL = "public, max-age=0, s-maxage=15, stale-while-revalidate=60"
DEGRADED_MESSAGE = "Summary is temporarily unavailable"


def _match_counts_query():
    return select(
        func.count(Match.id),
        func.count(Match.id).filter(Match.status == STATUS_PENDING),
        func.count(Match.id).filter(Match.status == STATUS_CONFIRMED),
    ).select_from(Match)


def _message_counts_query(viewer_user_id):
    columns = [func.count(Message.id)]
    if settings.MESSAGES_TRACK_READS:
        # Свои сообщения непрочитанными не считаются
        columns.append(
            func.count(Message.id).filter(
                Message.read_at.is_(None), Message.sender_id != viewer_user_id
            )
        )
    return select(*columns)


async def _summarize(db: AsyncSession, match_stmt, message_stmt) -> DashboardSummary:
    try:
        total, pending, confirmed = (await db.execute(match_stmt)).one()
        message_row = (await db.execute(message_stmt)).one()
    except SQLAlchemyError:
        logger.exception("Building dashboard summary failed")
        await db.rollback()
        return DashboardSummary(
            ok=False,
            matches=MatchCounts(),
            messages=MessageCounts(),
            error=DEGRADED_MESSAGE,
        )

    unread = message_row[1] if settings.MESSAGES_TRACK_READS else None
    return DashboardSummary(
        matches=MatchCounts(total=total or 0, pending=pending or 0, confirmed=confirmed or 0),
        messages=MessageCounts(total=message_row[0] or 0, unread=unread),
    )


async def wrestler_summary(db: AsyncSession, wrestler_id: int) -> DashboardSummary:
    match_stmt = (
        _match_counts_query()
        .join(Interest, Interest.id == Match.wrestler_interest_id)
        .where(Interest.wrestler_id == wrestler_id)
    )
    message_stmt = (
        _message_counts_query(Wrestler.parent_user_id)
        .select_from(Message)
        .join(Match, Match.id == Message.match_id)
        .join(Interest, Interest.id == Match.wrestler_interest_id)
        .join(Wrestler, Wrestler.id == Interest.wrestler_id)
        .where(Wrestler.id == wrestler_id)
    )
    return await _summarize(db, match_stmt, message_stmt)


async def coach_summary(db: AsyncSession, coach_user_id: int) -> DashboardSummary:
    match_stmt = _match_counts_query().where(Match.coach_user_id == coach_user_id)
    message_stmt = (
        _message_counts_query(coach_user_id)
        .select_from(Message)
        .join(Match, Match.id == Message.match_id)
        .where(Match.coach_user_id == coach_user_id)
    )
    return await _summarize(db, match_stmt, message_stmt)
