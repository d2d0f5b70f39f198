"""Доступ к переписке по матчу.

Читать и писать можно только пока матч в статусе confirmed. Проверяется
текущий статус: после отмены старые сообщения остаются в базе, но ни
чтение, ни запись уже не проходят. Список переписок борца или тренера
строится по тем же правилам и показывает только подтверждённые матчи.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, nulls_last, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import Forbidden, Internal, InvalidArgument, NotFound
from core.security import Principal
from models.interest import Interest
from models.match import Match, STATUS_CONFIRMED
from models.message import Message
from models.need import Need
from models.wrestler import Wrestler
from schemas.message import MessageThread
from services.ownership import is_participant, participants

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    match_status: str


async def can_access(db: AsyncSession, match_id: int) -> GateDecision:
    status = await db.scalar(select(Match.status).where(Match.id == match_id))
    if status is None:
        raise NotFound(f"Match {match_id} not found")
    return GateDecision(allowed=status == STATUS_CONFIRMED, match_status=status)


async def require_access(db: AsyncSession, match_id: int, principal: Principal) -> Match:
    match = await db.get(Match, match_id, populate_existing=True)
    if match is None:
        raise NotFound(f"Match {match_id} not found")
    if not await is_participant(db, match, principal):
        raise Forbidden("You are not a participant of this match")

    decision = await can_access(db, match_id)
    if not decision.allowed:
        raise Forbidden(
            f"Messaging opens once both sides confirm (match is {decision.match_status})"
        )
    return match


async def list_messages(
    db: AsyncSession,
    match_id: int,
    principal: Principal,
    *,
    mark_read: bool = False,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> tuple[Match, List[Message]]:
    match = await require_access(db, match_id, principal)
    limit = max(1, min(MAX_PAGE_SIZE, limit))
    offset = max(0, offset)

    if mark_read and settings.MESSAGES_TRACK_READS:
        await db.execute(
            update(Message)
            .where(
                Message.match_id == match_id,
                Message.read_at.is_(None),
                Message.sender_id != principal.user_id,
            )
            .values(read_at=func.now())
            .execution_options(synchronize_session=False)
        )
        await db.commit()

    stmt = (
        select(Message)
        .where(Message.match_id == match_id)
        .order_by(Message.sent_at.asc(), Message.id.asc())
        .limit(limit)
        .offset(offset)
        .execution_options(populate_existing=True)
    )
    messages = list((await db.execute(stmt)).scalars().all())
    return match, messages


async def post_message(
    db: AsyncSession, match_id: int, principal: Principal, text: str
) -> Message:
    match = await require_access(db, match_id, principal)

    body = (text or "").strip()
    if not body:
        raise InvalidArgument("Message text required")

    coach_user_id, parent_user_id = await participants(db, match)

    if principal.user_id == coach_user_id:
        receiver_id = parent_user_id
    elif principal.user_id == parent_user_id:
        receiver_id = coach_user_id
    else:
        receiver_id = None

    message = Message(
        match_id=match.id,
        sender_id=principal.user_id,
        receiver_id=receiver_id,
        text=body,
    )
    db.add(message)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Saving message for match %s failed", match_id)
        raise Internal("Could not send the message") from exc
    await db.refresh(message)
    return message


def _latest_message(column):
    return (
        select(column)
        .where(Message.match_id == Match.id)
        .order_by(Message.sent_at.desc(), Message.id.desc())
        .limit(1)
        .correlate(Match)
        .scalar_subquery()
    )


async def list_threads(
    db: AsyncSession,
    viewer_user_id: int,
    *,
    wrestler_id: Optional[int] = None,
    coach_user_id: Optional[int] = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> List[MessageThread]:
    """Переписки по подтверждённым матчам, свежие сверху.

    Ровно один из wrestler_id / coach_user_id задаёт, чьи это матчи.
    Непрочитанными считаются входящие для viewer_user_id сообщения.
    """
    if (wrestler_id is None) == (coach_user_id is None):
        raise InvalidArgument("Pass exactly one of wrestler_id or coach_user_id")
    limit = max(1, min(MAX_PAGE_SIZE, limit))
    offset = max(0, offset)

    last_text = _latest_message(Message.text).label("last_text")
    last_sent_at = _latest_message(Message.sent_at).label("last_sent_at")
    columns = [Match, Need, Interest, Wrestler, last_text, last_sent_at]
    if settings.MESSAGES_TRACK_READS:
        unread = (
            select(func.count(Message.id))
            .where(
                Message.match_id == Match.id,
                Message.read_at.is_(None),
                Message.sender_id != viewer_user_id,
            )
            .correlate(Match)
            .scalar_subquery()
        )
        columns.append(unread.label("unread"))

    stmt = (
        select(*columns)
        .select_from(Match)
        .join(Need, Need.id == Match.coach_need_id)
        .join(Interest, Interest.id == Match.wrestler_interest_id)
        .join(Wrestler, Wrestler.id == Interest.wrestler_id)
        .where(Match.status == STATUS_CONFIRMED)
        .order_by(nulls_last(last_sent_at.desc()), Match.id.desc())
        .limit(limit)
        .offset(offset)
    )
    if wrestler_id is not None:
        stmt = stmt.where(Interest.wrestler_id == wrestler_id)
    else:
        stmt = stmt.where(Match.coach_user_id == coach_user_id)

    threads = []
    for row in (await db.execute(stmt)).all():
        match, need, interest, wrestler = row[0], row[1], row[2], row[3]
        threads.append(
            MessageThread(
                match_id=match.id,
                match_status=match.status,
                wrestler_id=wrestler.id,
                wrestler_name=wrestler.display_name,
                event_name=interest.event_name or need.event_name,
                event_date=interest.event_date or need.event_date,
                weight_class=interest.weight_class,
                age_group=interest.age_group,
                last_text=row.last_text,
                last_sent_at=row.last_sent_at,
                unread=row.unread if settings.MESSAGES_TRACK_READS else None,
            )
        )
    return threads
