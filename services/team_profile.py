"""Профиль команды тренера: одна строка teams на coach_user_id.

Имя команды из профиля попадает в кандидатов и в карточки матчей.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import Conflict, Internal
from models.team import Team
from schemas.team import TeamProfileUpsert

logger = logging.getLogger(__name__)

MAX_SAVE_ATTEMPTS = 2


async def get_profile(db: AsyncSession, coach_user_id: int) -> Optional[Team]:
    return await db.scalar(
        select(Team)
        .where(Team.coach_user_id == coach_user_id)
        .execution_options(populate_existing=True)
    )


def _apply(team: Team, payload: TeamProfileUpsert) -> None:
    team.name = payload.team_name
    team.coach_name = payload.coach_name
    team.contact_email = payload.contact_email
    team.logo_path = payload.logo_path or None


async def upsert_profile(db: AsyncSession, coach_user_id: int, payload: TeamProfileUpsert) -> Team:
    for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
        team = await get_profile(db, coach_user_id)
        if team is None:
            team = Team(coach_user_id=coach_user_id)
            db.add(team)
        _apply(team, payload)

        try:
            await db.commit()
        except IntegrityError:
            # Профиль успели создать параллельно; повторяем как обновление
            await db.rollback()
            logger.warning(
                "Concurrent team profile save for coach %s (attempt %s), retrying as update",
                coach_user_id, attempt,
            )
            continue
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Saving team profile for coach %s failed", coach_user_id)
            raise Internal("Could not save the team profile") from exc

        await db.refresh(team)
        logger.info("Team profile %s saved for coach %s", team.id, coach_user_id)
        return team

    raise Conflict(f"Could not save the team profile for coach {coach_user_id}")
