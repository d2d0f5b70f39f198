from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import Forbidden
from core.security import Principal, get_current_principal
from models.team import Team
from schemas.team import TeamProfileRead, TeamProfileResponse, TeamProfileUpsert
from services import team_profile

router = APIRouter(prefix="/coach/team-profile", tags=["team"])


def _require_coach(current_user: Principal) -> None:
    if not (current_user.is_coach or current_user.is_admin):
        raise Forbidden("Only coaches have a team profile")


def _to_read(team: Team) -> TeamProfileRead:
    return TeamProfileRead(
        id=team.id,
        team_name=team.name,
        coach_name=team.coach_name,
        contact_email=team.contact_email,
        logo_path=team.logo_path,
    )


@router.get(
    "",
    response_model=TeamProfileResponse,
    summary="Профиль команды текущего тренера",
)
async def get_team_profile(
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> TeamProfileResponse:
    _require_coach(current_user)
    team = await team_profile.get_profile(db, current_user.user_id)
    return TeamProfileResponse(team=_to_read(team) if team else None)


@router.post(
    "",
    response_model=TeamProfileResponse,
    summary="Создать или обновить профиль команды",
)
async def save_team_profile(
    payload: TeamProfileUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> TeamProfileResponse:
    _require_coach(current_user)
    team = await team_profile.upsert_profile(db, current_user.user_id, payload)
    return TeamProfileResponse(team=_to_read(team))
