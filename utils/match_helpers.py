"""Утилиты для преобразования моделей матчей в схемы Pydantic."""
from typing import Optional

from models.interest import Interest
from models.match import Match
from models.need import Need
from models.team import Team
from models.wrestler import Wrestler
from schemas.match import MatchRead, MatchView


def to_match_read(match: Match) -> MatchRead:
    return MatchRead.model_validate(match)


def to_match_view(
    match: Match,
    need: Need,
    interest: Interest,
    wrestler: Wrestler,
    team: Optional[Team] = None,
) -> MatchView:
    """Собрать MatchView из строки join-а matches/needs/interests/wrestlers/teams."""
    return MatchView(
        id=match.id,
        status=match.status,
        coach_ok=match.coach_ok,
        parent_ok=match.parent_ok,
        confirmed_at=match.confirmed_at,
        created_at=match.created_at,
        need_id=need.id,
        interest_id=interest.id,
        wrestler_id=wrestler.id,
        coach_user_id=match.coach_user_id,
        event_name=need.event_name,
        event_date=need.event_date,
        weight_class=need.weight_class,
        age_group=need.age_group_normalized,
        notes=interest.notes,
        interest_event_name=interest.event_name,
        interest_event_date=interest.event_date,
        wrestler_first_name=wrestler.first_name,
        wrestler_last_name=wrestler.last_name,
        wrestler_city=wrestler.city,
        wrestler_state=wrestler.state,
        team_id=team.id if team else None,
        team_name=team.name if team else None,
        team_coach_name=team.coach_name if team else None,
        team_logo_path=team.logo_path if team else None,
    )
