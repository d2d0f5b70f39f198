import os

# Настройки читаются при импорте core.config, поэтому окружение задаём до импортов приложения
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.database import build_engine, get_db
from core.security import (
    ROLE_ADMIN,
    ROLE_ATHLETE,
    ROLE_COACH,
    ROLE_PARENT,
    Principal,
    create_access_token,
)
from main import app
from models import Base, Interest, Need, Team, Wrestler
from utils.age_group import normalize_age_group

COACH = Principal(user_id=100, role=ROLE_COACH)
OTHER_COACH = Principal(user_id=101, role=ROLE_COACH)
PARENT = Principal(user_id=200, role=ROLE_PARENT)
OTHER_PARENT = Principal(user_id=201, role=ROLE_PARENT)
ATHLETE = Principal(user_id=300, role=ROLE_ATHLETE)
ADMIN = Principal(user_id=1, role=ROLE_ADMIN)


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(principal: Principal) -> dict:
    token = create_access_token(principal.user_id, principal.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_need(db):
    async def _make(coach_user_id=COACH.user_id, **overrides):
        fields = {
            "event_name": "Midwest Open Championship",
            "event_date": None,
            "weight_class": "64",
            "age_group": "12U",
            "is_open": True,
        }
        fields.update(overrides)
        fields["age_group_normalized"] = normalize_age_group(fields["age_group"])
        need = Need(coach_user_id=coach_user_id, **fields)
        db.add(need)
        await db.commit()
        await db.refresh(need)
        return need

    return _make


@pytest.fixture
def make_wrestler(db):
    async def _make(parent_user_id=PARENT.user_id, **overrides):
        fields = {"first_name": "Sam", "last_name": "Carter"}
        fields.update(overrides)
        wrestler = Wrestler(parent_user_id=parent_user_id, **fields)
        db.add(wrestler)
        await db.commit()
        await db.refresh(wrestler)
        return wrestler

    return _make


@pytest.fixture
def make_interest(db, make_wrestler):
    async def _make(wrestler=None, **overrides):
        if wrestler is None:
            wrestler = await make_wrestler()
        fields = {
            "event_name": None,
            "event_date": None,
            "weight_class": "64",
            "age_group": "12U",
        }
        fields.update(overrides)
        fields["age_group_normalized"] = normalize_age_group(fields["age_group"])
        interest = Interest(wrestler_id=wrestler.id, **fields)
        db.add(interest)
        await db.commit()
        await db.refresh(interest)
        return interest

    return _make


@pytest.fixture
def make_team(db):
    async def _make(coach_user_id=COACH.user_id, name="Grapplers WC"):
        team = Team(coach_user_id=coach_user_id, name=name, coach_name="Coach Lee")
        db.add(team)
        await db.commit()
        await db.refresh(team)
        return team

    return _make
