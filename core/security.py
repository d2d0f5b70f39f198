# core/security.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from starlette import status

from core.config import settings

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth")

ROLE_COACH = "Coach"
ROLE_PARENT = "Parent"
ROLE_ATHLETE = "Athlete"
ROLE_ADMIN = "Admin"

ROLES = (ROLE_COACH, ROLE_PARENT, ROLE_ATHLETE, ROLE_ADMIN)


@dataclass(frozen=True)
class Principal:
    """Аутентифицированный пользователь: стабильный id и роль от провайдера сессий."""

    user_id: int
    role: str

    @property
    def is_coach(self) -> bool:
        return self.role == ROLE_COACH

    @property
    def is_parent(self) -> bool:
        return self.role == ROLE_PARENT

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def create_access_token(user_id: int, role: str, expires_minutes: int | None = None) -> str:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expires = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    token_payload = {
        "user_id": user_id,
        "role": role,
        "exp": expires,
    }
    return jwt.encode(token_payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_principal(token: str) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise credentials_exception

    user_id = payload.get("user_id")
    role = payload.get("role")
    if user_id is None or role not in ROLES:
        raise credentials_exception
    try:
        return Principal(user_id=int(user_id), role=role)
    except (TypeError, ValueError):
        raise credentials_exception


async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    return decode_principal(token)
