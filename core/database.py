import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        # SQLite: без pool_pre_ping, соединение доступно из любого потока
        return create_async_engine(
            url,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False},
            **kwargs,
        )
    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_pre_ping=True,      # проверка соединения перед использованием
        **kwargs,
    )


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Асинхронный генератор сессии.
    Используется как Depends(get_db) в роутерах.
    """
    async with AsyncSessionLocal() as session:
        yield session
