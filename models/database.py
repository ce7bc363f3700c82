"""Подключение к БД анкеты (SQLAlchemy async)"""
import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from utils.config import DATABASE_URL

logger = logging.getLogger(__name__)

engine = create_async_engine(DATABASE_URL, echo=False)
# expire_on_commit=False: строки читаются после commit при сборке ProgressSession
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def init_db():
    """Создать таблицы участников, прогресса и ответов"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Таблицы готовы: {', '.join(sorted(Base.metadata.tables))}")


async def close_db():
    """Закрыть пул соединений при остановке бота"""
    await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Получить сессию БД"""
    async with async_session_maker() as session:
        yield session
