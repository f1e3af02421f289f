"""
Подключение к PostgreSQL через async SQLAlchemy.

Одна сессия на HTTP-запрос: ``get_db`` открывает её, фиксирует транзакцию
после успешного обработчика и откатывает при любом исключении. Проверки
инвариантов дерева колод и полей карточек выполняются внутри этой же
транзакции.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import DatabaseConfig, settings

logger = logging.getLogger(__name__)

# Имена constraints: uq_decks_owner_path и т.п. видны в ошибках драйвера
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Декларативная база моделей flashdeck."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"


class DatabaseManager:
    """
    Владелец движка и фабрики сессий.

    Создаётся один раз на процесс; ``init`` вызывается в lifespan приложения.

    Example:
        db_manager.init()
        async with db_manager.session() as session:
            ...
    """

    def __init__(self, config: DatabaseConfig | None = None, *, echo: bool = False) -> None:
        self._config = config or settings.db
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("DatabaseManager.init() has not been called")
        return self._engine

    def init(self) -> None:
        """Создать пул соединений (повторный вызов ничего не делает)."""
        if self._engine is not None:
            return

        self._engine = create_async_engine(
            self._config.async_url,
            pool_size=self._config.pool_size,
            max_overflow=self._config.max_overflow,
            pool_pre_ping=True,
            echo=self._echo,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(
            "Database engine created",
            extra={"db_host": self._config.host, "db_name": self._config.name},
        )

    async def close(self) -> None:
        """Закрыть пул соединений."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Сессия-транзакция: commit при выходе, rollback при исключении."""
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager.init() has not been called")

        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            await session.commit()

    async def health_check(self) -> bool:
        """Выполнить ``SELECT 1``; False, если база недоступна."""
        if self._session_factory is None:
            return False
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("Database health check failed: %s", exc)
            return False
        return True


db_manager = DatabaseManager(echo=settings.app.debug)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: одна сессия и одна транзакция на запрос."""
    async with db_manager.session() as session:
        yield session
