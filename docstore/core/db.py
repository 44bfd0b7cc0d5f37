from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

# Базовый класс для моделей
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Async движок; SQLite в памяти использует одно соединение на все сессии"""
    options = {"echo": echo}
    if database_url.startswith("sqlite") and (database_url.endswith("://") or ":memory:" in database_url):
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    return create_async_engine(database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request):
    """Зависимость для получения сессии БД"""
    async with request.app.state.session_factory() as session:
        yield session


async def init_db(engine: AsyncEngine) -> None:
    """Создание недостающих таблиц"""
    # импортируем модели, чтобы таблицы попали в Base.metadata
    import docstore.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
