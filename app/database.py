"""Motor de base de datos y sesiones.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, the session factory and the ORM base
class shared by every siniestros model.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

# Desactiva la caché de sentencias preparadas para poolers en modo transacción
# Disable prepared statement caches for transaction-mode poolers (asyncpg only)
_connect_args: dict[str, Any] = (
    {"statement_cache_size": 0} if settings.DATABASE_URL.startswith("postgresql+asyncpg") else {}
)

# Motor asíncrono (Async database engine)
# pool_pre_ping=True: valida la conexión antes de usarla (Validates connections before use)
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

# Fábrica de sesiones (Async session factory)
# expire_on_commit=False: atributos accesibles tras el commit (Attributes stay loaded after commit)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Clase base declarativa de SQLAlchemy.

    Declarative base class for all ORM models.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Genera una sesión por petición y la cierra al terminar.

    FastAPI dependency that yields an async database session.
    The session is closed after the request; anything not committed by the
    router is rolled back on close.

    Yields:
        AsyncSession: Sesión asíncrona de SQLAlchemy (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
