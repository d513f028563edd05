"""Utilidad de paginación.

Pagination utility module for SQLAlchemy async queries. Provides a
generic paginate function and a Page response model for list endpoints.
"""

from math import ceil
from typing import Any, Sequence

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


class Page(BaseModel):
    """Resultado paginado.

    Pagination result model for typed responses.

    Attributes:
        items: Elementos de la página (Items for the current page)
        total: Total de elementos (Total count across all pages)
        page: Página actual, desde 1 (Current page number, 1-based)
        per_page: Elementos por página (Items per page)
        pages: Total de páginas (Total number of pages)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int
    pages: int

    @classmethod
    def build(cls, items: Sequence[Any], total: int, page: int, per_page: int) -> "Page":
        return cls(
            items=list(items),
            total=total,
            page=page,
            per_page=per_page,
            pages=ceil(total / per_page) if per_page else 0,
        )


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """Ejecuta una consulta paginada.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one COUNT over a subquery and one OFFSET/LIMIT page.

    Args:
        db: Sesión asíncrona (Async database session)
        query: Consulta base (Base query to paginate)
        page: Página, desde 1 (Page number, 1-indexed)
        per_page: Elementos por página (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (elementos, total) (Paginated items and total count)
    """
    count_query = select(func.count()).select_from(query.subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().all()

    return items, total
