"""Repositorio CRUD base: clase padre de todos los repositorios.

Base CRUD Repository. Provides generic read and existence checks
for models keyed by composite natural keys.

Usage:
    class CoberturaRepository(BaseRepository[Cobertura]):
        def __init__(self) -> None:
            super().__init__(Cobertura)
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# Tipo genérico de modelo SQLAlchemy (Generic type variable representing a SQLAlchemy model)
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Repositorio CRUD genérico.

    Generic repository providing common database operations.

    Attributes:
        model: Clase del modelo SQLAlchemy (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_pk(
        self,
        db: AsyncSession,
        pk: Any,
    ) -> ModelType | None:
        """Obtiene un registro por su clave primaria.

        Retrieve a single record by primary key. Composite keys are passed
        as a tuple in the column order of the table.

        Args:
            db: Sesión asíncrona (Async database session)
            pk: Clave primaria, tupla si es compuesta (Primary key, tuple when composite)

        Returns:
            ModelType | None: Registro o None (Found record or None)
        """
        return await db.get(self.model, pk)

    def _filtered(self, query: Select, filters: dict[str, Any] | None) -> Select:
        # Filtros por igualdad, ignorando columnas desconocidas (Equality filters on known columns)
        if filters:
            for column_name, value in filters.items():
                if hasattr(self.model, column_name):
                    query = query.where(getattr(self.model, column_name) == value)
        return query

    async def get_all(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """Obtiene todos los registros que cumplen los filtros.

        Retrieve all records matching the given equality filters.

        Args:
            db: Sesión asíncrona (Async database session)
            filters: Filtros {'columna': valor} (Filter dict {'column_name': value})
            order_by: Columna o columnas de orden (Column(s) to order by)

        Returns:
            Sequence[ModelType]: Registros encontrados (List of matching records)
        """
        query: Select = self._filtered(select(self.model), filters)
        if order_by is not None:
            query = query.order_by(*order_by) if isinstance(order_by, (list, tuple)) else query.order_by(order_by)

        result = await db.execute(query)
        return result.scalars().all()

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """Indica si existe algún registro que cumpla los filtros.

        Check if a record matching the given filters exists.

        Args:
            db: Sesión asíncrona (Async database session)
            filters: Filtros {'columna': valor} (Filter criteria dictionary)

        Returns:
            bool: True si existe (Whether a matching record exists)
        """
        query: Select = self._filtered(select(func.count()).select_from(self.model), filters)
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0
