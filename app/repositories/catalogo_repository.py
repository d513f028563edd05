"""Repositorio de catálogos: coberturas, ramos contables, LUC y contabilidad.

Catalog Repository. Read-only lookups that drive the branch specific
rules of the adjustment engine.
"""

from decimal import Decimal, InvalidOperation
from typing import Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalogo import (
    CatalogoGeneral,
    CausaCobertura,
    Cobertura,
    CoberturaLuc,
    CodigoReferencia,
    ProductoCobertura,
    RamoComponente,
    RamoContable,
)
from app.repositories.base import BaseRepository

DOMINIO_STATUS_SINIESTRO: str = "0STATSIN"
DOMINIO_FACTOR_MAX_INDEMNIZACION: str = "FACTMAXIND"


class CatalogoRepository(BaseRepository[Cobertura]):
    """Consultas de catálogos (Catalog queries)."""

    def __init__(self) -> None:
        super().__init__(Cobertura)

    async def get_cobertura(
        self,
        db: AsyncSession,
        ramo_contable: int,
        cobertura: str,
    ) -> Cobertura | None:
        return await self.get_by_pk(db, (ramo_contable, cobertura))

    async def get_ramo_contable(
        self,
        db: AsyncSession,
        codigo: int,
    ) -> RamoContable | None:
        return await db.get(RamoContable, codigo)

    async def get_producto(
        self,
        db: AsyncSession,
        ramo: int,
        ramo_contable: int,
        cobertura: str,
    ) -> ProductoCobertura | None:
        """Tipo de producto y tipo de siniestro de la cobertura (Product attributes of a coverage)."""
        return await db.get(ProductoCobertura, (ramo, ramo_contable, cobertura))

    async def get_coberturas_por_producto(
        self,
        db: AsyncSession,
        ramo: int,
        tipo_producto: str,
    ) -> Sequence[ProductoCobertura]:
        """Coberturas del ramo con el mismo tipo de producto (Coverages sharing a product type)."""
        query: Select = select(ProductoCobertura).where(
            ProductoCobertura.ramo == ramo,
            ProductoCobertura.tipo_producto == tipo_producto,
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_prioridad_luc(
        self,
        db: AsyncSession,
        ramo: int,
        ramo_contable: int,
        cobertura: str,
    ) -> int | None:
        """Prioridad LUC de la cobertura, None si no tiene.

        LUC priority of a coverage; None when it has no priority.
        """
        luc: CoberturaLuc | None = await db.get(CoberturaLuc, (ramo, ramo_contable, cobertura))
        return luc.prioridad if luc is not None else None

    async def get_causas(
        self,
        db: AsyncSession,
        ramo: int,
        ramo_contable: int,
        cobertura: str,
    ) -> list[str]:
        """Causas aceptadas por la cobertura (Accepted claim causes of a coverage)."""
        query: Select = select(CausaCobertura.cd_causa).where(
            CausaCobertura.ramo == ramo,
            CausaCobertura.ramo_contable == ramo_contable,
            CausaCobertura.cobertura == cobertura,
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_componentes(
        self,
        db: AsyncSession,
        ramo: int,
        ramo_contable: int,
        tp_movimiento: str,
        tipo_siniestro: str,
        cobertura: str,
        signo: str,
    ) -> Sequence[RamoComponente]:
        """Componentes contables de un movimiento.

        Accounting components for a movement. A component applies when it
        starts with the coverage code and its 4th character is the amount
        sign ("P" positive, "N" negative).

        Args:
            db: Sesión asíncrona (Async database session)
            ramo: Ramo de la póliza (Policy ramo)
            ramo_contable: Ramo contable (Accounting line)
            tp_movimiento: Tipo de movimiento (Movement type)
            tipo_siniestro: Tipo de siniestro (Claim type)
            cobertura: Código de cobertura (Coverage code)
            signo: "P" o "N" (Amount sign)

        Returns:
            Sequence[RamoComponente]: Componentes ordenados (Components ordered by code)
        """
        query: Select = (
            select(RamoComponente)
            .where(
                RamoComponente.ramo == ramo,
                RamoComponente.ramo_contable == ramo_contable,
                RamoComponente.tp_movimiento == tp_movimiento,
                RamoComponente.tipo_siniestro == tipo_siniestro,
                RamoComponente.componente.like(f"{cobertura}{signo}%"),
            )
            .order_by(RamoComponente.componente)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_referencia(
        self,
        db: AsyncSession,
        dominio: str,
        valor: str,
    ) -> str | None:
        ref: CodigoReferencia | None = await db.get(CodigoReferencia, (dominio, valor))
        return ref.descripcion if ref is not None else None

    async def get_descripcion_status(
        self,
        db: AsyncSession,
        st_siniestro: int,
    ) -> str | None:
        return await self.get_referencia(db, DOMINIO_STATUS_SINIESTRO, str(st_siniestro))

    async def get_factor_max_indemnizacion(
        self,
        db: AsyncSession,
        ramo: int,
    ) -> Decimal:
        """Factor máximo de indemnización del ramo, 1 por defecto.

        Maximum indemnification factor of a ramo; 1 when not configured or
        not numeric.
        """
        valor: str | None = await self.get_referencia(db, DOMINIO_FACTOR_MAX_INDEMNIZACION, str(ramo))
        if valor is None:
            return Decimal("1")
        try:
            return Decimal(valor.strip())
        except InvalidOperation:
            return Decimal("1")

    async def get_nombre_conexion(self, db: AsyncSession) -> str | None:
        """Nombre de la conexión guardado en el catálogo general, código 0."""
        concepto: CatalogoGeneral | None = await db.get(CatalogoGeneral, 0)
        return concepto.nom_concepto if concepto is not None else None

    def build_lov_query(
        self,
        ramo_contable: int | None = None,
        search: str | None = None,
    ) -> Select:
        """Consulta de la lista de valores de coberturas.

        Build the coverage list-of-values query, optionally filtered by
        accounting line and by a code/description search term.

        Args:
            ramo_contable: Ramo contable, None para todos (Accounting line filter)
            search: Texto a buscar (Case-insensitive search on code or description)

        Returns:
            Select: Consulta ordenada (Ordered select over Cobertura)
        """
        query: Select = select(Cobertura)
        if ramo_contable is not None:
            query = query.where(Cobertura.ramo_contable == ramo_contable)
        if search:
            pattern: str = f"%{search}%"
            query = query.where(or_(Cobertura.codigo.ilike(pattern), Cobertura.descripcion.ilike(pattern)))
        return query.order_by(Cobertura.ramo_contable, Cobertura.codigo)


# Instancia única (Singleton instance)
catalogo_repository: CatalogoRepository = CatalogoRepository()
