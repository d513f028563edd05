"""Repositorio de reservas por cobertura y remesas de ajustes.

Reserve Repository. Coverage reserve rows of a claim and the batches
(remesas) of prioritized LUC adjustments.
"""

from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reserva import AjusteRemesa, ReservaCobertura
from app.repositories.base import BaseRepository
from app.repositories.poliza_repository import CertificadoKey

# Remesa por defecto, compartida por ajustes fuera de una priorización
# (Default batch shared by adjustments staged outside a priority run)
REMESA_DEFAULT: int = 77777


class ReservaRepository(BaseRepository[ReservaCobertura]):
    """Consultas de reservas y remesas (Reserve and batch queries)."""

    def __init__(self) -> None:
        super().__init__(ReservaCobertura)

    async def get_reservas_siniestro(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
    ) -> Sequence[ReservaCobertura]:
        """Reservas del siniestro ordenadas por ramo contable y cobertura.

        Coverage reserve rows of a claim, ordered for the grid.
        """
        return await self.get_all(
            db,
            filters={"sucursal": sucursal, "siniestro": siniestro},
            order_by=(ReservaCobertura.ramo_contable, ReservaCobertura.cobertura),
        )

    async def get_reserva(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
    ) -> ReservaCobertura | None:
        return await self.get_by_pk(db, (sucursal, siniestro, ramo_contable, cobertura))

    async def exists_reserva_certificado(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
    ) -> bool:
        """Indica si el certificado tiene reserva para la cobertura.

        Whether any claim of the policy certificate holds a reserve for the
        coverage.
        """
        return await self.exists(
            db,
            {
                "sucursal_poliza": key.sucursal,
                "ramo_poliza": key.ramo,
                "poliza": key.poliza,
                "certificado": key.certificado,
                "ramo_contable": ramo_contable,
                "cobertura": cobertura,
            },
        )

    # --- Remesas (Batches) ---

    async def get_next_id_remesa(self, db: AsyncSession) -> int:
        """Siguiente id de remesa, sin contar la remesa por defecto.

        Next batch id: max + 1 over every batch except the default one.
        """
        query: Select = select(func.max(AjusteRemesa.id_remesa)).where(AjusteRemesa.id_remesa != REMESA_DEFAULT)
        current: int | None = (await db.execute(query)).scalar()
        next_id: int = (current or 0) + 1
        if next_id == REMESA_DEFAULT:
            next_id += 1
        return next_id

    async def sum_remesa(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        id_remesa: int = REMESA_DEFAULT,
    ) -> Decimal | None:
        """Suma de los montos de una remesa para el certificado (Staged amount of a batch)."""
        query: Select = select(func.sum(AjusteRemesa.mt_ajuste)).where(
            AjusteRemesa.id_remesa == id_remesa,
            AjusteRemesa.sucursal == key.sucursal,
            AjusteRemesa.ramo == key.ramo,
            AjusteRemesa.poliza == key.poliza,
            AjusteRemesa.certificado == key.certificado,
            AjusteRemesa.ramo_contable == ramo_contable,
        )
        return (await db.execute(query)).scalar()

    async def add_ajustes_remesa(
        self,
        db: AsyncSession,
        rows: list[dict[str, Any]],
    ) -> list[AjusteRemesa]:
        """Guarda ajustes priorizados en una remesa (Stage prioritized adjustments)."""
        created: list[AjusteRemesa] = [AjusteRemesa(**row) for row in rows]
        db.add_all(created)
        await db.flush()
        return created

    async def delete_remesa(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        ids_remesa: list[int],
    ) -> int:
        """Elimina ajustes de las remesas indicadas para la cobertura.

        Delete the staged rows of the given batches for one coverage of a
        certificate.

        Returns:
            int: Filas eliminadas (Number of deleted rows)
        """
        stmt = delete(AjusteRemesa).where(
            AjusteRemesa.id_remesa.in_(ids_remesa),
            AjusteRemesa.sucursal == key.sucursal,
            AjusteRemesa.ramo == key.ramo,
            AjusteRemesa.poliza == key.poliza,
            AjusteRemesa.certificado == key.certificado,
            AjusteRemesa.ramo_contable == ramo_contable,
            AjusteRemesa.cobertura == cobertura,
        )
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


# Instancia única (Singleton instance)
reserva_repository: ReservaRepository = ReservaRepository()
