"""Repositorio del siniestro: cabecera, certificado, cliente y días ACP.

Claim Repository. Loads the claim header data the adjustment screen needs.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.siniestro import CertificadoSiniestro, Cliente, Siniestro, SiniestroAcp
from app.repositories.base import BaseRepository

# Días parciales por defecto de un siniestro ACP (Default ACP partial days)
DIAS_PARCIAL_DEFAULT: int = 365


class SiniestroRepository(BaseRepository[Siniestro]):
    """Consultas del siniestro (Claim header queries)."""

    def __init__(self) -> None:
        super().__init__(Siniestro)

    async def get_siniestro(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo: int | None = None,
    ) -> Siniestro | None:
        """Obtiene el siniestro por sucursal y número.

        Retrieve a claim by branch and number, optionally checking its ramo.

        Args:
            db: Sesión asíncrona (Async database session)
            sucursal: Sucursal (Claim branch)
            siniestro: Número de siniestro (Claim number)
            ramo: Ramo esperado, None para no filtrar (Expected ramo, None to skip)

        Returns:
            Siniestro | None: Siniestro o None (Found claim or None)
        """
        query: Select = select(Siniestro).where(
            Siniestro.sucursal == sucursal,
            Siniestro.numero == siniestro,
        )
        if ramo is not None:
            query = query.where(Siniestro.ramo == ramo)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_certificado(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
    ) -> CertificadoSiniestro | None:
        """Certificado de póliza afectado por el siniestro (Policy certificate of the claim)."""
        return await db.get(CertificadoSiniestro, (sucursal, siniestro))

    async def get_cliente(
        self,
        db: AsyncSession,
        nacionalidad: str | None,
        cedula: int | None,
    ) -> Cliente | None:
        if nacionalidad is None or cedula is None:
            return None
        return await db.get(Cliente, (nacionalidad, cedula))

    async def get_dias_parcial(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
    ) -> int:
        """Días parciales ACP del siniestro, 365 si no hay registro.

        Partial days of an ACP claim; claims without a row use 365.
        """
        acp: SiniestroAcp | None = await db.get(SiniestroAcp, (sucursal, siniestro))
        if acp is None or not acp.nu_dias_parcial:
            return DIAS_PARCIAL_DEFAULT
        return acp.nu_dias_parcial


# Instancia única (Singleton instance)
siniestro_repository: SiniestroRepository = SiniestroRepository()
