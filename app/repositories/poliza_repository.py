"""Repositorio de póliza: riesgos cubiertos vigentes e históricos.

Policy Repository. Effective-date and insured-sum lookups over the current
and historical insured risks of a policy certificate.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.poliza import Poliza, RiesgoCubierto, RiesgoCubiertoHistorico
from app.repositories.base import BaseRepository

RiesgoModel = type[RiesgoCubierto] | type[RiesgoCubiertoHistorico]


@dataclass(frozen=True)
class CertificadoKey:
    """Claves de un certificado de póliza (Policy certificate keys)."""

    sucursal: int
    ramo: int
    poliza: int
    certificado: int


def _where_certificado(query: Select, model: RiesgoModel, key: CertificadoKey) -> Select:
    return query.where(
        model.sucursal == key.sucursal,
        model.ramo == key.ramo,
        model.poliza == key.poliza,
        model.certificado == key.certificado,
    )


def _where_cobertura(query: Select, model: RiesgoModel, ramo_contable: int, cobertura: str) -> Select:
    return query.where(model.ramo_contable == ramo_contable, model.cobertura == cobertura)


class PolizaRepository(BaseRepository[RiesgoCubierto]):
    """Consultas de riesgos cubiertos (Insured risk queries)."""

    def __init__(self) -> None:
        super().__init__(RiesgoCubierto)

    async def get_moneda(
        self,
        db: AsyncSession,
        sucursal: int,
        ramo: int,
        poliza: int,
    ) -> str | None:
        """Moneda de la póliza (Policy currency code)."""
        row: Poliza | None = await db.get(Poliza, (sucursal, ramo, poliza))
        return row.cd_moneda if row is not None else None

    async def get_max_fecha_efectiva(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        fe_ocurrencia: date,
    ) -> date | None:
        """Fecha efectiva más reciente de la cobertura a la fecha de ocurrencia.

        Latest effective date on or before the occurrence date across both the
        current and the historical insured risks of a coverage.

        Args:
            db: Sesión asíncrona (Async database session)
            key: Claves del certificado (Certificate keys)
            ramo_contable: Ramo contable (Accounting line)
            cobertura: Cobertura (Coverage code)
            fe_ocurrencia: Fecha de ocurrencia (Claim occurrence date)

        Returns:
            date | None: Fecha efectiva o None (Effective date or None)
        """
        fechas: list[date] = []
        for model in (RiesgoCubierto, RiesgoCubiertoHistorico):
            query: Select = select(func.max(model.fe_efectiva)).where(model.fe_efectiva <= fe_ocurrencia)
            query = _where_cobertura(_where_certificado(query, model, key), model, ramo_contable, cobertura)
            value: date | None = (await db.execute(query)).scalar()
            if value is not None:
                fechas.append(value)
        return max(fechas) if fechas else None

    async def get_riesgos_en_fecha(
        self,
        db: AsyncSession,
        model: RiesgoModel,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        fe_efectiva: date,
    ) -> Sequence[tuple[Decimal, str | None]]:
        """Suma asegurada y plan de la cobertura en una fecha efectiva.

        Insured sum and plan rows of a coverage at an exact effective date.
        More than one row means the data is inconsistent; the caller decides.
        """
        query: Select = select(model.mt_suma_asegurada, model.cd_plan).where(model.fe_efectiva == fe_efectiva)
        query = _where_cobertura(_where_certificado(query, model, key), model, ramo_contable, cobertura)
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def count_vigentes_hasta(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        fe_efectiva: date,
    ) -> int:
        """Riesgos vigentes con fecha efectiva hasta la fecha dada (Current rows up to a date)."""
        query: Select = select(func.count()).select_from(RiesgoCubierto).where(
            RiesgoCubierto.fe_efectiva <= fe_efectiva,
        )
        query = _where_cobertura(_where_certificado(query, RiesgoCubierto, key), RiesgoCubierto, ramo_contable, cobertura)
        return (await db.execute(query)).scalar() or 0

    async def get_max_fecha_efectiva_historica(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
    ) -> date | None:
        """Fecha efectiva histórica más reciente del certificado (ramos de transporte)."""
        query: Select = select(func.max(RiesgoCubiertoHistorico.fe_efectiva)).where(
            RiesgoCubiertoHistorico.fe_efectiva <= fe_ocurrencia,
        )
        query = _where_certificado(query, RiesgoCubiertoHistorico, key)
        return (await db.execute(query)).scalar()

    async def get_max_suma_historica(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_efectiva: date,
    ) -> Decimal | None:
        """Mayor suma asegurada histórica del certificado en la fecha efectiva."""
        query: Select = select(func.max(RiesgoCubiertoHistorico.mt_suma_asegurada)).where(
            RiesgoCubiertoHistorico.fe_efectiva == fe_efectiva,
        )
        query = _where_certificado(query, RiesgoCubiertoHistorico, key)
        return (await db.execute(query)).scalar()

    async def get_suma_vigente_cobertura(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        fe_ocurrencia: date,
    ) -> Decimal | None:
        """Suma asegurada vigente de la cobertura a la fecha de ocurrencia.

        Insured sum of the latest current row of a coverage effective on or
        before the occurrence date.
        """
        query: Select = (
            select(RiesgoCubierto.mt_suma_asegurada)
            .where(RiesgoCubierto.fe_efectiva <= fe_ocurrencia)
            .order_by(RiesgoCubierto.fe_efectiva.desc(), RiesgoCubierto.id.desc())
            .limit(1)
        )
        query = _where_cobertura(_where_certificado(query, RiesgoCubierto, key), RiesgoCubierto, ramo_contable, cobertura)
        return (await db.execute(query)).scalar()

    async def get_max_suma_vigente(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
    ) -> Decimal | None:
        """Límite único combinado: mayor suma vigente del certificado (Max current insured sum)."""
        query: Select = select(func.max(RiesgoCubierto.mt_suma_asegurada)).where(
            RiesgoCubierto.fe_efectiva <= fe_ocurrencia,
        )
        query = _where_certificado(query, RiesgoCubierto, key)
        return (await db.execute(query)).scalar()


# Instancia única (Singleton instance)
poliza_repository: PolizaRepository = PolizaRepository()
