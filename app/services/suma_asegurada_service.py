"""Servicio de suma asegurada.

Insured Sum Service. Finds the insured sum of a coverage at the claim
occurrence date, with the special rules of the transport lines (ramo 15
land, 41 maritime) and of the IPS/IVS life products.
"""

from datetime import date
from decimal import Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalogo import ProductoCobertura
from app.models.poliza import RiesgoCubierto, RiesgoCubiertoHistorico
from app.repositories.catalogo_repository import catalogo_repository
from app.repositories.poliza_repository import CertificadoKey, poliza_repository
from app.schemas.siniestro import SumaAseguradaInfo
from app.utils.exceptions import SumaAseguradaError
from app.utils.money import to_decimal

# Ramos de transporte: la suma se asocia a una sola cobertura de la póliza
# (Transport lines: the insured sum is associated to one coverage of the policy)
RAMOS_TRANSPORTE: tuple[int, ...] = (15, 41)
# Productos de vida con suma asegurada combinada (Life products with a combined insured sum)
PRODUCTOS_SUMA_COMBINADA: tuple[str, ...] = ("IPS", "IVS")

MSG_SUMA_NO_ENCONTRADA: str = "2 - Error, al obtener la suma asegurada."
MSG_SUMA_DUPLICADA: str = "2 - Error, se encontró mas de un registro para obtener la suma asegurada."
MSG_FECHA_EFECTIVA: str = "2 - Error, al obtener la fecha efectiva."
MSG_SUMA_TRANSPORTE: str = "4 - Error, al obtener la sumas asegurada."


class SumaAseguradaService:
    """Búsqueda de sumas aseguradas (Insured sum lookups)."""

    async def obtener_suma_asegurada(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
        ramo_contable: int,
        cobertura: str,
    ) -> SumaAseguradaInfo:
        """Obtiene la suma asegurada de una cobertura a la fecha de ocurrencia.

        Look up the insured sum, plan and effective date of a coverage.

        Args:
            db: Sesión asíncrona (Async database session)
            key: Claves del certificado (Policy certificate keys)
            fe_ocurrencia: Fecha de ocurrencia (Claim occurrence date)
            ramo_contable: Ramo contable (Accounting line)
            cobertura: Cobertura (Coverage code)

        Returns:
            SumaAseguradaInfo: Suma, plan y fecha efectiva (Insured sum, plan and effective date)

        Raises:
            SumaAseguradaError: Sin datos o datos duplicados (Missing or duplicated data)
        """
        if key.ramo in RAMOS_TRANSPORTE:
            info: SumaAseguradaInfo = await self._suma_transporte(db, key, fe_ocurrencia)
        else:
            info = await self._suma_cobertura(db, key, fe_ocurrencia, ramo_contable, cobertura)

        producto: ProductoCobertura | None = await catalogo_repository.get_producto(
            db, key.ramo, ramo_contable, cobertura
        )
        if producto is not None and producto.tipo_producto in PRODUCTOS_SUMA_COMBINADA:
            info.suma_asegurada = await self._suma_combinada(db, key, producto.tipo_producto, info.fe_efectiva)
        return info

    async def _suma_cobertura(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
        ramo_contable: int,
        cobertura: str,
    ) -> SumaAseguradaInfo:
        fe_efectiva: date = (
            await poliza_repository.get_max_fecha_efectiva(db, key, ramo_contable, cobertura, fe_ocurrencia)
            or fe_ocurrencia
        )

        rows: Sequence[tuple[Decimal, str | None]] = await poliza_repository.get_riesgos_en_fecha(
            db, RiesgoCubierto, key, ramo_contable, cobertura, fe_efectiva
        )
        if not rows:
            # El histórico solo aplica si no hay riesgos vigentes hasta esa fecha
            vigentes: int = await poliza_repository.count_vigentes_hasta(db, key, ramo_contable, cobertura, fe_efectiva)
            if vigentes == 0:
                rows = await poliza_repository.get_riesgos_en_fecha(
                    db, RiesgoCubiertoHistorico, key, ramo_contable, cobertura, fe_efectiva
                )

        if not rows:
            raise SumaAseguradaError(MSG_SUMA_NO_ENCONTRADA)
        if len(rows) > 1:
            raise SumaAseguradaError(MSG_SUMA_DUPLICADA)

        suma, cd_plan = rows[0]
        return SumaAseguradaInfo(suma_asegurada=to_decimal(suma), cd_plan=cd_plan, fe_efectiva=fe_efectiva)

    async def _suma_transporte(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
    ) -> SumaAseguradaInfo:
        fe_efectiva: date | None = await poliza_repository.get_max_fecha_efectiva_historica(db, key, fe_ocurrencia)
        if fe_efectiva is None:
            raise SumaAseguradaError(MSG_FECHA_EFECTIVA)

        suma: Decimal | None = await poliza_repository.get_max_suma_historica(db, key, fe_efectiva)
        if suma is None:
            raise SumaAseguradaError(MSG_SUMA_TRANSPORTE)
        return SumaAseguradaInfo(suma_asegurada=to_decimal(suma), fe_efectiva=fe_efectiva)

    async def _suma_combinada(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        tipo_producto: str,
        fe_efectiva: date,
    ) -> Decimal:
        """Suma de las coberturas vigentes del certificado con el mismo tipo de producto."""
        total: Decimal = Decimal("0")
        productos: Sequence[ProductoCobertura] = await catalogo_repository.get_coberturas_por_producto(
            db, key.ramo, tipo_producto
        )
        for producto in productos:
            suma: Decimal | None = await poliza_repository.get_suma_vigente_cobertura(
                db, key, producto.ramo_contable, producto.cobertura, fe_efectiva
            )
            total += to_decimal(suma)
        return to_decimal(total)

    async def obtener_suma_asegurada_vigente(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
    ) -> Decimal:
        """Límite único combinado del certificado.

        Combined single limit of a LUC certificate: the highest current
        insured sum effective on or before the occurrence date.
        """
        return to_decimal(await poliza_repository.get_max_suma_vigente(db, key, fe_ocurrencia))


# Instancia única (Singleton instance)
suma_asegurada_service: SumaAseguradaService = SumaAseguradaService()
