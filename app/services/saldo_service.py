"""Servicio de saldos: saldo, pagos y rechazos de una cobertura.

Balance Service. The balance of a coverage reserve is not stored: it is
the sum of its reserve movements minus the settled payments.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.movimiento_repository import movimiento_repository
from app.repositories.poliza_repository import CertificadoKey
from app.repositories.reserva_repository import REMESA_DEFAULT, reserva_repository
from app.utils.money import to_decimal

# Ramo contable de las coberturas LUC (Accounting line of LUC coverages)
RAMO_CONTABLE_LUC: int = 10


class SaldoService:
    """Cálculo de saldos y pagos (Balance and payment computation)."""

    async def obtener_pagos(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
        hoy: date | None = None,
    ) -> Decimal:
        """Pagos efectivos de la cobertura (Effective payments of a coverage)."""
        hoy = hoy or date.today()
        return to_decimal(
            await movimiento_repository.sum_pagos(db, sucursal, siniestro, ramo_contable, cobertura, hoy)
        )

    async def obtener_rechazo(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
    ) -> Decimal:
        """Monto rechazado de la cobertura, en valor absoluto."""
        return abs(to_decimal(
            await movimiento_repository.sum_rechazo(db, sucursal, siniestro, ramo_contable, cobertura)
        ))

    async def obtener_saldo(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
        hoy: date | None = None,
    ) -> Decimal:
        """Obtiene el saldo actual de la reserva de una cobertura.

        Current balance of a coverage reserve: movements up to today that
        affect the balance minus the absolute value of the payments. Missing
        data counts as zero.

        Args:
            db: Sesión asíncrona (Async database session)
            sucursal: Sucursal (Claim branch)
            siniestro: Número de siniestro (Claim number)
            ramo_contable: Ramo contable (Accounting line)
            cobertura: Cobertura (Coverage code)
            hoy: Fecha de corte, hoy por defecto (Cut-off date, today by default)

        Returns:
            Decimal: Saldo (Balance)
        """
        hoy = hoy or date.today()
        movimientos: Decimal = to_decimal(
            await movimiento_repository.sum_movimientos(db, sucursal, siniestro, ramo_contable, cobertura, hoy)
        )
        pagos: Decimal = await self.obtener_pagos(db, sucursal, siniestro, ramo_contable, cobertura, hoy)
        return movimientos - abs(pagos)

    async def obtener_pagos_certificado(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int = RAMO_CONTABLE_LUC,
        hoy: date | None = None,
    ) -> Decimal:
        """Pagos de todos los siniestros del certificado (Certificate payments)."""
        hoy = hoy or date.today()
        return to_decimal(await movimiento_repository.sum_pagos_certificado(db, key, ramo_contable, hoy))

    async def obtener_reserva_pendiente(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int = RAMO_CONTABLE_LUC,
        hoy: date | None = None,
    ) -> Decimal:
        """Reserva pendiente del certificado.

        Reserve movements of the certificate plus the adjustments staged in
        the default batch, which are not yet applied.
        """
        hoy = hoy or date.today()
        movimientos: Decimal = to_decimal(
            await movimiento_repository.sum_movimientos_certificado(db, key, ramo_contable, hoy)
        )
        remesa: Decimal = to_decimal(await reserva_repository.sum_remesa(db, key, ramo_contable, REMESA_DEFAULT))
        return movimientos + remesa


# Instancia única (Singleton instance)
saldo_service: SaldoService = SaldoService()
