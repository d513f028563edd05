"""Repositorio de movimientos, asientos contables y liquidaciones.

Movement Repository. Aggregates used for balances (movements, payments,
rejections) and the inserts of an applied adjustment.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Select, and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.models.movimiento import LiquidacionCobertura, MovimientoContable, MovimientoCobertura, MovimientoSiniestro
from app.models.siniestro import CertificadoSiniestro
from app.repositories.base import BaseRepository
from app.repositories.poliza_repository import CertificadoKey

# Tipos que no afectan el saldo de la reserva (Movement types excluded from balances)
TIPOS_EXCLUIDOS_SALDO: tuple[str, ...] = ("IC", "CC", "ID")
TIPO_RECHAZO: str = "RX"


def _pago_expr() -> ColumnElement:
    # Liquidado menos deducible tipo 3 (Settled amount minus type 3 deductible)
    return LiquidacionCobertura.mt_liquidacion - case(
        (LiquidacionCobertura.tp_deducible == 3, LiquidacionCobertura.mt_deducible),
        else_=0,
    )


def _pago_filters(hoy: date) -> ColumnElement:
    return and_(
        LiquidacionCobertura.cd_egreso.between(700, 750),
        LiquidacionCobertura.fe_pago <= hoy,
        func.coalesce(LiquidacionCobertura.tp_pago, "").not_in(("Y", "Z")),
        LiquidacionCobertura.st_liquidacion.not_in((6, 7)),
    )


class MovimientoRepository(BaseRepository[MovimientoCobertura]):
    """Consultas de movimientos (Movement queries)."""

    def __init__(self) -> None:
        super().__init__(MovimientoCobertura)

    # --- Saldos por cobertura (Coverage balances) ---

    async def sum_movimientos(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
        hoy: date,
    ) -> Decimal | None:
        """Suma de movimientos de la cobertura que afectan el saldo.

        Sum of the coverage movements up to today, excluding the movement
        types that do not affect the reserve balance.
        """
        query: Select = select(func.sum(MovimientoCobertura.mt_movimiento)).where(
            MovimientoCobertura.sucursal == sucursal,
            MovimientoCobertura.siniestro == siniestro,
            MovimientoCobertura.ramo_contable == ramo_contable,
            MovimientoCobertura.cobertura == cobertura,
            MovimientoCobertura.tp_movimiento.not_in(TIPOS_EXCLUIDOS_SALDO),
            MovimientoCobertura.fe_movimiento <= hoy,
        )
        return (await db.execute(query)).scalar()

    async def sum_pagos(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
        hoy: date,
    ) -> Decimal | None:
        """Pagos liquidados de la cobertura.

        Settled payments of the coverage: expense codes 700 to 750, paid up to
        today, excluding payment types Y/Z and voided settlements (6, 7).
        A type 3 deductible is subtracted from each payment.
        """
        query: Select = select(func.sum(_pago_expr())).where(
            LiquidacionCobertura.sucursal == sucursal,
            LiquidacionCobertura.siniestro == siniestro,
            LiquidacionCobertura.ramo_contable == ramo_contable,
            LiquidacionCobertura.cobertura == cobertura,
            _pago_filters(hoy),
        )
        return (await db.execute(query)).scalar()

    async def sum_rechazo(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
    ) -> Decimal | None:
        """Suma de movimientos de rechazo (RX) de la cobertura."""
        query: Select = select(func.sum(MovimientoCobertura.mt_movimiento)).where(
            MovimientoCobertura.sucursal == sucursal,
            MovimientoCobertura.siniestro == siniestro,
            MovimientoCobertura.ramo_contable == ramo_contable,
            MovimientoCobertura.cobertura == cobertura,
            MovimientoCobertura.tp_movimiento == TIPO_RECHAZO,
        )
        return (await db.execute(query)).scalar()

    # --- Totales por certificado (Certificate totals, LUC) ---

    async def sum_movimientos_certificado(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        hoy: date,
    ) -> Decimal | None:
        """Reserva constituida del certificado en un ramo contable.

        Reserve movements of every claim of the certificate for one
        accounting line.
        """
        query: Select = select(func.sum(MovimientoCobertura.mt_movimiento)).where(
            MovimientoCobertura.sucursal_poliza == key.sucursal,
            MovimientoCobertura.ramo_poliza == key.ramo,
            MovimientoCobertura.poliza == key.poliza,
            MovimientoCobertura.certificado == key.certificado,
            MovimientoCobertura.ramo_contable == ramo_contable,
            MovimientoCobertura.tp_movimiento.not_in(TIPOS_EXCLUIDOS_SALDO),
            MovimientoCobertura.fe_movimiento <= hoy,
        )
        return (await db.execute(query)).scalar()

    async def sum_pagos_certificado(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        hoy: date,
    ) -> Decimal | None:
        """Pagos de todos los siniestros del certificado en un ramo contable."""
        query: Select = (
            select(func.sum(_pago_expr()))
            .join(
                CertificadoSiniestro,
                and_(
                    CertificadoSiniestro.sucursal == LiquidacionCobertura.sucursal,
                    CertificadoSiniestro.siniestro == LiquidacionCobertura.siniestro,
                ),
            )
            .where(
                CertificadoSiniestro.sucursal_poliza == key.sucursal,
                CertificadoSiniestro.ramo_poliza == key.ramo,
                CertificadoSiniestro.poliza == key.poliza,
                CertificadoSiniestro.certificado == key.certificado,
                LiquidacionCobertura.ramo_contable == ramo_contable,
                _pago_filters(hoy),
            )
        )
        return (await db.execute(query)).scalar()

    # --- Numeración (Numbering) ---

    async def get_max_nu_movimiento(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
    ) -> int:
        """Mayor número de movimiento entre movimientos y movimientos por cobertura.

        Highest movement number of the claim across both movement tables;
        0 when the claim has none.
        """
        maximos: list[int] = []
        for model in (MovimientoSiniestro, MovimientoCobertura):
            query: Select = select(func.max(model.nu_movimiento)).where(
                model.sucursal == sucursal,
                model.siniestro == siniestro,
            )
            maximos.append((await db.execute(query)).scalar() or 0)
        return max(maximos)

    async def get_max_nu_asiento(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
    ) -> int:
        query: Select = select(func.max(MovimientoContable.nu_asiento)).where(
            MovimientoContable.sucursal == sucursal,
            MovimientoContable.siniestro == siniestro,
        )
        return (await db.execute(query)).scalar() or 0

    # --- Inserciones (Inserts) ---

    async def add_movimiento(
        self,
        db: AsyncSession,
        movimiento: MovimientoSiniestro,
        movimiento_cobertura: MovimientoCobertura,
        asientos: list[MovimientoContable],
    ) -> None:
        """Registra un movimiento con su movimiento por cobertura y asientos.

        Insert the three movement records of one applied adjustment.
        """
        db.add(movimiento)
        db.add(movimiento_cobertura)
        db.add_all(asientos)
        await db.flush()


# Instancia única (Singleton instance)
movimiento_repository: MovimientoRepository = MovimientoRepository()
