"""Modelos de movimientos, asientos contables y liquidaciones.

Movement SQLAlchemy ORM model definitions. Applying one reserve adjustment
writes one row in each of the three movement tables; the balance of a
coverage is derived from coverage movements minus settled payments.

Tables:
    - movimientos_siniestro: Movimiento del siniestro (Claim movement)
    - movimientos_coberturas: Movimiento por cobertura (Coverage movement)
    - movimientos_contables: Asientos contables (Accounting entries)
    - liquidaciones_coberturas: Pagos liquidados por cobertura (Coverage settlements)
"""

from datetime import date
from decimal import Decimal
from sqlalchemy import BigInteger, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class MovimientoSiniestro(Base):
    """Movimiento del siniestro.

    Attributes:
        nu_movimiento: Número de movimiento (Movement number, per claim)
        tp_movimiento: Tipo ("RA" ajuste, "RL" liquidación, "RX" rechazo)
        analista: Usuario que generó el movimiento (User who made the movement)
        mt_movimiento: Monto del movimiento (Signed movement amount)
        cd_moneda: Moneda (Currency code)
        aviso_aceptado: "CO" en siniestros ARP (Set to "CO" on ARP claims)
    """

    __tablename__ = "movimientos_siniestro"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    nu_movimiento: Mapped[int] = mapped_column(Integer, primary_key=True)
    fe_movimiento: Mapped[date] = mapped_column(Date, nullable=False)
    tp_movimiento: Mapped[str] = mapped_column(String(2), nullable=False)
    analista: Mapped[str] = mapped_column(String(30), nullable=False)
    mt_movimiento: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    cd_moneda: Mapped[str] = mapped_column(String(2), nullable=False)
    ramo_contable: Mapped[int] = mapped_column(Integer, nullable=False)
    cobertura: Mapped[str] = mapped_column(String(3), nullable=False)
    aviso_aceptado: Mapped[str | None] = mapped_column(String(2), nullable=True)


class MovimientoCobertura(Base):
    """Movimiento de reserva por cobertura, con las claves de la póliza."""

    __tablename__ = "movimientos_coberturas"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    nu_movimiento: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    cobertura: Mapped[str] = mapped_column(String(3), primary_key=True)
    sucursal_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    poliza: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificado: Mapped[int] = mapped_column(Integer, nullable=False)
    tp_movimiento: Mapped[str] = mapped_column(String(2), nullable=False)
    fe_movimiento: Mapped[date] = mapped_column(Date, nullable=False)
    mt_movimiento: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    cd_moneda: Mapped[str] = mapped_column(String(2), nullable=False)


class MovimientoContable(Base):
    """Línea de asiento contable de un movimiento de reserva.

    Attributes:
        nu_asiento: Número de asiento (Entry number, per claim)
        nu_movtocon: Línea dentro del asiento (Line within the entry, 1-based)
        mt_debe / mt_haber: Debe y haber (Debit and credit amounts)
        st_contable: Estado contable ("N" no contabilizado, not yet posted)
        fe_contable: Fecha de contabilización (Posting date, null until posted)
    """

    __tablename__ = "movimientos_contables"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    nu_asiento: Mapped[int] = mapped_column(Integer, primary_key=True)
    nu_movtocon: Mapped[int] = mapped_column(Integer, primary_key=True)
    nu_movimiento: Mapped[int] = mapped_column(Integer, nullable=False)
    tp_movimiento: Mapped[str] = mapped_column(String(2), nullable=False)
    fe_movimiento: Mapped[date] = mapped_column(Date, nullable=False)
    compania: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    ramo_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    poliza: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificado: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo_contable: Mapped[int] = mapped_column(Integer, nullable=False)
    cobertura: Mapped[str] = mapped_column(String(3), nullable=False)
    tipo_siniestro: Mapped[str] = mapped_column(String(2), nullable=False)
    componente: Mapped[str] = mapped_column(String(10), nullable=False)
    cuenta_contable: Mapped[str | None] = mapped_column(String(30), nullable=True)
    mt_debe: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    mt_haber: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    nu_documento: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    st_contable: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    fe_contable: Mapped[date | None] = mapped_column(Date, nullable=True)


class LiquidacionCobertura(Base):
    """Liquidación (pago) de una cobertura del siniestro.

    Only settlements with an expense code between 700 and 750 count as
    payments against the reserve.

    Attributes:
        cd_egreso: Código de egreso (Expense code)
        fe_pago: Fecha de pago (Payment date)
        tp_pago: Tipo de pago ("Y"/"Z" excluded from balances)
        st_liquidacion: Estatus (6 and 7 are voided settlements)
        mt_liquidacion: Monto liquidado (Settled amount)
        mt_deducible: Deducible (Deductible amount)
        tp_deducible: Tipo de deducible (3 = deducted from the payment)
    """

    __tablename__ = "liquidaciones_coberturas"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    nu_liquidacion: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    cobertura: Mapped[str] = mapped_column(String(3), primary_key=True)
    cd_egreso: Mapped[int] = mapped_column(Integer, nullable=False)
    fe_pago: Mapped[date | None] = mapped_column(Date, nullable=True)
    tp_pago: Mapped[str | None] = mapped_column(String(1), nullable=True)
    st_liquidacion: Mapped[int] = mapped_column(Integer, nullable=False)
    mt_liquidacion: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    mt_deducible: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    tp_deducible: Mapped[int | None] = mapped_column(Integer, nullable=True)
