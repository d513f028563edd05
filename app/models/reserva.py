"""Modelos de reservas por cobertura y remesas de ajustes.

Reserve SQLAlchemy ORM model definitions.

Tables:
    - reservas_coberturas: Reserva por cobertura del siniestro (Coverage reserve row)
    - ajustes_remesa: Ajustes LUC priorizados en lote (Staged prioritized adjustments)
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from sqlalchemy import BigInteger, Date, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ReservaCobertura(Base):
    """Reserva de una cobertura del siniestro.

    The applied adjustments accumulate in ``mt_ajustado``; the live balance is
    not stored, it is computed from movements and payments.

    Attributes:
        sucursal: Sucursal del siniestro (Claim branch)
        siniestro: Número de siniestro (Claim number)
        ramo_contable: Ramo contable (Accounting line)
        cobertura: Cobertura (Coverage code)
        sucursal_poliza / ramo_poliza / poliza / certificado: Claves de póliza (Policy keys)
        mt_suma_asegurada: Suma asegurada registrada (Stored insured sum, may be null)
        mt_reserva: Reserva inicial (Initial reserve)
        mt_ajustado: Ajustes acumulados (Accumulated adjustments)
        mt_liquidado: Liquidado (Settled amount)
        fe_efectiva: Fecha efectiva de la suma asegurada (Insured sum effective date)
    """

    __tablename__ = "reservas_coberturas"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    cobertura: Mapped[str] = mapped_column(String(3), primary_key=True)
    sucursal_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    poliza: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificado: Mapped[int] = mapped_column(Integer, nullable=False)
    mt_suma_asegurada: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    mt_reserva: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    mt_ajustado: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    mt_liquidado: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    fe_efectiva: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        Index("ix_reservas_coberturas_poliza", "sucursal_poliza", "ramo_poliza", "poliza", "certificado"),
    )


class AjusteRemesa(Base):
    """Ajuste priorizado guardado en una remesa.

    Prioritized LUC adjustment staged in a batch (remesa). Batch 77777 is the
    default batch shared by adjustments staged outside a priority run.

    Attributes:
        id_remesa: Identificador de la remesa (Batch identifier)
        prioridad: Prioridad LUC (LUC priority)
        mt_ajuste: Monto ajustado tras la priorización (Adjusted amount after prioritization)
        msj_val: Código de validación ("ST1")
        observacion: Observación ("OK")
        registro: Número de registro (Record counter, 1)
    """

    __tablename__ = "ajustes_remesa"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_remesa: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    sucursal: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo: Mapped[int] = mapped_column(Integer, nullable=False)
    poliza: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificado: Mapped[int] = mapped_column(Integer, nullable=False)
    fe_ocurrencia: Mapped[date] = mapped_column(Date, nullable=False)
    prioridad: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo_contable: Mapped[int] = mapped_column(Integer, nullable=False)
    cobertura: Mapped[str] = mapped_column(String(3), nullable=False)
    mt_ajuste: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    msj_val: Mapped[str] = mapped_column(String(10), default="ST1", nullable=False)
    observacion: Mapped[str] = mapped_column(String(200), default="OK", nullable=False)
    registro: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
