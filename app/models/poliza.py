"""Modelos de póliza y riesgos cubiertos.

Policy and insured-risk SQLAlchemy ORM model definitions.
Insured sums are looked up in the current risks table first and in the
historical one as a fallback.

Tables:
    - polizas: Cabecera de póliza (Policy header, currency)
    - riesgos_cubiertos: Riesgos vigentes (Current insured risks per coverage)
    - riesgos_cubiertos_historicos: Riesgos históricos (Historical insured risks)
"""

from datetime import date
from decimal import Decimal
from sqlalchemy import BigInteger, Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Poliza(Base):
    """Póliza.

    Attributes:
        sucursal: Sucursal (Policy branch)
        ramo: Ramo (Line of business)
        numero: Número de póliza (Policy number)
        cd_moneda: Moneda de la póliza (Policy currency code, "01" local)
    """

    __tablename__ = "polizas"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo: Mapped[int] = mapped_column(Integer, primary_key=True)
    numero: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    cd_moneda: Mapped[str | None] = mapped_column(String(2), nullable=True)


class _RiesgoCubiertoMixin:
    """Columnas comunes de riesgos cubiertos vigentes e históricos."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sucursal: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo: Mapped[int] = mapped_column(Integer, nullable=False)
    poliza: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificado: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo_contable: Mapped[int] = mapped_column(Integer, nullable=False)
    cobertura: Mapped[str] = mapped_column(String(3), nullable=False)
    # Fecha desde la que rige la suma asegurada (Date the insured sum becomes effective)
    fe_efectiva: Mapped[date] = mapped_column(Date, nullable=False)
    mt_suma_asegurada: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    cd_plan: Mapped[str | None] = mapped_column(String(10), nullable=True)


class RiesgoCubierto(_RiesgoCubiertoMixin, Base):
    """Riesgo cubierto vigente (current insured risk)."""

    __tablename__ = "riesgos_cubiertos"
    __table_args__ = (
        Index("ix_riesgos_cubiertos_certificado", "sucursal", "ramo", "poliza", "certificado"),
    )


class RiesgoCubiertoHistorico(_RiesgoCubiertoMixin, Base):
    """Riesgo cubierto histórico (historical insured risk)."""

    __tablename__ = "riesgos_cubiertos_historicos"
    __table_args__ = (
        Index("ix_riesgos_cubiertos_hist_certificado", "sucursal", "ramo", "poliza", "certificado"),
    )
