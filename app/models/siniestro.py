"""Modelos del siniestro: siniestro, certificado, cliente y datos ACP.

Claim-related SQLAlchemy ORM model definitions.
Tables keep the composite natural keys of the legacy claims schema.

Tables:
    - siniestros: Siniestro (Claim header)
    - certificados_siniestro: Póliza/certificado afectado (Policy certificate of the claim)
    - clientes: Asegurados (Insured persons)
    - siniestros_acp: Días parciales de siniestros ACP (ACP partial days)
"""

from datetime import date
from sqlalchemy import BigInteger, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Siniestro(Base):
    """Siniestro (claim header).

    Attributes:
        sucursal: Sucursal del siniestro (Claim branch office)
        numero: Número de siniestro (Claim number, unique per branch)
        ramo: Ramo del siniestro (Line of business)
        fe_ocurrencia: Fecha de ocurrencia (Occurrence date)
        st_siniestro: Estatus (Status code: 24 liquidated, 25 rejected, 26 ARP)
        nacionalidad: Nacionalidad del asegurado (Insured nationality, "V"/"E"/"J")
        cedula: Cédula del asegurado (Insured id number)
        cd_causa: Causa del siniestro (Cause code, used for life claims)
    """

    __tablename__ = "siniestros"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    numero: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    ramo: Mapped[int] = mapped_column(Integer, nullable=False)
    fe_ocurrencia: Mapped[date] = mapped_column(Date, nullable=False)
    st_siniestro: Mapped[int] = mapped_column(Integer, nullable=False)
    nacionalidad: Mapped[str | None] = mapped_column(String(1), nullable=True)
    cedula: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    cd_causa: Mapped[str | None] = mapped_column(String(10), nullable=True)


class CertificadoSiniestro(Base):
    """Certificado de póliza afectado por el siniestro.

    Links a claim with the policy certificate it affects.

    Attributes:
        sucursal: Sucursal del siniestro (Claim branch)
        siniestro: Número de siniestro (Claim number)
        sucursal_poliza: Sucursal de la póliza (Policy branch)
        ramo_poliza: Ramo de la póliza (Policy line of business)
        poliza: Número de póliza (Policy number)
        certificado: Número de certificado (Certificate number)
        beneficiario: Beneficiario (Beneficiary name, optional)
    """

    __tablename__ = "certificados_siniestro"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    sucursal_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    ramo_poliza: Mapped[int] = mapped_column(Integer, nullable=False)
    poliza: Mapped[int] = mapped_column(BigInteger, nullable=False)
    certificado: Mapped[int] = mapped_column(Integer, nullable=False)
    beneficiario: Mapped[str | None] = mapped_column(String(120), nullable=True)


class Cliente(Base):
    """Cliente asegurado.

    Attributes:
        nacionalidad: Nacionalidad (Nationality code)
        cedula: Cédula (Id number)
        nombre: Nombres (Given names)
        apellido: Apellidos (Surnames)
    """

    __tablename__ = "clientes"

    nacionalidad: Mapped[str] = mapped_column(String(1), primary_key=True)
    cedula: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    nombre: Mapped[str] = mapped_column(String(60), nullable=False)
    apellido: Mapped[str | None] = mapped_column(String(60), nullable=True)


class SiniestroAcp(Base):
    """Días parciales registrados para siniestros ACP.

    Partial-days registry for ACP claims (ramo contable 3, coverage 003).
    Claims without a row use 365 days.
    """

    __tablename__ = "siniestros_acp"

    sucursal: Mapped[int] = mapped_column(Integer, primary_key=True)
    siniestro: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    nu_dias_parcial: Mapped[int] = mapped_column(Integer, nullable=False)
