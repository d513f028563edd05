"""Catálogos de coberturas, contabilidad y códigos de referencia.

Catalog SQLAlchemy ORM model definitions.
These tables drive the branch-specific rules of the adjustment engine:
coverage validation flags, LUC priorities, product types, accounting
components and generic reference codes.

Tables:
    - ramos_contables: Ramos contables (Accounting lines)
    - coberturas: Coberturas por ramo contable (Coverages per accounting line)
    - productos_coberturas: Tipo de producto y tipo de siniestro (Product type per coverage)
    - coberturas_luc: Prioridades LUC (Combined single limit priorities)
    - causas_coberturas: Causas aceptadas por cobertura (Accepted causes per coverage)
    - ramos_componentes: Componentes contables (Accounting components)
    - catalogo_general: Catálogo general (General catalog, connection name)
    - codigos_referencia: Códigos de referencia (Reference code domains)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class RamoContable(Base):
    """Ramo contable (accounting line)."""

    __tablename__ = "ramos_contables"

    codigo: Mapped[int] = mapped_column(Integer, primary_key=True)
    descripcion: Mapped[str] = mapped_column(String(60), nullable=False)


class Cobertura(Base):
    """Cobertura dentro de un ramo contable.

    Attributes:
        ramo_contable: Ramo contable (Accounting line)
        codigo: Código de cobertura (Coverage code, e.g. "003")
        descripcion: Descripción (Description)
        in_valida_monto_sin: "S" si el ajuste se limita a la suma asegurada
            ("S" when adjustments are capped by the insured sum)
    """

    __tablename__ = "coberturas"

    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    codigo: Mapped[str] = mapped_column(String(3), primary_key=True)
    descripcion: Mapped[str] = mapped_column(String(60), nullable=False)
    in_valida_monto_sin: Mapped[str] = mapped_column(String(1), default="N", nullable=False)


class ProductoCobertura(Base):
    """Atributos de producto de una cobertura por ramo.

    Attributes:
        tipo_producto: Tipo de producto (Product type, "IPS"/"IVS" use a combined sum)
        tipo_siniestro: Tipo de siniestro contable (Claim type for accounting, "01" default)
    """

    __tablename__ = "productos_coberturas"

    ramo: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    cobertura: Mapped[str] = mapped_column(String(3), primary_key=True)
    tipo_producto: Mapped[str | None] = mapped_column(String(3), nullable=True)
    tipo_siniestro: Mapped[str | None] = mapped_column(String(2), nullable=True)


class CoberturaLuc(Base):
    """Prioridad de una cobertura dentro del límite único combinado.

    LUC priority of a coverage. 1 is the highest priority.
    """

    __tablename__ = "coberturas_luc"

    ramo: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    cobertura: Mapped[str] = mapped_column(String(3), primary_key=True)
    prioridad: Mapped[int] = mapped_column(Integer, nullable=False)


class CausaCobertura(Base):
    """Causa de fallecimiento aceptada por una cobertura de vida."""

    __tablename__ = "causas_coberturas"

    ramo: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    cobertura: Mapped[str] = mapped_column(String(3), primary_key=True)
    cd_causa: Mapped[str] = mapped_column(String(10), primary_key=True)


class RamoComponente(Base):
    """Componente contable de un tipo de movimiento.

    The 4th character of ``componente`` tells the sign it applies to:
    "P" positive amounts, "N" negative amounts.

    Attributes:
        codificacion: "D" debe o "H" haber (Debit or credit side)
        cuenta_contable: Cuenta contable (Ledger account)
    """

    __tablename__ = "ramos_componentes"

    ramo: Mapped[int] = mapped_column(Integer, primary_key=True)
    ramo_contable: Mapped[int] = mapped_column(Integer, primary_key=True)
    tp_movimiento: Mapped[str] = mapped_column(String(2), primary_key=True)
    tipo_siniestro: Mapped[str] = mapped_column(String(2), primary_key=True)
    componente: Mapped[str] = mapped_column(String(10), primary_key=True)
    codificacion: Mapped[str] = mapped_column(String(1), nullable=False)
    cuenta_contable: Mapped[str | None] = mapped_column(String(30), nullable=True)


class CatalogoGeneral(Base):
    """Catálogo general. El código 0 guarda el nombre de la conexión."""

    __tablename__ = "catalogo_general"

    codigo: Mapped[int] = mapped_column(Integer, primary_key=True)
    nom_concepto: Mapped[str] = mapped_column(String(100), nullable=False)


class CodigoReferencia(Base):
    """Código de referencia por dominio.

    Domains used: "0STATSIN" (claim status descriptions) and "FACTMAXIND"
    (maximum indemnification factor per ramo).
    """

    __tablename__ = "codigos_referencia"

    dominio: Mapped[str] = mapped_column(String(20), primary_key=True)
    valor: Mapped[str] = mapped_column(String(20), primary_key=True)
    descripcion: Mapped[str] = mapped_column(String(100), nullable=False)
