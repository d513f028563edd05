"""Paquete de modelos ORM: punto central de importación.

SQLAlchemy ORM models package. Importing from this package registers every
table with the metadata, which create_all, Alembic and the tests rely on.

Modules:
    user: Roles y usuarios (Roles and users)
    token: Refresh tokens
    siniestro: Siniestro, certificado, cliente, ACP (Claim header data)
    poliza: Póliza y riesgos cubiertos (Policy and insured risks)
    catalogo: Catálogos de coberturas y contabilidad (Coverage and accounting catalogs)
    reserva: Reservas por cobertura y remesas (Coverage reserves and batches)
    movimiento: Movimientos, asientos y liquidaciones (Movements, entries, settlements)
"""

from app.models.user import Role, User
from app.models.token import RefreshToken
from app.models.siniestro import Siniestro, CertificadoSiniestro, Cliente, SiniestroAcp
from app.models.poliza import Poliza, RiesgoCubierto, RiesgoCubiertoHistorico
from app.models.catalogo import (
    RamoContable, Cobertura, ProductoCobertura, CoberturaLuc, CausaCobertura,
    RamoComponente, CatalogoGeneral, CodigoReferencia,
)
from app.models.reserva import ReservaCobertura, AjusteRemesa
from app.models.movimiento import MovimientoSiniestro, MovimientoCobertura, MovimientoContable, LiquidacionCobertura

__all__ = [
    "Role", "User", "RefreshToken",
    "Siniestro", "CertificadoSiniestro", "Cliente", "SiniestroAcp",
    "Poliza", "RiesgoCubierto", "RiesgoCubiertoHistorico",
    "RamoContable", "Cobertura", "ProductoCobertura", "CoberturaLuc", "CausaCobertura",
    "RamoComponente", "CatalogoGeneral", "CodigoReferencia",
    "ReservaCobertura", "AjusteRemesa",
    "MovimientoSiniestro", "MovimientoCobertura", "MovimientoContable", "LiquidacionCobertura",
]
