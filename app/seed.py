"""Script de datos iniciales: roles, usuarios, catálogos y un siniestro de ejemplo.

Seed script. Bootstraps the database with the roles, an admin user, the
reference catalogs and one demo LUC claim ready to be adjusted.

Usage:
    python -m app.seed

Creates:
    - 3 roles: supervisor(1), analista(2), consulta(3)
    - 1 usuario supervisor: admin / admin123
    - Catálogos: ramos contables, coberturas, prioridades LUC, referencias
    - 1 siniestro LUC (sucursal 1, ramo 13, siniestro 1001) con dos coberturas
"""

import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from app.database import async_session, engine, Base
from app.models import (
    CatalogoGeneral, CertificadoSiniestro, Cliente, Cobertura, CoberturaLuc, CodigoReferencia,
    MovimientoCobertura, Poliza, ProductoCobertura, RamoComponente, RamoContable,
    ReservaCobertura, RiesgoCubierto, Role, Siniestro, User,
)
from app.utils.password import hash_password


async def seed() -> None:
    """Siembra la base de datos con los datos iniciales.

    Seed the database with initial data. Creates the tables if they do
    not exist, then inserts roles, the admin user, catalogs and the demo
    claim.

    Idempotente: si ya existen roles no hace nada (Skips when roles exist).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Role).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        # Roles (level 1 supervisor ~ 3 consulta)
        roles: dict[str, Role] = {}
        for name, level in (("supervisor", 1), ("analista", 2), ("consulta", 3)):
            role: Role = Role(name=name, level=level)
            db.add(role)
            await db.flush()
            roles[name] = role

        db.add(User(
            role_id=roles["supervisor"].id,
            username="admin",
            full_name="Administrador del Sistema",
            password_hash=hash_password("admin123"),
            is_active=True,
        ))

        # Catálogos (Catalogs)
        db.add(CatalogoGeneral(codigo=0, nom_concepto="SINIESTROS DESARROLLO"))
        db.add_all([
            CodigoReferencia(dominio="0STATSIN", valor="20", descripcion="ABIERTO"),
            CodigoReferencia(dominio="0STATSIN", valor="24", descripcion="LIQUIDADO"),
            CodigoReferencia(dominio="0STATSIN", valor="25", descripcion="RECHAZADO"),
            CodigoReferencia(dominio="0STATSIN", valor="26", descripcion="ARP"),
            CodigoReferencia(dominio="FACTMAXIND", valor="13", descripcion="1.00"),
        ])
        db.add_all([
            RamoContable(codigo=10, descripcion="RESPONSABILIDAD CIVIL LUC"),
            RamoContable(codigo=3, descripcion="ACCIDENTES PERSONALES"),
        ])
        db.add_all([
            Cobertura(ramo_contable=10, codigo="001", descripcion="DAÑOS A TERCEROS", in_valida_monto_sin="S"),
            Cobertura(ramo_contable=10, codigo="002", descripcion="GASTOS MÉDICOS", in_valida_monto_sin="S"),
            Cobertura(ramo_contable=3, codigo="003", descripcion="INCAPACIDAD PARCIAL", in_valida_monto_sin="N"),
        ])
        db.add_all([
            ProductoCobertura(ramo=13, ramo_contable=10, cobertura="001", tipo_producto="LUC", tipo_siniestro="01"),
            ProductoCobertura(ramo=13, ramo_contable=10, cobertura="002", tipo_producto="LUC", tipo_siniestro="01"),
            CoberturaLuc(ramo=13, ramo_contable=10, cobertura="001", prioridad=1),
            CoberturaLuc(ramo=13, ramo_contable=10, cobertura="002", prioridad=2),
        ])
        for cobertura in ("001", "002"):
            db.add_all([
                RamoComponente(ramo=13, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                               componente=f"{cobertura}P1", codificacion="D", cuenta_contable="5101"),
                RamoComponente(ramo=13, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                               componente=f"{cobertura}P2", codificacion="H", cuenta_contable="2501"),
                RamoComponente(ramo=13, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                               componente=f"{cobertura}N1", codificacion="D", cuenta_contable="2501"),
                RamoComponente(ramo=13, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                               componente=f"{cobertura}N2", codificacion="H", cuenta_contable="5101"),
            ])

        # Siniestro de ejemplo (Demo LUC claim)
        fe_ocurrencia: date = date(2026, 3, 15)
        db.add(Poliza(sucursal=1, ramo=13, numero=500, cd_moneda="01"))
        db.add_all([
            RiesgoCubierto(sucursal=1, ramo=13, poliza=500, certificado=1, ramo_contable=10, cobertura=cobertura,
                           fe_efectiva=date(2026, 1, 1), mt_suma_asegurada=Decimal("50000.00"), cd_plan="A")
            for cobertura in ("001", "002")
        ])
        db.add(Cliente(nacionalidad="V", cedula=12345678, nombre="MARIA", apellido="GONZALEZ"))
        db.add(Siniestro(sucursal=1, numero=1001, ramo=13, fe_ocurrencia=fe_ocurrencia,
                         st_siniestro=20, nacionalidad="V", cedula=12345678))
        db.add(CertificadoSiniestro(sucursal=1, siniestro=1001, sucursal_poliza=1, ramo_poliza=13,
                                    poliza=500, certificado=1, beneficiario="MARIA GONZALEZ"))
        for cobertura, reserva in (("001", Decimal("10000.00")), ("002", Decimal("5000.00"))):
            db.add(ReservaCobertura(
                sucursal=1, siniestro=1001, ramo_contable=10, cobertura=cobertura,
                sucursal_poliza=1, ramo_poliza=13, poliza=500, certificado=1,
                mt_suma_asegurada=Decimal("50000.00"), mt_reserva=reserva,
                mt_ajustado=Decimal("0"), mt_liquidado=Decimal("0"),
            ))
            db.add(MovimientoCobertura(
                sucursal=1, siniestro=1001, nu_movimiento=1 if cobertura == "001" else 2,
                ramo_contable=10, cobertura=cobertura,
                sucursal_poliza=1, ramo_poliza=13, poliza=500, certificado=1,
                tp_movimiento="RA", fe_movimiento=fe_ocurrencia, mt_movimiento=reserva, cd_moneda="01",
            ))

        await db.commit()
        print("Seeded: roles, admin user=admin/admin123, demo claim 1-13-1001")


if __name__ == "__main__":
    asyncio.run(seed())
