"""Infraestructura de pruebas: base SQLite en memoria, sesión y cliente httpx.

Test infrastructure. Each test gets a fresh in-memory SQLite database
(aiosqlite, StaticPool) with the full schema, one session shared with the
app through a get_db override, and fixtures for users, catalogs and a LUC
claim ready to be adjusted.

Fixture data is committed: the apply endpoint rolls back the shared
session when validation fails.
"""

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 - registra todos los modelos en la metadata
from app.models import (
    CertificadoSiniestro, Cliente, Cobertura, CoberturaLuc, CodigoReferencia, MovimientoCobertura,
    Poliza, ProductoCobertura, RamoContable, ReservaCobertura, RiesgoCubierto, Role, Siniestro, User,
)
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Siniestro LUC de prueba (Test LUC claim)
SUCURSAL = 1
RAMO_LUC = 13
SINIESTRO = 1001
POLIZA = 500
CERTIFICADO = 1
FE_OCURRENCIA = date(2024, 3, 15)
FE_EFECTIVA = date(2024, 1, 1)
SUMA = Decimal("50000.00")


# ---------------------------------------------------------------------------
# Motor, sesión y cliente (Engine, session, client)
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Motor SQLite en memoria con el esquema creado."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Sesión aislada por prueba."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente de pruebas de FastAPI con la sesión sobrescrita."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Usuarios (Users)
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def roles(db: AsyncSession) -> dict[str, Role]:
    """Los 3 roles: supervisor, analista, consulta."""
    result: dict[str, Role] = {}
    for name, level in [("supervisor", 1), ("analista", 2), ("consulta", 3)]:
        role = Role(name=name, level=level)
        db.add(role)
        result[name] = role
    await db.commit()
    return result


async def _create_user(db: AsyncSession, role: Role, username: str, password: str) -> User:
    user = User(
        role=role,
        username=username,
        full_name=f"Test {username.title()}",
        password_hash=hash_password(password),
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def supervisor_user(db: AsyncSession, roles) -> User:
    return await _create_user(db, roles["supervisor"], "supervisor", "super123!")


@pytest_asyncio.fixture
async def analista_user(db: AsyncSession, roles) -> User:
    return await _create_user(db, roles["analista"], "jperez", "analista123!")


@pytest_asyncio.fixture
async def consulta_user(db: AsyncSession, roles) -> User:
    return await _create_user(db, roles["consulta"], "consulta", "consulta123!")


def make_token(user: User) -> str:
    """Access token JWT de prueba para un usuario."""
    return create_access_token({
        "sub": str(user.id),
        "username": user.username,
        "role": user.role.name,
        "level": user.role.level,
    })


@pytest.fixture
def analista_token(analista_user) -> str:
    return make_token(analista_user)


@pytest.fixture
def consulta_token(consulta_user) -> str:
    return make_token(consulta_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Datos de siniestro (Claim data)
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def catalogos(db: AsyncSession) -> None:
    """Ramo contable 10 con las coberturas 001 (prioridad 1) y 002 (prioridad 2).

    001 valida el monto contra la suma asegurada; 002 no.
    """
    db.add_all([
        RamoContable(codigo=10, descripcion="RESPONSABILIDAD CIVIL LUC"),
        Cobertura(ramo_contable=10, codigo="001", descripcion="DAÑOS A TERCEROS", in_valida_monto_sin="S"),
        Cobertura(ramo_contable=10, codigo="002", descripcion="GASTOS MÉDICOS", in_valida_monto_sin="N"),
        ProductoCobertura(ramo=RAMO_LUC, ramo_contable=10, cobertura="001", tipo_producto="LUC", tipo_siniestro="01"),
        ProductoCobertura(ramo=RAMO_LUC, ramo_contable=10, cobertura="002", tipo_producto="LUC", tipo_siniestro="01"),
        CoberturaLuc(ramo=RAMO_LUC, ramo_contable=10, cobertura="001", prioridad=1),
        CoberturaLuc(ramo=RAMO_LUC, ramo_contable=10, cobertura="002", prioridad=2),
        CodigoReferencia(dominio="0STATSIN", valor="20", descripcion="ABIERTO"),
    ])
    await db.commit()


@pytest_asyncio.fixture
async def siniestro(db: AsyncSession, catalogos) -> Siniestro:
    """Siniestro LUC abierto con reservas de 10000 (001) y 5000 (002)."""
    db.add(Poliza(sucursal=SUCURSAL, ramo=RAMO_LUC, numero=POLIZA, cd_moneda="01"))
    for cobertura in ("001", "002"):
        db.add(RiesgoCubierto(
            sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            ramo_contable=10, cobertura=cobertura, fe_efectiva=FE_EFECTIVA,
            mt_suma_asegurada=SUMA, cd_plan="A",
        ))
    db.add(Cliente(nacionalidad="V", cedula=12345678, nombre="MARIA", apellido="GONZALEZ"))
    sini = Siniestro(
        sucursal=SUCURSAL, numero=SINIESTRO, ramo=RAMO_LUC, fe_ocurrencia=FE_OCURRENCIA,
        st_siniestro=20, nacionalidad="V", cedula=12345678,
    )
    db.add(sini)
    db.add(CertificadoSiniestro(
        sucursal=SUCURSAL, siniestro=SINIESTRO, sucursal_poliza=SUCURSAL, ramo_poliza=RAMO_LUC,
        poliza=POLIZA, certificado=CERTIFICADO, beneficiario="MARIA GONZALEZ",
    ))
    for nu_movimiento, (cobertura, reserva) in enumerate(
        (("001", Decimal("10000.00")), ("002", Decimal("5000.00"))), start=1
    ):
        db.add(ReservaCobertura(
            sucursal=SUCURSAL, siniestro=SINIESTRO, ramo_contable=10, cobertura=cobertura,
            sucursal_poliza=SUCURSAL, ramo_poliza=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            mt_suma_asegurada=SUMA, mt_reserva=reserva,
        ))
        db.add(MovimientoCobertura(
            sucursal=SUCURSAL, siniestro=SINIESTRO, nu_movimiento=nu_movimiento,
            ramo_contable=10, cobertura=cobertura,
            sucursal_poliza=SUCURSAL, ramo_poliza=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            tp_movimiento="RA", fe_movimiento=FE_OCURRENCIA, mt_movimiento=reserva, cd_moneda="01",
        ))
    await db.commit()
    return sini
