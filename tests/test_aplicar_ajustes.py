"""Pruebas de aplicación de ajustes de reserva.

Apply-adjustments tests. Movements, coverage movements, accounting
entries and reserve updates; all-or-nothing behavior on failures.
"""

from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models import (
    AjusteRemesa, MovimientoCobertura, MovimientoContable, MovimientoSiniestro, RamoComponente, ReservaCobertura,
    Siniestro,
)
from tests.conftest import CERTIFICADO, FE_OCURRENCIA, POLIZA, RAMO_LUC, SINIESTRO, SUCURSAL, auth_header

API = "/api/siniestros"
URL = f"{API}/{SUCURSAL}/{SINIESTRO}/ajuste-reserva"


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar()


class TestAplicarAjustes:
    """Aplicación exitosa."""

    async def test_apply_increase(self, client: AsyncClient, db, analista_token, siniestro):
        """Incremento de 10000 a 12000 en la cobertura 001."""
        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"}],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["exito"] is True
        assert data["mensaje"] == "Se realizó el movimiento de Ajuste de Reserva correctamente."

        movimiento = (await db.execute(select(MovimientoSiniestro))).scalar_one()
        assert movimiento.nu_movimiento == 3
        assert movimiento.tp_movimiento == "RA"
        assert movimiento.analista == "jperez"
        assert movimiento.mt_movimiento == Decimal("2000")

        reserva = await db.get(ReservaCobertura, (SUCURSAL, SINIESTRO, 10, "001"))
        await db.refresh(reserva)
        assert reserva.mt_ajustado == Decimal("2000")

        grid = await client.get(
            f"{API}/coberturas/{SUCURSAL}/{RAMO_LUC}/{SINIESTRO}", headers=auth_header(analista_token)
        )
        saldo = {row["cobertura"]: Decimal(row["saldo"]) for row in grid.json()}
        assert saldo["001"] == Decimal("12000")

    async def test_fallback_accounting_line(self, client: AsyncClient, db, analista_token, siniestro):
        """Sin componentes configurados se escribe una sola línea al haber."""
        await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"}],
            headers=auth_header(analista_token),
        )
        asiento = (await db.execute(select(MovimientoContable))).scalar_one()
        assert asiento.mt_haber == Decimal("2000")
        assert asiento.mt_debe == Decimal("0")
        assert asiento.componente == "001P"

    async def test_components_by_sign(self, client: AsyncClient, db, analista_token, siniestro):
        """Una disminución usa los componentes "N" con su codificación."""
        db.add_all([
            RamoComponente(ramo=RAMO_LUC, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                           componente="001N1", codificacion="D", cuenta_contable="2501"),
            RamoComponente(ramo=RAMO_LUC, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                           componente="001N2", codificacion="H", cuenta_contable="5101"),
            RamoComponente(ramo=RAMO_LUC, ramo_contable=10, tp_movimiento="RA", tipo_siniestro="01",
                           componente="001P1", codificacion="D", cuenta_contable="5101"),
        ])
        await db.commit()

        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "7000"}],
            headers=auth_header(analista_token),
        )
        assert res.json()["exito"] is True

        asientos = (await db.execute(
            select(MovimientoContable).order_by(MovimientoContable.nu_movtocon)
        )).scalars().all()
        assert [a.componente for a in asientos] == ["001N1", "001N2"]
        assert asientos[0].mt_debe == Decimal("3000")
        assert asientos[1].mt_haber == Decimal("3000")
        assert all(a.nu_asiento == 1 for a in asientos)

    async def test_settled_claim_movement_type(self, client: AsyncClient, db, analista_token, siniestro: Siniestro):
        """Estatus 24 genera movimientos de liquidación (RL)."""
        siniestro.st_siniestro = 24
        await db.commit()

        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "4000"}],
            headers=auth_header(analista_token),
        )
        assert res.json()["mensaje"] == "Se realizó el movimiento de Liquidación correctamente."
        movimiento = (await db.execute(select(MovimientoSiniestro))).scalar_one()
        assert movimiento.tp_movimiento == "RL"

    async def test_unmarked_rows_ignored(self, client: AsyncClient, db, analista_token, siniestro):
        """Solo se procesan las filas marcadas."""
        res = await client.post(
            URL,
            json=[
                {"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"},
                {"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "0", "marcar": False},
            ],
            headers=auth_header(analista_token),
        )
        assert res.json()["exito"] is True
        assert await _count(db, MovimientoSiniestro) == 1


class TestAplicarAjustesErrores:
    """Fallos: no se escribe nada."""

    async def test_validation_error_writes_nothing(self, client: AsyncClient, db, analista_token, siniestro):
        """Una fila inválida impide aplicar también las válidas."""
        res = await client.post(
            URL,
            json=[
                {"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"},
                {"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "0"},
            ],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["exito"] is False
        assert data["mensaje"] == "No se aplicaron los ajustes de reserva."
        assert data["errores"] == ["Error en cobertura 002: El Monto a ajustar es igual a cero"]
        assert await _count(db, MovimientoSiniestro) == 0
        assert await _count(db, MovimientoContable) == 0

    async def test_missing_reserve(self, client: AsyncClient, analista_token, siniestro):
        """Cobertura con suma asegurada pero sin reserva."""
        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "009", "monto_ajuste": "100"}],
            headers=auth_header(analista_token),
        )
        assert res.json()["exito"] is False
        assert res.json()["errores"][0].startswith("Error en cobertura 009:")

    async def test_empty_list(self, client: AsyncClient, analista_token, siniestro):
        res = await client.post(URL, json=[], headers=auth_header(analista_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Se debe validar los Ajustes, previamente"

    async def test_nothing_marked(self, client: AsyncClient, analista_token, siniestro):
        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000", "marcar": False}],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "No existen ajustes de reservar por aplicar."

    async def test_coverage_code_too_long(self, client: AsyncClient, analista_token, siniestro):
        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "0001", "monto_ajuste": "12000"}],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Error de validación"

    async def test_read_only_user_forbidden(self, client: AsyncClient, consulta_token, siniestro):
        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"}],
            headers=auth_header(consulta_token),
        )
        assert res.status_code == 403

    async def test_duplicated_coverage(self, client: AsyncClient, db, analista_token, siniestro):
        """La misma cobertura dos veces se rechaza sin escribir."""
        res = await client.post(
            URL,
            json=[
                {"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "6000"},
                {"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "6000"},
            ],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Cobertura duplicada en los ajustes: 002"
        assert await _count(db, MovimientoSiniestro) == 0


class TestAplicarAjustesEstatus:
    """Tipo de movimiento y moneda según el estatus del siniestro."""

    async def test_rejected_claim(self, client: AsyncClient, db, analista_token, siniestro: Siniestro):
        """Estatus 25 genera movimientos de rechazo (RX)."""
        siniestro.st_siniestro = 25
        await db.commit()

        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "4000"}],
            headers=auth_header(analista_token),
        )
        assert res.json()["mensaje"] == "Se realizó el movimiento de Rechazo correctamente."
        movimiento = (await db.execute(select(MovimientoSiniestro))).scalar_one()
        assert movimiento.tp_movimiento == "RX"
        assert movimiento.aviso_aceptado is None

    async def test_arp_claim(self, client: AsyncClient, db, analista_token, siniestro: Siniestro):
        """Estatus 26: aviso aceptado y moneda de la cobertura "CO"."""
        siniestro.st_siniestro = 26
        await db.commit()

        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"}],
            headers=auth_header(analista_token),
        )
        assert res.json()["exito"] is True

        movimiento = (await db.execute(select(MovimientoSiniestro))).scalar_one()
        assert movimiento.aviso_aceptado == "CO"
        assert movimiento.cd_moneda == "01"
        cobertura = (await db.execute(
            select(MovimientoCobertura).where(MovimientoCobertura.nu_movimiento == 3)
        )).scalar_one()
        assert cobertura.cd_moneda == "CO"
        assert cobertura.mt_movimiento == Decimal("2000")


class TestAplicarAjustesLuc:
    """Priorización LUC dentro de la aplicación (35000 disponibles)."""

    async def test_lower_priority_gives_back_whole_reserve(
        self, client: AsyncClient, db, analista_token, siniestro
    ):
        """002 cede toda su reserva a 001 y se escribe como disminución."""
        res = await client.post(
            URL,
            json=[
                {"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "50000"},
                {"ramo_contable": 10, "cobertura": "002", "monto_ajuste": "6000"},
            ],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["exito"] is True
        reducida = next(a for a in data["ajustes"] if a["cobertura"] == "002")
        assert reducida["marca"] == "K"
        assert Decimal(reducida["monto_ajuste"]) == Decimal("0")

        movimientos = (await db.execute(
            select(MovimientoSiniestro).order_by(MovimientoSiniestro.nu_movimiento)
        )).scalars().all()
        assert [(m.cobertura, m.mt_movimiento) for m in movimientos] == [
            ("001", Decimal("40000")),
            ("002", Decimal("-5000")),
        ]

        grid = await client.get(
            f"{API}/coberturas/{SUCURSAL}/{RAMO_LUC}/{SINIESTRO}", headers=auth_header(analista_token)
        )
        saldo = {row["cobertura"]: Decimal(row["saldo"]) for row in grid.json()}
        assert saldo == {"001": Decimal("50000"), "002": Decimal("0")}

    async def test_capped_to_available_sum(self, client: AsyncClient, db, analista_token, siniestro):
        """Sin coberturas menores el incremento se limita a lo disponible."""
        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "50000"}],
            headers=auth_header(analista_token),
        )
        data = res.json()
        assert data["exito"] is True
        assert Decimal(data["ajustes"][0]["monto_ajuste"]) == Decimal("45000")
        assert data["ajustes"][0]["mensaje"] == (
            "El monto de Ajuste ha sobrepasado el monto de Suma Asegurada de la póliza"
        )

        movimiento = (await db.execute(select(MovimientoSiniestro))).scalar_one()
        assert movimiento.mt_movimiento == Decimal("35000")

        staged = (await db.execute(select(AjusteRemesa).where(AjusteRemesa.id_remesa == 1))).scalar_one()
        assert staged.cobertura == "001"
        assert staged.mt_ajuste == Decimal("45000")

    async def test_rejected_when_exhausted(self, client: AsyncClient, db, analista_token, siniestro):
        """Con la suma agotada el incremento se desmarca y no queda nada por aplicar."""
        db.add(AjusteRemesa(
            id_remesa=77777, sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            fe_ocurrencia=FE_OCURRENCIA, prioridad=1, ramo_contable=10, cobertura="001",
            mt_ajuste=Decimal("35000"),
        ))
        await db.commit()

        res = await client.post(
            URL,
            json=[{"ramo_contable": 10, "cobertura": "001", "monto_ajuste": "12000"}],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "No existen ajustes de reservar por aplicar."
        assert await _count(db, MovimientoSiniestro) == 0
        assert await _count(db, AjusteRemesa) == 1
