"""Pruebas de la priorización LUC.

LUC prioritization tests: the pure engine (available sum, ordering,
reduction of lower priorities, exhaustion) and the prioritization
endpoint that stages the result in a new batch.
"""

from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import select

from app.models import AjusteRemesa
from app.repositories.reserva_repository import reserva_repository
from app.services.prioridad_service import (
    MSG_AGOTAMIENTO,
    MSG_SOBREPASA_SUMA,
    AjustePrioridad,
    calcular_saldo_global,
    priorizar_ajustes,
)
from tests.conftest import CERTIFICADO, FE_OCURRENCIA, POLIZA, RAMO_LUC, SUCURSAL, auth_header


def _fila(cobertura: str, prioridad: int | None, saldo: str, monto: str | None) -> AjustePrioridad:
    return AjustePrioridad(
        ramo_contable=10,
        cobertura=cobertura,
        prioridad=prioridad,
        saldo=Decimal(saldo),
        monto_ajuste=Decimal(monto) if monto is not None else None,
    )


class TestSaldoGlobal:
    """Suma disponible del certificado."""

    def test_pending_above_payments(self):
        assert calcular_saldo_global(Decimal("10000"), Decimal("1000"), Decimal("3000")) == Decimal("7000")

    def test_pending_below_payments(self):
        """La reserva pendiente neta se toma en valor absoluto."""
        assert calcular_saldo_global(Decimal("10000"), Decimal("4000"), Decimal("1000")) == Decimal("3000")


class TestPriorizarAjustes:
    """Motor de priorización."""

    def test_all_fit(self):
        p1 = _fila("001", 1, "0", "600")
        p2 = _fila("002", 2, "0", "300")

        restante = priorizar_ajustes([p2, p1], Decimal("1000"))

        assert restante == Decimal("100")
        assert p1.marca == "N" and p2.marca == "N"
        assert p1.monto_ajuste == Decimal("600")
        assert p2.monto_ajuste == Decimal("300")

    def test_decrease_does_not_consume(self):
        """Una disminución se acepta sin tocar la suma disponible."""
        p1 = _fila("001", 1, "500", "200")
        assert priorizar_ajustes([p1], Decimal("0")) == Decimal("0")
        assert p1.monto_ajuste == Decimal("200")
        assert p1.marcar is True

    def test_reduces_lower_priority_and_caps(self):
        """La prioridad 1 toma la reserva de la 2 y se limita a lo disponible."""
        p1 = _fila("001", 1, "0", "800")
        p2 = _fila("002", 2, "200", "200")

        restante = priorizar_ajustes([p1, p2], Decimal("500"))

        assert restante == Decimal("0")
        assert p2.marca == "K"
        assert p2.monto_ajuste == Decimal("0")
        assert p2.marcar is True
        assert p2.mensaje == "Reserva reducida por prioridad de la cobertura 001"
        assert p1.monto_ajuste == Decimal("700")
        assert p1.mensaje == MSG_SOBREPASA_SUMA

    def test_reduction_cancels_lower_increase(self):
        """La menor pierde su incremento; sin cambio respecto al saldo queda desmarcada."""
        p1 = _fila("001", 1, "0", "800")
        p2 = _fila("002", 2, "0", "400")

        restante = priorizar_ajustes([p1, p2], Decimal("500"))

        assert restante == Decimal("0")
        assert p1.monto_ajuste == Decimal("500")
        assert p2.marca == "K"
        assert p2.monto_ajuste == Decimal("0")
        assert p2.marcar is False

    def test_exhausted(self):
        """Sin suma disponible el incremento se rechaza."""
        p1 = _fila("001", 1, "100", "300")

        assert priorizar_ajustes([p1], Decimal("0")) == Decimal("0")
        assert p1.monto_ajuste == Decimal("100")
        assert p1.marcar is False
        assert p1.mensaje == MSG_AGOTAMIENTO

    def test_lower_decrease_counts_first(self):
        """La disminución pedida por la menor cubre el faltante; su monto no sube."""
        p1 = _fila("001", 1, "10000", "12000")
        p2 = _fila("002", 2, "5000", "1000")

        restante = priorizar_ajustes([p1, p2], Decimal("0"))

        assert p2.monto_ajuste == Decimal("1000")
        assert p2.marca == "N"
        assert p2.marcar is True
        assert p1.monto_ajuste == Decimal("12000")
        assert p1.mensaje is None
        assert restante == Decimal("2000")

    def test_lower_decrease_then_reduced(self):
        """Lo que falta tras la disminución pedida se toma del monto pedido, no del saldo."""
        p1 = _fila("001", 1, "0", "3000")
        p2 = _fila("002", 2, "5000", "4000")

        restante = priorizar_ajustes([p1, p2], Decimal("0"))

        assert restante == Decimal("0")
        assert p1.monto_ajuste == Decimal("3000")
        assert p2.marca == "K"
        assert p2.monto_ajuste == Decimal("2000")

    def test_reduced_row_not_reduced_twice(self):
        """Una fila ya reducida no vuelve a ceder reserva."""
        p1 = _fila("001", 1, "0", "1000")
        p2 = _fila("002", 2, "0", "1000")
        p3 = _fila("003", 3, "600", "600")

        restante = priorizar_ajustes([p1, p2, p3], Decimal("500"))

        assert restante == Decimal("0")
        assert p1.monto_ajuste == Decimal("1000")
        assert p3.marca == "K"
        assert p3.monto_ajuste == Decimal("100")
        assert p2.monto_ajuste == Decimal("0")
        assert p2.mensaje == MSG_AGOTAMIENTO
        assert p2.marcar is False

    def test_priority_above_five_not_reduced(self):
        p1 = _fila("001", 1, "0", "100")
        p6 = _fila("006", 6, "500", "500")

        priorizar_ajustes([p1, p6], Decimal("0"))

        assert p6.marca == "N"
        assert p6.monto_ajuste == Decimal("500")
        assert p1.mensaje == MSG_AGOTAMIENTO

    def test_rows_without_priority_untouched(self):
        sin = _fila("050", None, "0", "999999")
        p1 = _fila("001", 1, "0", "100")

        restante = priorizar_ajustes([sin, p1], Decimal("1000"))

        assert restante == Decimal("900")
        assert sin.marca == "S"
        assert sin.monto_ajuste == Decimal("999999")

    def test_unmarked_rows_skipped(self):
        p1 = _fila("001", 1, "0", "700")
        p1.marcar = False

        assert priorizar_ajustes([p1], Decimal("500")) == Decimal("500")
        assert p1.marca == "S"


class TestAjustePrioridadApi:
    """Endpoint de priorización."""

    PARAMS = {
        "sucursal": SUCURSAL,
        "ramo": RAMO_LUC,
        "poliza": POLIZA,
        "certificado": CERTIFICADO,
        "fecha_ocurrencia": FE_OCURRENCIA.isoformat(),
    }

    async def test_prioritize_and_stage(self, client: AsyncClient, db, analista_token, siniestro):
        """Las prioridades faltantes se leen del catálogo y la remesa se guarda."""
        res = await client.post(
            "/api/siniestros/ajuste-prioridad",
            params=self.PARAMS,
            json=[
                {"ramo_contable": 10, "cobertura": "001", "saldo": "10000", "monto_ajuste": "12000"},
                {"ramo_contable": 10, "cobertura": "002", "saldo": "5000", "monto_ajuste": "6000"},
            ],
            headers=auth_header(analista_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["id_remesa"] == 1
        # 35000 disponibles - 2000 - 1000
        assert Decimal(data["saldo_global"]) == Decimal("32000")
        assert [a["prioridad"] for a in data["ajustes"]] == [1, 2]

        staged = (await db.execute(
            select(AjusteRemesa).where(AjusteRemesa.id_remesa == 1).order_by(AjusteRemesa.prioridad)
        )).scalars().all()
        assert [(r.cobertura, r.mt_ajuste) for r in staged] == [
            ("001", Decimal("12000")),
            ("002", Decimal("6000")),
        ]

    async def test_read_only_user_forbidden(self, client: AsyncClient, consulta_token, siniestro):
        res = await client.post(
            "/api/siniestros/ajuste-prioridad",
            params=self.PARAMS,
            json=[],
            headers=auth_header(consulta_token),
        )
        assert res.status_code == 403

    async def test_exhausted_not_staged(self, client: AsyncClient, db, analista_token, siniestro):
        """Con la suma agotada el incremento se rechaza y no se guarda."""
        db.add(AjusteRemesa(
            id_remesa=77777, sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            fe_ocurrencia=FE_OCURRENCIA, prioridad=1, ramo_contable=10, cobertura="001",
            mt_ajuste=Decimal("35000"),
        ))
        await db.commit()

        res = await client.post(
            "/api/siniestros/ajuste-prioridad",
            params=self.PARAMS,
            json=[{"ramo_contable": 10, "cobertura": "001", "saldo": "10000", "monto_ajuste": "12000"}],
            headers=auth_header(analista_token),
        )
        data = res.json()
        assert Decimal(data["saldo_global"]) == Decimal("0")
        ajuste = data["ajustes"][0]
        assert ajuste["mensaje"] == MSG_AGOTAMIENTO
        assert ajuste["marcar"] is False
        assert Decimal(ajuste["monto_ajuste"]) == Decimal("10000")

        staged = (await db.execute(select(AjusteRemesa).where(AjusteRemesa.id_remesa == data["id_remesa"]))).all()
        assert staged == []


class TestIdRemesa:
    """Numeración de remesas."""

    async def test_first_batch(self, db):
        assert await reserva_repository.get_next_id_remesa(db) == 1

    async def test_default_batch_not_counted(self, db):
        db.add(AjusteRemesa(
            id_remesa=77777, sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            fe_ocurrencia=FE_OCURRENCIA, prioridad=1, ramo_contable=10, cobertura="001",
            mt_ajuste=Decimal("100"),
        ))
        await db.commit()

        assert await reserva_repository.get_next_id_remesa(db) == 1

    async def test_skips_default_batch(self, db):
        db.add(AjusteRemesa(
            id_remesa=77776, sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            fe_ocurrencia=FE_OCURRENCIA, prioridad=1, ramo_contable=10, cobertura="001",
            mt_ajuste=Decimal("100"),
        ))
        await db.commit()

        assert await reserva_repository.get_next_id_remesa(db) == 77778
