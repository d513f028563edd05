"""Pruebas de validación de un ajuste de reserva.

Single adjustment validation tests. Business failures come back as
200 with valido=false and the rule message.
"""

from decimal import Decimal

from httpx import AsyncClient

from app.models import CausaCobertura, Cobertura, CodigoReferencia, RiesgoCubierto, Siniestro, SiniestroAcp
from tests.conftest import CERTIFICADO, FE_EFECTIVA, POLIZA, RAMO_LUC, SINIESTRO, SUCURSAL, auth_header

API = "/api/siniestros"


def _riesgo(ramo_contable: int, cobertura: str, suma: str) -> RiesgoCubierto:
    return RiesgoCubierto(
        sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
        ramo_contable=ramo_contable, cobertura=cobertura, fe_efectiva=FE_EFECTIVA,
        mt_suma_asegurada=Decimal(suma), cd_plan="A",
    )


async def _validar(client: AsyncClient, token: str, cobertura: str, monto, ramo_contable: int = 10) -> dict:
    res = await client.post(
        f"{API}/{SUCURSAL}/{SINIESTRO}/coberturas/{cobertura}/validate",
        json={"ramo_contable": ramo_contable, "monto_ajuste": monto},
        headers=auth_header(token),
    )
    assert res.status_code == 200
    return res.json()


class TestValidarAjuste:
    """Reglas en orden."""

    async def test_valid(self, client: AsyncClient, analista_token, siniestro):
        data = await _validar(client, analista_token, "001", "12000")
        assert data["valido"] is True
        assert Decimal(data["saldo"]) == Decimal("10000")
        assert Decimal(data["suma_asegurada"]) == Decimal("50000")

    async def test_missing_amount(self, client: AsyncClient, analista_token, siniestro):
        data = await _validar(client, analista_token, "001", None)
        assert data["valido"] is False
        assert data["mensaje"] == "Debe indicar Monto Ajustado a la Cobertura"

    async def test_zero_amount(self, client: AsyncClient, analista_token, siniestro):
        data = await _validar(client, analista_token, "001", "0")
        assert data["mensaje"] == "El Monto a ajustar es igual a cero"

    async def test_equal_to_balance(self, client: AsyncClient, analista_token, siniestro):
        data = await _validar(client, analista_token, "001", "10000")
        assert data["valido"] is False
        assert data["mensaje"].startswith("Monto de Ajuste debe ser diferente al saldo")

    async def test_over_insured_sum(self, client: AsyncClient, analista_token, siniestro):
        """001 valida el monto contra la suma asegurada por el factor."""
        data = await _validar(client, analista_token, "001", "60000")
        assert data["mensaje"] == (
            "Monto de la reserva debe ser menor o igual que la suma asegurada que es de 50000.00"
        )

    async def test_luc_available_sum(self, client: AsyncClient, analista_token, siniestro):
        """002 no valida contra la suma, pero en LUC se limita a lo disponible."""
        data = await _validar(client, analista_token, "002", "60000")
        assert data["valido"] is False
        assert data["mensaje"].startswith("El monto del ajuste excede la Suma Asegurada disponible")
        assert "45000.00" in data["mensaje"]

    async def test_cause_mismatch(self, client: AsyncClient, db, analista_token, siniestro):
        """Cobertura con causas configuradas y causa del siniestro distinta."""
        db.add(CausaCobertura(ramo=RAMO_LUC, ramo_contable=10, cobertura="001", cd_causa="C01"))
        await db.commit()

        data = await _validar(client, analista_token, "001", "12000")
        assert data["mensaje"] == "La causa del siniestro no corresponde a la cobertura"

    async def test_cause_match(self, client: AsyncClient, db, analista_token, siniestro: Siniestro):
        db.add(CausaCobertura(ramo=RAMO_LUC, ramo_contable=10, cobertura="001", cd_causa="C01"))
        siniestro.cd_causa = "C01"
        await db.commit()

        data = await _validar(client, analista_token, "001", "12000")
        assert data["valido"] is True

    async def test_negative_amount_arp(self, client: AsyncClient, db, analista_token, siniestro: Siniestro):
        """En estatus ARP no se permiten montos negativos."""
        siniestro.st_siniestro = 26
        await db.commit()

        data = await _validar(client, analista_token, "001", "-100")
        assert data["mensaje"] == "No es permitido ingresar montos negativos en el ajuste"

    async def test_insured_sum_not_found(self, client: AsyncClient, analista_token, siniestro):
        """Cobertura sin riesgo cubierto."""
        res = await client.post(
            f"{API}/{SUCURSAL}/{SINIESTRO}/coberturas/009/validate",
            json={"ramo_contable": 10, "monto_ajuste": "100"},
            headers=auth_header(analista_token),
        )
        assert res.json()["mensaje"] == "2 - Error, al obtener la suma asegurada."

    async def test_duplicated_insured_sum(self, client: AsyncClient, db, analista_token, siniestro):
        """Dos riesgos vigentes en la misma fecha efectiva."""
        db.add(RiesgoCubierto(
            sucursal=SUCURSAL, ramo=RAMO_LUC, poliza=POLIZA, certificado=CERTIFICADO,
            ramo_contable=10, cobertura="001", fe_efectiva=FE_EFECTIVA,
            mt_suma_asegurada=Decimal("70000"), cd_plan="B",
        ))
        await db.commit()

        data = await _validar(client, analista_token, "001", "12000")
        assert data["mensaje"] == (
            "2 - Error, se encontró mas de un registro para obtener la suma asegurada."
        )

    async def test_claim_not_found(self, client: AsyncClient, analista_token, siniestro):
        res = await client.post(
            f"{API}/{SUCURSAL}/9999/coberturas/001/validate",
            json={"ramo_contable": 10, "monto_ajuste": "100"},
            headers=auth_header(analista_token),
        )
        assert res.status_code == 404

    async def test_read_only_user_forbidden(self, client: AsyncClient, consulta_token, siniestro):
        res = await client.post(
            f"{API}/{SUCURSAL}/{SINIESTRO}/coberturas/001/validate",
            json={"ramo_contable": 10, "monto_ajuste": "100"},
            headers=auth_header(consulta_token),
        )
        assert res.status_code == 403


class TestLimitesSumaAsegurada:
    """Límites derivados de la suma asegurada."""

    async def test_max_indemnification_factor(self, client: AsyncClient, db, analista_token, siniestro):
        """El límite de 001 es la suma por el factor del ramo."""
        db.add(CodigoReferencia(dominio="FACTMAXIND", valor=str(RAMO_LUC), descripcion="0.50"))
        await db.commit()

        data = await _validar(client, analista_token, "001", "30000")
        assert data["mensaje"] == (
            "Monto de la reserva debe ser menor o igual que la suma asegurada que es de 25000.00"
        )

    async def test_zero_insured_sum(self, client: AsyncClient, db, analista_token, siniestro):
        db.add(_riesgo(10, "004", "0"))
        await db.commit()

        data = await _validar(client, analista_token, "004", "100")
        assert data["valido"] is False
        assert data["mensaje"] == "Monto de suma asegurada es igual a cero"

    async def test_acp_partial_days(self, client: AsyncClient, db, analista_token, siniestro):
        """ACP: 7000 / 7 x 3 días = 3000."""
        db.add_all([
            Cobertura(ramo_contable=3, codigo="003", descripcion="ACCIDENTES PERSONALES", in_valida_monto_sin="N"),
            _riesgo(3, "003", "7000"),
            SiniestroAcp(sucursal=SUCURSAL, siniestro=SINIESTRO, nu_dias_parcial=3),
        ])
        await db.commit()

        data = await _validar(client, analista_token, "003", "3500", ramo_contable=3)
        assert data["mensaje"] == "El Monto de Reserva mayor a la Suma Asegurada X # dias parcial"

        data = await _validar(client, analista_token, "003", "3000", ramo_contable=3)
        assert data["valido"] is True

    async def test_acp_default_days(self, client: AsyncClient, db, analista_token, siniestro):
        """Sin registro ACP se usan 365 días."""
        db.add_all([
            Cobertura(ramo_contable=3, codigo="003", descripcion="ACCIDENTES PERSONALES", in_valida_monto_sin="N"),
            _riesgo(3, "003", "7000"),
        ])
        await db.commit()

        data = await _validar(client, analista_token, "003", "5000", ramo_contable=3)
        assert data["valido"] is True
