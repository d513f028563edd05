"""Pruebas de la barra de herramientas (Toolbar info tests)."""

from httpx import AsyncClient

from app.models import CatalogoGeneral
from tests.conftest import auth_header


class TestSystemInfo:
    async def test_connection_name(self, client: AsyncClient, db, consulta_token):
        db.add(CatalogoGeneral(codigo=0, nom_concepto="SINIESTROS PRODUCCION"))
        await db.commit()

        res = await client.get("/api/siniestros/system-info", headers=auth_header(consulta_token))
        assert res.status_code == 200
        data = res.json()
        assert data["nombre_conexion"] == "SINIESTROS PRODUCCION"
        assert data["usuario"] == "consulta"
        assert data["fecha_hora"]

    async def test_connection_not_identified(self, client: AsyncClient, consulta_token):
        res = await client.get("/api/siniestros/system-info", headers=auth_header(consulta_token))
        assert res.json()["nombre_conexion"] == "CONNECTION NOT IDENTIFIED"
