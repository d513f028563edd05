"""Servicio de información del siniestro y grilla de coberturas.

Claim Info Service. Loads the claim header, the insured, the policy
certificate and the coverage grid shown by the adjustment screen.
"""

from decimal import Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalogo import Cobertura, RamoContable
from app.models.reserva import ReservaCobertura
from app.models.siniestro import CertificadoSiniestro, Cliente, Siniestro
from app.repositories.catalogo_repository import catalogo_repository
from app.repositories.poliza_repository import CertificadoKey
from app.repositories.reserva_repository import REMESA_DEFAULT, reserva_repository
from app.repositories.siniestro_repository import siniestro_repository
from app.schemas.siniestro import (
    AgregarFilaResponse,
    AjusteReservaRequest,
    CoberturaLovItem,
    CoberturaReservaResponse,
    ReservaPendienteResponse,
    SiniestroInfoResponse,
    SumaAseguradaInfo,
)
from app.services.prioridad_service import RAMO_LUC, AjustePrioridad, prioridad_service, priorizar_ajustes
from app.services.saldo_service import saldo_service
from app.services.suma_asegurada_service import suma_asegurada_service
from app.utils.exceptions import NotFoundError, SumaAseguradaError
from app.utils.money import to_decimal
from app.utils.pagination import Page, paginate

STATUS_ARP: int = 26
DESCRIPCION_INVALIDA: str = "INVALIDO"
LONGITUD_NOMBRE_CLIENTE: int = 60


def certificado_key(certificado: CertificadoSiniestro) -> CertificadoKey:
    """Claves de póliza del certificado de un siniestro (Policy keys of a claim certificate)."""
    return CertificadoKey(
        sucursal=certificado.sucursal_poliza,
        ramo=certificado.ramo_poliza,
        poliza=certificado.poliza,
        certificado=certificado.certificado,
    )


def nombre_cliente(cliente: Cliente | None) -> str:
    if cliente is None:
        return ""
    nombre: str = " ".join(part for part in (cliente.nombre, cliente.apellido) if part)
    return nombre[:LONGITUD_NOMBRE_CLIENTE]


class SiniestroService:
    """Consulta del siniestro (Claim lookup)."""

    async def get_siniestro(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo: int | None = None,
    ) -> Siniestro:
        """Obtiene el siniestro o lanza 404.

        Raises:
            NotFoundError: Siniestro inexistente (Claim not found)
        """
        row: Siniestro | None = await siniestro_repository.get_siniestro(db, sucursal, siniestro, ramo)
        if row is None:
            raise NotFoundError("Siniestro no encontrado")
        return row

    async def get_certificado(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
    ) -> CertificadoSiniestro:
        """Certificado del siniestro o 404 (Claim certificate or 404)."""
        row: CertificadoSiniestro | None = await siniestro_repository.get_certificado(db, sucursal, siniestro)
        if row is None:
            raise NotFoundError("Certificado de siniestro no encontrado")
        return row

    async def get_descripcion_status(self, db: AsyncSession, st_siniestro: int) -> str:
        descripcion: str | None = await catalogo_repository.get_descripcion_status(db, st_siniestro)
        if descripcion is None:
            return "ARP" if st_siniestro == STATUS_ARP else ""
        return descripcion

    async def get_siniestro_info(
        self,
        db: AsyncSession,
        sucursal: int,
        ramo: int,
        siniestro: int,
    ) -> SiniestroInfoResponse:
        """Carga la información del siniestro para la pantalla de ajuste.

        Load the claim header, insured name, policy certificate, status
        description, LUC pending reserve, coverage grid and a fresh batch id.

        Args:
            db: Sesión asíncrona (Async database session)
            sucursal: Sucursal (Claim branch)
            ramo: Ramo (Line of business)
            siniestro: Número de siniestro (Claim number)

        Returns:
            SiniestroInfoResponse: Información del siniestro (Claim info)

        Raises:
            NotFoundError: Siniestro o certificado inexistente (Claim or certificate not found)
        """
        sini: Siniestro = await self.get_siniestro(db, sucursal, siniestro, ramo)
        cliente: Cliente | None = await siniestro_repository.get_cliente(db, sini.nacionalidad, sini.cedula)
        cert: CertificadoSiniestro = await self.get_certificado(db, sucursal, siniestro)
        key: CertificadoKey = certificado_key(cert)

        reserva_pendiente: Decimal = Decimal("0")
        if sini.ramo == RAMO_LUC:
            reserva_pendiente = await saldo_service.obtener_reserva_pendiente(db, key)

        return SiniestroInfoResponse(
            sucursal=sini.sucursal,
            ramo=sini.ramo,
            siniestro=sini.numero,
            fe_ocurrencia=sini.fe_ocurrencia,
            st_siniestro=sini.st_siniestro,
            descripcion_status=await self.get_descripcion_status(db, sini.st_siniestro),
            nacionalidad=sini.nacionalidad,
            cedula=sini.cedula,
            nombre_cliente=nombre_cliente(cliente),
            sucursal_poliza=cert.sucursal_poliza,
            ramo_poliza=cert.ramo_poliza,
            poliza=cert.poliza,
            certificado=cert.certificado,
            beneficiario=cert.beneficiario,
            reserva_pendiente=reserva_pendiente,
            id_remesa=await reserva_repository.get_next_id_remesa(db),
            coberturas=await self._build_coberturas(db, sini, key),
        )

    async def get_coberturas_siniestro(
        self,
        db: AsyncSession,
        sucursal: int,
        ramo: int,
        siniestro: int,
    ) -> list[CoberturaReservaResponse]:
        """Grilla de coberturas del siniestro (Coverage grid of a claim)."""
        sini: Siniestro = await self.get_siniestro(db, sucursal, siniestro, ramo)
        cert: CertificadoSiniestro = await self.get_certificado(db, sucursal, siniestro)
        return await self._build_coberturas(db, sini, certificado_key(cert))

    async def _build_coberturas(
        self,
        db: AsyncSession,
        sini: Siniestro,
        key: CertificadoKey,
    ) -> list[CoberturaReservaResponse]:
        reservas: Sequence[ReservaCobertura] = await reserva_repository.get_reservas_siniestro(
            db, sini.sucursal, sini.numero
        )
        coberturas: list[CoberturaReservaResponse] = []
        for reserva in reservas:
            ramo_contable: RamoContable | None = await catalogo_repository.get_ramo_contable(db, reserva.ramo_contable)
            cobertura: Cobertura | None = await catalogo_repository.get_cobertura(
                db, reserva.ramo_contable, reserva.cobertura
            )
            row = CoberturaReservaResponse(
                ramo_contable=reserva.ramo_contable,
                ramo_contable_descripcion=ramo_contable.descripcion if ramo_contable else DESCRIPCION_INVALIDA,
                cobertura=reserva.cobertura,
                cobertura_descripcion=cobertura.descripcion if cobertura else DESCRIPCION_INVALIDA,
                suma_asegurada=to_decimal(reserva.mt_suma_asegurada),
                reserva=to_decimal(reserva.mt_reserva),
                ajustado=to_decimal(reserva.mt_ajustado),
                liquidacion=to_decimal(reserva.mt_liquidado),
                fe_efectiva=reserva.fe_efectiva,
                prioridad=await catalogo_repository.get_prioridad_luc(
                    db, key.ramo, reserva.ramo_contable, reserva.cobertura
                ),
            )
            row.pago = await saldo_service.obtener_pagos(
                db, sini.sucursal, sini.numero, reserva.ramo_contable, reserva.cobertura
            )
            row.rechazo = await saldo_service.obtener_rechazo(
                db, sini.sucursal, sini.numero, reserva.ramo_contable, reserva.cobertura
            )
            row.saldo = await saldo_service.obtener_saldo(
                db, sini.sucursal, sini.numero, reserva.ramo_contable, reserva.cobertura
            )

            if not row.suma_asegurada:
                try:
                    info: SumaAseguradaInfo = await suma_asegurada_service.obtener_suma_asegurada(
                        db, key, sini.fe_ocurrencia, reserva.ramo_contable, reserva.cobertura
                    )
                except SumaAseguradaError as exc:
                    row.mensaje = exc.detail
                else:
                    row.suma_asegurada = info.suma_asegurada
                    row.fe_efectiva = info.fe_efectiva
            coberturas.append(row)
        return coberturas

    async def list_coberturas(
        self,
        db: AsyncSession,
        ramo_contable: int | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> Page:
        """Lista de valores de coberturas paginada (Paginated coverage LOV)."""
        items, total = await paginate(
            db, catalogo_repository.build_lov_query(ramo_contable, search), page, per_page
        )
        return Page.build(
            [CoberturaLovItem.model_validate(item) for item in items], total, page, per_page
        )

    async def get_reserva_pendiente(
        self,
        db: AsyncSession,
        key: CertificadoKey,
    ) -> ReservaPendienteResponse:
        """Reserva pendiente LUC de un certificado (Pending LUC reserve of a certificate)."""
        return ReservaPendienteResponse(
            sucursal=key.sucursal,
            ramo=key.ramo,
            poliza=key.poliza,
            certificado=key.certificado,
            reserva_pendiente=await saldo_service.obtener_reserva_pendiente(db, key),
        )

    async def agregar_fila(
        self,
        db: AsyncSession,
        sucursal: int,
        ramo: int,
        siniestro: int,
        ajustes: list[AjusteReservaRequest] | None = None,
    ) -> AgregarFilaResponse:
        """Recarga la grilla de coberturas.

        Reload the coverage grid. On the LUC line the rows being edited are
        prioritized first against the available insured sum of the
        certificate; nothing is staged, the result is only a snapshot.

        Args:
            db: Sesión asíncrona (Async database session)
            sucursal: Sucursal (Claim branch)
            ramo: Ramo (Line of business)
            siniestro: Número de siniestro (Claim number)
            ajustes: Filas en edición (Rows being edited, optional)

        Returns:
            AgregarFilaResponse: Grilla, suma disponible restante y filas priorizadas
                (Grid, remaining available sum and prioritized rows)
        """
        sini: Siniestro = await self.get_siniestro(db, sucursal, siniestro, ramo)
        cert: CertificadoSiniestro = await self.get_certificado(db, sucursal, siniestro)
        key: CertificadoKey = certificado_key(cert)
        coberturas: list[CoberturaReservaResponse] = await self._build_coberturas(db, sini, key)

        saldo_global: Decimal | None = None
        priorizadas: list[AjustePrioridad] = []
        if ramo == RAMO_LUC:
            saldo_global = await prioridad_service.obtener_saldo_global(db, key, sini.fe_ocurrencia)
            grilla: dict[tuple[int, str], CoberturaReservaResponse] = {
                (row.ramo_contable, row.cobertura): row for row in coberturas
            }
            for ajuste in ajustes or []:
                fila: CoberturaReservaResponse | None = grilla.get((ajuste.ramo_contable, ajuste.cobertura))
                priorizadas.append(AjustePrioridad(
                    ramo_contable=ajuste.ramo_contable,
                    cobertura=ajuste.cobertura,
                    prioridad=fila.prioridad if fila else await catalogo_repository.get_prioridad_luc(
                        db, key.ramo, ajuste.ramo_contable, ajuste.cobertura
                    ),
                    saldo=fila.saldo if fila else Decimal("0"),
                    monto_ajuste=ajuste.monto_ajuste,
                    marcar=ajuste.marcar,
                ))
            saldo_global = to_decimal(priorizar_ajustes(priorizadas, saldo_global))

        return AgregarFilaResponse(
            mensaje="Filas agregadas correctamente",
            coberturas=coberturas,
            saldo_global=saldo_global,
            ajustes=[ajuste.to_response() for ajuste in priorizadas],
        )

    async def eliminar_remesa(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        id_remesa: int | None = None,
    ) -> int:
        """Elimina los ajustes en remesa de una cobertura.

        Delete the staged rows of a coverage from the given batch and from
        the default batch.

        Raises:
            NotFoundError: El certificado no tiene reserva para la cobertura
                (The certificate has no reserve for the coverage)
        """
        if not await reserva_repository.exists_reserva_certificado(db, key, ramo_contable, cobertura):
            raise NotFoundError("No se encontró el registro a eliminar")

        ids: list[int] = [REMESA_DEFAULT]
        if id_remesa is not None and id_remesa != REMESA_DEFAULT:
            ids.insert(0, id_remesa)
        return await reserva_repository.delete_remesa(db, key, ramo_contable, cobertura, ids)


# Instancia única (Singleton instance)
siniestro_service: SiniestroService = SiniestroService()
