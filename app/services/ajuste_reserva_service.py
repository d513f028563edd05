"""Servicio de ajuste de reserva: validación y aplicación de ajustes.

Reserve Adjustment Service. Validates requested reserve amounts against
balances, insured sums and the line specific rules, and applies them as
one movement, one coverage movement and its accounting entries per
coverage. Routers own the transaction: on failure nothing is flushed and
the router rolls back.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalogo import Cobertura, ProductoCobertura, RamoComponente
from app.models.movimiento import MovimientoContable, MovimientoCobertura, MovimientoSiniestro
from app.models.reserva import ReservaCobertura
from app.models.siniestro import CertificadoSiniestro, Siniestro
from app.repositories.catalogo_repository import catalogo_repository
from app.repositories.movimiento_repository import movimiento_repository
from app.repositories.poliza_repository import CertificadoKey, poliza_repository
from app.repositories.reserva_repository import reserva_repository
from app.repositories.siniestro_repository import siniestro_repository
from app.schemas.siniestro import (
    AjustePriorizadoResponse,
    AjusteReservaRequest,
    AplicarAjustesResponse,
    PrioridadResponse,
    SumaAseguradaInfo,
    ValidacionResponse,
)
from app.services.prioridad_service import MARCA_REDUCIDA, RAMO_LUC, AjustePrioridad, prioridad_service
from app.services.saldo_service import saldo_service
from app.services.siniestro_service import STATUS_ARP, certificado_key, siniestro_service
from app.services.suma_asegurada_service import suma_asegurada_service
from app.utils.exceptions import BadRequestError, BusinessError
from app.utils.money import to_decimal

STATUS_LIQUIDADO: int = 24
STATUS_RECHAZADO: int = 25

TIPO_AJUSTE: str = "RA"
TIPO_LIQUIDACION: str = "RL"
TIPO_RECHAZO: str = "RX"

DESCRIPCION_TIPO_MOVIMIENTO: dict[str, str] = {
    TIPO_AJUSTE: "Ajuste de Reserva",
    TIPO_LIQUIDACION: "Liquidación",
    TIPO_RECHAZO: "Rechazo",
}

MONEDA_DEFAULT: str = "01"
MONEDA_ARP: str = "CO"
TIPO_SINIESTRO_DEFAULT: str = "01"

# Cobertura ACP: limitada por los días parciales (ACP coverage, limited by partial days)
RAMO_CONTABLE_ACP: int = 3
COBERTURA_ACP: str = "003"


def tipo_movimiento(st_siniestro: int) -> str:
    """Tipo de movimiento según el estatus del siniestro (Movement type for a claim status)."""
    if st_siniestro == STATUS_LIQUIDADO:
        return TIPO_LIQUIDACION
    if st_siniestro == STATUS_RECHAZADO:
        return TIPO_RECHAZO
    return TIPO_AJUSTE


@dataclass
class AjusteValidado:
    """Ajuste que pasó todas las validaciones (Adjustment that passed every check)."""

    ramo_contable: int
    cobertura: str
    monto_ajuste: Decimal
    saldo: Decimal
    suma: SumaAseguradaInfo
    reserva: ReservaCobertura


class AjusteReservaService:
    """Validación y aplicación de ajustes de reserva."""

    async def _validar(
        self,
        db: AsyncSession,
        sini: Siniestro,
        key: CertificadoKey,
        ramo_contable: int,
        cobertura: str,
        monto: Decimal | None,
        saldo: Decimal,
        reducida: bool = False,
    ) -> SumaAseguradaInfo:
        """Aplica las reglas de validación de un ajuste en orden.

        Run the adjustment rules in order and stop at the first failure.

        Args:
            db: Sesión asíncrona (Async database session)
            sini: Siniestro (Claim)
            key: Claves del certificado (Policy certificate keys)
            ramo_contable: Ramo contable (Accounting line)
            cobertura: Cobertura (Coverage code)
            monto: Monto ajustado solicitado (Requested reserve amount)
            saldo: Saldo actual de la cobertura (Current coverage balance)
            reducida: Reducida por la priorización LUC; no aplican las reglas de
                captura de monto cero o igual al saldo (Reduced by the LUC
                prioritization, skips the zero and equal-to-balance input rules)

        Returns:
            SumaAseguradaInfo: Suma asegurada usada (Insured sum used by the checks)

        Raises:
            BusinessError: Regla incumplida, con su mensaje (Failed rule and its message)
        """
        if monto is None:
            raise BusinessError("Debe indicar Monto Ajustado a la Cobertura")
        if sini.st_siniestro == STATUS_ARP and monto < 0:
            raise BusinessError("No es permitido ingresar montos negativos en el ajuste")
        if not reducida and monto == 0:
            raise BusinessError("El Monto a ajustar es igual a cero")
        if not reducida and monto == saldo:
            raise BusinessError(
                f"Monto de Ajuste debe ser diferente al saldo. Monto Ajustado: {to_decimal(monto)} "
                f"Saldo: {to_decimal(saldo)}"
            )

        info: SumaAseguradaInfo = await suma_asegurada_service.obtener_suma_asegurada(
            db, key, sini.fe_ocurrencia, ramo_contable, cobertura
        )
        suma: Decimal = info.suma_asegurada
        if suma == 0:
            raise BusinessError("Monto de suma asegurada es igual a cero")

        cob: Cobertura | None = await catalogo_repository.get_cobertura(db, ramo_contable, cobertura)
        if cob is None:
            raise BusinessError("Cobertura no encontrada")

        if cob.in_valida_monto_sin == "S" and sini.st_siniestro != STATUS_ARP:
            factor: Decimal = await catalogo_repository.get_factor_max_indemnizacion(db, key.ramo)
            limite: Decimal = to_decimal(suma * factor)
            if monto > limite:
                raise BusinessError(
                    f"Monto de la reserva debe ser menor o igual que la suma asegurada que es de {limite}"
                )

        if ramo_contable == RAMO_CONTABLE_ACP and cobertura == COBERTURA_ACP:
            dias: int = await siniestro_repository.get_dias_parcial(db, sini.sucursal, sini.numero)
            if monto > suma / Decimal(7) * Decimal(dias):
                raise BusinessError("El Monto de Reserva mayor a la Suma Asegurada X # dias parcial")

        if key.ramo == RAMO_LUC and sini.st_siniestro != STATUS_ARP and monto > 0:
            pagos: Decimal = await saldo_service.obtener_pagos(db, sini.sucursal, sini.numero, ramo_contable, cobertura)
            disponible: Decimal = to_decimal(suma - pagos - saldo)
            if monto - saldo > disponible:
                raise BusinessError(
                    f"El monto del ajuste excede la Suma Asegurada disponible de la cobertura. Disponible: {disponible}"
                )

        if key.ramo == RAMO_LUC:
            causas: list[str] = await catalogo_repository.get_causas(db, key.ramo, ramo_contable, cobertura)
            if causas and sini.cd_causa not in causas:
                raise BusinessError("La causa del siniestro no corresponde a la cobertura")

        return info

    async def validar_ajuste(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ramo_contable: int,
        cobertura: str,
        monto_ajuste: Decimal | None,
    ) -> ValidacionResponse:
        """Valida un ajuste sin aplicarlo.

        Validate one adjustment. Business failures come back as
        ``valido=False`` with the rule message.

        Raises:
            NotFoundError: Siniestro o certificado inexistente (Claim or certificate not found)
        """
        sini: Siniestro = await siniestro_service.get_siniestro(db, sucursal, siniestro)
        cert: CertificadoSiniestro = await siniestro_service.get_certificado(db, sucursal, siniestro)
        saldo: Decimal = await saldo_service.obtener_saldo(db, sucursal, siniestro, ramo_contable, cobertura)

        try:
            info: SumaAseguradaInfo = await self._validar(
                db, sini, certificado_key(cert), ramo_contable, cobertura, monto_ajuste, saldo
            )
        except BusinessError as exc:
            return ValidacionResponse(valido=False, mensaje=exc.detail, saldo=saldo)
        return ValidacionResponse(valido=True, saldo=saldo, suma_asegurada=info.suma_asegurada)

    async def _build_filas(
        self,
        db: AsyncSession,
        sini: Siniestro,
        key: CertificadoKey,
        ajustes: list[AjusteReservaRequest],
    ) -> list[AjustePrioridad]:
        filas: list[AjustePrioridad] = []
        for ajuste in ajustes:
            filas.append(AjustePrioridad(
                ramo_contable=ajuste.ramo_contable,
                cobertura=ajuste.cobertura,
                prioridad=await catalogo_repository.get_prioridad_luc(
                    db, key.ramo, ajuste.ramo_contable, ajuste.cobertura
                ),
                saldo=await saldo_service.obtener_saldo(
                    db, sini.sucursal, sini.numero, ajuste.ramo_contable, ajuste.cobertura
                ),
                monto_ajuste=ajuste.monto_ajuste,
                marcar=ajuste.marcar,
            ))
        return filas

    async def aplicar_ajustes(
        self,
        db: AsyncSession,
        sucursal: int,
        siniestro: int,
        ajustes: list[AjusteReservaRequest],
        analista: str,
    ) -> AplicarAjustesResponse:
        """Aplica los ajustes de reserva marcados.

        Apply every marked adjustment of a claim. On the LUC line the rows
        are prioritized first. All rows are validated before anything is
        written; one failure reports every error and writes nothing.

        Args:
            db: Sesión asíncrona (Async database session)
            sucursal: Sucursal (Claim branch)
            siniestro: Número de siniestro (Claim number)
            ajustes: Ajustes solicitados (Requested adjustments)
            analista: Usuario que aplica (User recorded as analyst)

        Returns:
            AplicarAjustesResponse: exito False con errores, o el mensaje final
                (Failure with errors, or the success message)

        Raises:
            BadRequestError: Sin ajustes, coberturas duplicadas o sin filas marcadas
                (No adjustments, duplicated coverages or none marked)
            NotFoundError: Siniestro o certificado inexistente (Claim or certificate not found)
        """
        if not ajustes:
            raise BadRequestError("Se debe validar los Ajustes, previamente")

        repeticiones: Counter[tuple[int, str]] = Counter((a.ramo_contable, a.cobertura) for a in ajustes)
        duplicadas: list[str] = sorted(cobertura for (_, cobertura), veces in repeticiones.items() if veces > 1)
        if duplicadas:
            raise BadRequestError(f"Cobertura duplicada en los ajustes: {', '.join(duplicadas)}")

        sini: Siniestro = await siniestro_service.get_siniestro(db, sucursal, siniestro)
        cert: CertificadoSiniestro = await siniestro_service.get_certificado(db, sucursal, siniestro)
        key: CertificadoKey = certificado_key(cert)

        filas: list[AjustePrioridad] = await self._build_filas(db, sini, key, ajustes)
        if key.ramo == RAMO_LUC:
            await prioridad_service.validar_ajustes_prioridad(db, key, sini.fe_ocurrencia, filas)

        marcadas: list[AjustePrioridad] = [fila for fila in filas if fila.marcar]
        if not marcadas:
            raise BadRequestError("No existen ajustes de reservar por aplicar.")

        errores: list[str] = []
        validados: list[AjusteValidado] = []
        for fila in marcadas:
            try:
                info: SumaAseguradaInfo = await self._validar(
                    db, sini, key, fila.ramo_contable, fila.cobertura, fila.monto_ajuste, fila.saldo,
                    reducida=fila.marca == MARCA_REDUCIDA,
                )
                reserva: ReservaCobertura | None = await reserva_repository.get_reserva(
                    db, sini.sucursal, sini.numero, fila.ramo_contable, fila.cobertura
                )
                if reserva is None:
                    raise BusinessError("Reserva de cobertura no encontrada")
            except BusinessError as exc:
                errores.append(f"Error en cobertura {fila.cobertura}: {exc.detail}")
                continue
            validados.append(AjusteValidado(
                ramo_contable=fila.ramo_contable,
                cobertura=fila.cobertura,
                monto_ajuste=fila.monto_ajuste,
                saldo=fila.saldo,
                suma=info,
                reserva=reserva,
            ))

        procesadas: list[AjustePriorizadoResponse] = [fila.to_response() for fila in filas]
        if errores:
            return AplicarAjustesResponse(
                exito=False,
                mensaje="No se aplicaron los ajustes de reserva.",
                errores=errores,
                ajustes=procesadas,
            )

        tipo: str = tipo_movimiento(sini.st_siniestro)
        for validado in validados:
            await self._registrar_movimiento(db, sini, key, validado, tipo, analista)

        return AplicarAjustesResponse(
            exito=True,
            mensaje=f"Se realizó el movimiento de {DESCRIPCION_TIPO_MOVIMIENTO[tipo]} correctamente.",
            ajustes=procesadas,
        )

    async def _registrar_movimiento(
        self,
        db: AsyncSession,
        sini: Siniestro,
        key: CertificadoKey,
        ajuste: AjusteValidado,
        tipo: str,
        analista: str,
    ) -> None:
        """Escribe el movimiento, el movimiento por cobertura, los asientos y actualiza la reserva."""
        hoy: date = date.today()
        monto: Decimal = to_decimal(ajuste.monto_ajuste - ajuste.saldo)
        nu_movimiento: int = await movimiento_repository.get_max_nu_movimiento(db, sini.sucursal, sini.numero) + 1
        es_arp: bool = sini.st_siniestro == STATUS_ARP
        moneda: str = await poliza_repository.get_moneda(db, key.sucursal, key.ramo, key.poliza) or MONEDA_DEFAULT

        movimiento = MovimientoSiniestro(
            sucursal=sini.sucursal,
            siniestro=sini.numero,
            nu_movimiento=nu_movimiento,
            fe_movimiento=hoy,
            tp_movimiento=tipo,
            analista=analista,
            mt_movimiento=monto,
            cd_moneda=moneda,
            ramo_contable=ajuste.ramo_contable,
            cobertura=ajuste.cobertura,
            aviso_aceptado=MONEDA_ARP if es_arp else None,
        )
        movimiento_cobertura = MovimientoCobertura(
            sucursal=sini.sucursal,
            siniestro=sini.numero,
            nu_movimiento=nu_movimiento,
            ramo_contable=ajuste.ramo_contable,
            cobertura=ajuste.cobertura,
            sucursal_poliza=key.sucursal,
            ramo_poliza=key.ramo,
            poliza=key.poliza,
            certificado=key.certificado,
            tp_movimiento=tipo,
            fe_movimiento=hoy,
            mt_movimiento=monto,
            cd_moneda=MONEDA_ARP if es_arp else MONEDA_DEFAULT,
        )
        asientos: list[MovimientoContable] = await self._build_asientos(
            db, sini, key, ajuste, tipo, nu_movimiento, monto, hoy
        )
        await movimiento_repository.add_movimiento(db, movimiento, movimiento_cobertura, asientos)

        ajuste.reserva.mt_ajustado = to_decimal(ajuste.reserva.mt_ajustado) + monto
        ajuste.reserva.fe_efectiva = ajuste.suma.fe_efectiva
        await db.flush()

    async def _build_asientos(
        self,
        db: AsyncSession,
        sini: Siniestro,
        key: CertificadoKey,
        ajuste: AjusteValidado,
        tipo: str,
        nu_movimiento: int,
        monto: Decimal,
        hoy: date,
    ) -> list[MovimientoContable]:
        """Líneas del asiento contable de un movimiento.

        One line per accounting component configured for the movement. The
        components are chosen by the sign of the amount; "D" components
        carry the absolute amount on the debit side and "H" ones on the
        credit side. Without configured components a single line is written,
        credit for increases and debit for decreases.
        """
        producto: ProductoCobertura | None = await catalogo_repository.get_producto(
            db, key.ramo, ajuste.ramo_contable, ajuste.cobertura
        )
        tipo_siniestro: str = (producto.tipo_siniestro if producto else None) or TIPO_SINIESTRO_DEFAULT
        signo: str = "P" if monto > 0 else "N"
        componentes: Sequence[RamoComponente] = await catalogo_repository.get_componentes(
            db, key.ramo, ajuste.ramo_contable, tipo, tipo_siniestro, ajuste.cobertura, signo
        )
        nu_asiento: int = await movimiento_repository.get_max_nu_asiento(db, sini.sucursal, sini.numero) + 1
        importe: Decimal = abs(monto)
        cero: Decimal = Decimal("0.00")

        lineas: list[tuple[str, str | None, Decimal, Decimal]] = [
            (
                componente.componente,
                componente.cuenta_contable,
                importe if componente.codificacion == "D" else cero,
                importe if componente.codificacion == "H" else cero,
            )
            for componente in componentes
        ]
        if not lineas:
            lineas = [(
                f"{ajuste.cobertura}{signo}",
                None,
                importe if monto < 0 else cero,
                importe if monto > 0 else cero,
            )]

        return [
            MovimientoContable(
                sucursal=sini.sucursal,
                siniestro=sini.numero,
                nu_asiento=nu_asiento,
                nu_movtocon=index + 1,
                nu_movimiento=nu_movimiento,
                tp_movimiento=tipo,
                fe_movimiento=hoy,
                compania=1,
                ramo_poliza=key.ramo,
                poliza=key.poliza,
                certificado=key.certificado,
                ramo_contable=ajuste.ramo_contable,
                cobertura=ajuste.cobertura,
                tipo_siniestro=tipo_siniestro,
                componente=componente,
                cuenta_contable=cuenta,
                mt_debe=debe,
                mt_haber=haber,
                nu_documento=0,
                st_contable="N",
                fe_contable=None,
            )
            for index, (componente, cuenta, debe, haber) in enumerate(lineas)
        ]

    async def priorizar(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
        ajustes: list[AjustePrioridad],
    ) -> PrioridadResponse:
        """Prioriza ajustes LUC de un certificado.

        Fills the missing LUC priorities from the catalog before running the
        prioritization, then stages the result in a new batch.
        """
        for ajuste in ajustes:
            if ajuste.prioridad is None:
                ajuste.prioridad = await catalogo_repository.get_prioridad_luc(
                    db, key.ramo, ajuste.ramo_contable, ajuste.cobertura
                )
        return await prioridad_service.validar_ajustes_prioridad(db, key, fe_ocurrencia, ajustes)


# Instancia única (Singleton instance)
ajuste_reserva_service: AjusteReservaService = AjusteReservaService()
