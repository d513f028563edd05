"""Servicio de priorización LUC (límite único combinado).

LUC Priority Service. On combined-single-limit lines every coverage of a
certificate draws from one insured sum. Requested increases are granted in
priority order (1 first); when the remaining sum runs out, lower priority
coverages give back their reserve before the request is capped or rejected.

The ordering engine ``priorizar_ajustes`` is a pure function over
``AjustePrioridad`` rows; ``PrioridadService`` feeds it from the database
and stages the result in a remesa.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.poliza_repository import CertificadoKey
from app.repositories.reserva_repository import reserva_repository
from app.schemas.siniestro import AjustePriorizadoResponse, PrioridadResponse
from app.services.saldo_service import RAMO_CONTABLE_LUC, saldo_service
from app.services.suma_asegurada_service import suma_asegurada_service
from app.utils.money import to_decimal

RAMO_LUC: int = 13
# Solo ceden reserva las prioridades hasta este nivel (Lowest priority that can be reduced)
PRIORIDAD_MAXIMA_REDUCIBLE: int = 5

MARCA_PRIORIZADA: str = "P"
MARCA_SIN_PRIORIDAD: str = "S"
MARCA_PROCESADA: str = "N"
MARCA_REDUCIDA: str = "K"

MSG_SOBREPASA_SUMA: str = "El monto de Ajuste ha sobrepasado el monto de Suma Asegurada de la póliza"
MSG_AGOTAMIENTO: str = "Se rechaza por Agotamiento en Suma Asegurada"


@dataclass
class AjustePrioridad:
    """Fila de ajuste sujeta a priorización (Adjustment row under prioritization)."""

    ramo_contable: int
    cobertura: str
    prioridad: int | None
    saldo: Decimal
    monto_ajuste: Decimal | None
    marcar: bool = True
    marca: str = MARCA_SIN_PRIORIDAD
    mensaje: str | None = None

    @property
    def incremento(self) -> Decimal:
        return (self.monto_ajuste or Decimal("0")) - self.saldo

    def to_response(self) -> AjustePriorizadoResponse:
        return AjustePriorizadoResponse(
            ramo_contable=self.ramo_contable,
            cobertura=self.cobertura,
            prioridad=self.prioridad,
            saldo=self.saldo,
            monto_ajuste=self.monto_ajuste,
            marcar=self.marcar,
            marca=self.marca,
            mensaje=self.mensaje,
        )


def calcular_saldo_global(suma_vigente: Decimal, pagos: Decimal, reserva_pendiente: Decimal) -> Decimal:
    """Suma disponible del certificado: suma vigente menos pagos y reserva pendiente neta."""
    return suma_vigente - (pagos + abs(reserva_pendiente - pagos))


def _reducir_menores(
    actual: AjustePrioridad,
    candidatos: list[AjustePrioridad],
    faltante: Decimal,
) -> Decimal:
    """Libera reserva de coberturas de menor prioridad.

    Walks the pending lower priority rows from the lowest priority up. A
    row never goes above the amount it asked for: a requested increase is
    cancelled and a requested decrease counts toward the shortfall first.
    Whatever is still missing is taken from the remaining reserve of the
    row, down to zero.

    Returns:
        Decimal: Monto liberado (Amount freed for the current row)
    """
    menores: list[AjustePrioridad] = [
        a for a in candidatos
        if a is not actual
        and a.marca == MARCA_PRIORIZADA
        and a.prioridad > actual.prioridad
        and a.prioridad <= PRIORIDAD_MAXIMA_REDUCIBLE
    ]
    liberado_total: Decimal = Decimal("0")
    for menor in sorted(menores, key=lambda a: a.prioridad, reverse=True):
        if faltante <= 0:
            break
        cancela_incremento: bool = menor.incremento > 0
        planeado: Decimal = min(menor.saldo, menor.monto_ajuste)
        propio: Decimal = menor.saldo - planeado
        adicional: Decimal = min(max(planeado, Decimal("0")), max(faltante - propio, Decimal("0")))
        if not cancela_incremento and propio + adicional <= 0:
            continue

        menor.monto_ajuste = planeado - adicional
        if cancela_incremento or adicional > 0:
            menor.marca = MARCA_REDUCIDA
            menor.mensaje = f"Reserva reducida por prioridad de la cobertura {actual.cobertura}"
        else:
            menor.marca = MARCA_PROCESADA
        if menor.monto_ajuste == menor.saldo:
            # Sin cambio respecto al saldo no hay movimiento que aplicar
            menor.marcar = False

        liberado: Decimal = propio + adicional
        faltante -= liberado
        liberado_total += liberado
    return liberado_total


def priorizar_ajustes(ajustes: list[AjustePrioridad], saldo_global: Decimal) -> Decimal:
    """Ordena y limita los ajustes LUC según su prioridad.

    Rows without priority are marked "S" and left untouched. Marked rows
    with a priority are processed in ascending priority (1 first); an
    increase is ``monto_ajuste - saldo``:

    - increase <= 0: accepted, the available sum is unchanged;
    - increase fits: accepted, the available sum shrinks;
    - otherwise the shortfall is recovered from lower priority rows,
      their own decreases first (marked "K" when reduced further), then the
      row is accepted, capped to the available sum, or rejected (monto =
      saldo, unmarked) when nothing is left.

    Args:
        ajustes: Filas a priorizar, se modifican en sitio (Rows, mutated in place)
        saldo_global: Suma disponible del certificado (Available insured sum)

    Returns:
        Decimal: Suma disponible restante (Remaining available sum)
    """
    candidatos: list[AjustePrioridad] = []
    for ajuste in ajustes:
        if ajuste.prioridad is None:
            ajuste.marca = MARCA_SIN_PRIORIDAD
        elif ajuste.marcar and ajuste.monto_ajuste is not None:
            ajuste.marca = MARCA_PRIORIZADA
            candidatos.append(ajuste)
    candidatos.sort(key=lambda a: a.prioridad)

    for ajuste in candidatos:
        if ajuste.marca != MARCA_PRIORIZADA:
            continue

        incremento: Decimal = ajuste.incremento
        ajuste.marca = MARCA_PROCESADA
        if incremento <= 0:
            continue
        if incremento <= saldo_global:
            saldo_global -= incremento
            continue

        saldo_global += _reducir_menores(ajuste, candidatos, incremento - saldo_global)

        if incremento <= saldo_global:
            saldo_global -= incremento
        elif saldo_global > 0:
            ajuste.monto_ajuste = ajuste.saldo + saldo_global
            ajuste.mensaje = MSG_SOBREPASA_SUMA
            saldo_global = Decimal("0")
        else:
            ajuste.monto_ajuste = ajuste.saldo
            ajuste.mensaje = MSG_AGOTAMIENTO
            ajuste.marcar = False

    return saldo_global


class PrioridadService:
    """Priorización LUC sobre la base de datos (LUC prioritization against the database)."""

    async def obtener_saldo_global(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
    ) -> Decimal:
        """Suma asegurada disponible del certificado LUC.

        Available insured sum of a LUC certificate: combined single limit
        minus payments and the net pending reserve of ramo contable 10.
        """
        suma_vigente: Decimal = await suma_asegurada_service.obtener_suma_asegurada_vigente(db, key, fe_ocurrencia)
        pagos: Decimal = await saldo_service.obtener_pagos_certificado(db, key, RAMO_CONTABLE_LUC)
        reserva_pendiente: Decimal = await saldo_service.obtener_reserva_pendiente(db, key, RAMO_CONTABLE_LUC)
        return to_decimal(calcular_saldo_global(suma_vigente, pagos, reserva_pendiente))

    async def validar_ajustes_prioridad(
        self,
        db: AsyncSession,
        key: CertificadoKey,
        fe_ocurrencia: date,
        ajustes: list[AjustePrioridad],
    ) -> PrioridadResponse:
        """Prioriza los ajustes y los guarda en una remesa nueva.

        Prioritize the adjustments of a LUC certificate and stage the
        prioritized rows that remain marked in a fresh batch.

        Args:
            db: Sesión asíncrona (Async database session)
            key: Claves del certificado (Policy certificate keys)
            fe_ocurrencia: Fecha de ocurrencia (Claim occurrence date)
            ajustes: Filas a priorizar, se modifican en sitio (Rows, mutated in place)

        Returns:
            PrioridadResponse: Remesa, suma disponible restante y filas (Batch, remaining sum, rows)
        """
        saldo_global: Decimal = await self.obtener_saldo_global(db, key, fe_ocurrencia)
        restante: Decimal = priorizar_ajustes(ajustes, saldo_global)

        id_remesa: int = await reserva_repository.get_next_id_remesa(db)
        rows: list[dict] = [
            {
                "id_remesa": id_remesa,
                "sucursal": key.sucursal,
                "ramo": key.ramo,
                "poliza": key.poliza,
                "certificado": key.certificado,
                "fe_ocurrencia": fe_ocurrencia,
                "prioridad": ajuste.prioridad,
                "ramo_contable": ajuste.ramo_contable,
                "cobertura": ajuste.cobertura,
                "mt_ajuste": to_decimal(ajuste.monto_ajuste),
            }
            for ajuste in ajustes
            if ajuste.marcar and ajuste.prioridad is not None and ajuste.monto_ajuste is not None
        ]
        if rows:
            await reserva_repository.add_ajustes_remesa(db, rows)

        return PrioridadResponse(
            id_remesa=id_remesa,
            saldo_global=to_decimal(restante),
            ajustes=[ajuste.to_response() for ajuste in ajustes],
        )


# Instancia única (Singleton instance)
prioridad_service: PrioridadService = PrioridadService()
