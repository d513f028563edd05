"""Esquemas Pydantic del ajuste de reserva.

Reserve-adjustment Pydantic request/response schema definitions: claim
info, coverage grid rows, adjustment requests, validation and
prioritization results, and the toolbar system info.
Money amounts are Decimal and serialize as strings.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


# --- Coberturas (Coverage grid) ---

class CoberturaReservaResponse(BaseModel):
    """Fila de la grilla de coberturas del siniestro.

    Coverage grid row: one reserve row joined with its catalogs and the
    computed payment, rejection and balance amounts.

    Attributes:
        ramo_contable: Ramo contable (Accounting line)
        ramo_contable_descripcion: Descripción, "INVALIDO" si falta (Description)
        cobertura: Código de cobertura (Coverage code)
        cobertura_descripcion: Descripción, "INVALIDO" si falta (Description)
        suma_asegurada: Suma asegurada, calculada si no está registrada (Insured sum)
        reserva: Reserva inicial (Initial reserve)
        ajustado: Ajustes acumulados (Accumulated adjustments)
        liquidacion: Monto liquidado (Settled amount)
        pago: Pagos efectivos (Effective payments)
        rechazo: Rechazos (Rejected amount)
        saldo: Saldo actual (Current balance)
        prioridad: Prioridad LUC (LUC priority, null when none)
        fe_efectiva: Fecha efectiva de la suma (Insured sum effective date)
        mensaje: Mensaje de la búsqueda de suma asegurada (Lookup message)
    """

    ramo_contable: int
    ramo_contable_descripcion: str
    cobertura: str
    cobertura_descripcion: str
    suma_asegurada: Decimal = Decimal("0")
    reserva: Decimal = Decimal("0")
    ajustado: Decimal = Decimal("0")
    liquidacion: Decimal = Decimal("0")
    pago: Decimal = Decimal("0")
    rechazo: Decimal = Decimal("0")
    saldo: Decimal = Decimal("0")
    prioridad: int | None = None
    fe_efectiva: date | None = None
    mensaje: str | None = None


class CoberturaLovItem(BaseModel):
    """Elemento de la lista de valores de coberturas (Coverage LOV item)."""

    model_config = ConfigDict(from_attributes=True)

    ramo_contable: int
    codigo: str
    descripcion: str


# --- Siniestro (Claim info) ---

class SiniestroInfoResponse(BaseModel):
    """Información completa del siniestro para la pantalla de ajuste.

    Claim information loaded when the adjustment screen opens.

    Attributes:
        sucursal / ramo / siniestro: Claves del siniestro (Claim keys)
        fe_ocurrencia: Fecha de ocurrencia (Occurrence date)
        st_siniestro: Estatus (Status code)
        descripcion_status: Descripción del estatus (Status description)
        nombre_cliente: Nombre del asegurado, máximo 60 caracteres (Insured name)
        sucursal_poliza / ramo_poliza / poliza / certificado: Claves de póliza
        reserva_pendiente: Reserva pendiente LUC del certificado (Pending LUC reserve)
        id_remesa: Nueva remesa para priorizar (Fresh batch id)
        coberturas: Grilla de coberturas (Coverage grid)
    """

    sucursal: int
    ramo: int
    siniestro: int
    fe_ocurrencia: date
    st_siniestro: int
    descripcion_status: str
    nacionalidad: str | None = None
    cedula: int | None = None
    nombre_cliente: str = ""
    sucursal_poliza: int
    ramo_poliza: int
    poliza: int
    certificado: int
    beneficiario: str | None = None
    reserva_pendiente: Decimal = Decimal("0")
    id_remesa: int
    coberturas: list[CoberturaReservaResponse] = []


class ReservaPendienteResponse(BaseModel):
    """Reserva pendiente de un certificado (Pending reserve of a certificate)."""

    sucursal: int
    ramo: int
    poliza: int
    certificado: int
    reserva_pendiente: Decimal


# --- Ajustes (Adjustments) ---

class AjusteReservaRequest(BaseModel):
    """Ajuste solicitado para una cobertura.

    Requested adjustment for one coverage. Balance, insured sum and LUC
    priority are computed by the server.

    Attributes:
        ramo_contable: Ramo contable (Accounting line)
        cobertura: Cobertura (Coverage code)
        monto_ajuste: Nuevo monto de reserva (New reserve amount, required when marked)
        marcar: Marcada para procesar (Marked for processing)
    """

    ramo_contable: int
    cobertura: str = Field(min_length=1, max_length=3)
    monto_ajuste: Decimal | None = None
    marcar: bool = True


class AjustePrioridadRequest(AjusteReservaRequest):
    """Fila de la grilla enviada a priorizar.

    Grid row sent for LUC prioritization. The client sends the balance it
    shows; a missing priority is read from the LUC catalog.
    """

    saldo: Decimal = Decimal("0")
    prioridad: int | None = None


class ValidarAjusteRequest(BaseModel):
    """Validación de un ajuste (Single adjustment validation request)."""

    ramo_contable: int
    monto_ajuste: Decimal | None = None


class ValidacionResponse(BaseModel):
    """Resultado de validar un ajuste.

    Validation result. Business failures are reported with valido=False
    and the message, not as an HTTP error.
    """

    valido: bool
    mensaje: str | None = None
    saldo: Decimal = Decimal("0")
    suma_asegurada: Decimal | None = None


class AjustePriorizadoResponse(BaseModel):
    """Ajuste después de la priorización LUC.

    Attributes:
        prioridad: Prioridad LUC (LUC priority, null when none)
        saldo: Saldo actual de la cobertura (Coverage balance)
        monto_ajuste: Monto tras priorizar (Amount after prioritization)
        marcar: Sigue marcada para procesar (Still marked for processing)
        marca: "P" priorizada, "S" sin prioridad, "N" procesada, "K" reducida
        mensaje: Mensaje de la priorización (Prioritization message)
    """

    ramo_contable: int
    cobertura: str
    prioridad: int | None = None
    saldo: Decimal = Decimal("0")
    monto_ajuste: Decimal | None = None
    marcar: bool = True
    marca: str = "S"
    mensaje: str | None = None


class PrioridadResponse(BaseModel):
    """Resultado de la priorización LUC (LUC prioritization result)."""

    id_remesa: int
    saldo_global: Decimal
    ajustes: list[AjustePriorizadoResponse] = []


class AplicarAjustesResponse(BaseModel):
    """Resultado de aplicar los ajustes.

    Attributes:
        exito: True si se escribieron los movimientos (Whether movements were written)
        mensaje: Mensaje final (Final message)
        errores: Errores por cobertura (Per coverage errors, when exito is False)
        ajustes: Ajustes procesados (Processed adjustments after prioritization)
    """

    exito: bool
    mensaje: str
    errores: list[str] = []
    ajustes: list[AjustePriorizadoResponse] = []


class AgregarFilaResponse(BaseModel):
    """Grilla recargada y priorización previa de las filas en edición.

    Reloaded coverage grid. On the LUC line it also carries the remaining
    available sum and the prioritized rows, without staging them.
    """

    mensaje: str
    coberturas: list[CoberturaReservaResponse] = []
    saldo_global: Decimal | None = None
    ajustes: list[AjustePriorizadoResponse] = []


# --- Suma asegurada (Insured sum) ---

class SumaAseguradaInfo(BaseModel):
    """Suma asegurada de una cobertura a la fecha de ocurrencia.

    Attributes:
        suma_asegurada: Suma asegurada (Insured sum)
        cd_plan: Plan (Plan code, may be null)
        fe_efectiva: Fecha efectiva usada (Effective date used)
    """

    suma_asegurada: Decimal
    cd_plan: str | None = None
    fe_efectiva: date


# --- Barra de herramientas (Toolbar) ---

class SystemInfoResponse(BaseModel):
    """Información de la barra de herramientas (Toolbar system info)."""

    nombre_conexion: str
    fecha_hora: datetime
    usuario: str
