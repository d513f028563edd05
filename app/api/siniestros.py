"""Router de siniestros: consulta, validación y aplicación de ajustes de reserva.

Claims Router. Endpoints of the reserve-adjustment screen.

Permission Matrix:
    - Consultas (info, coberturas, reserva pendiente, system-info): cualquier usuario autenticado
    - Validar, aplicar, priorizar, agregar fila, eliminar remesa: supervisor y analista (level <= 2)
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_analista
from app.database import get_db
from app.models.user import User
from app.repositories.poliza_repository import CertificadoKey
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.siniestro import (
    AgregarFilaResponse,
    AjustePrioridadRequest,
    AjusteReservaRequest,
    AplicarAjustesResponse,
    CoberturaReservaResponse,
    PrioridadResponse,
    ReservaPendienteResponse,
    SiniestroInfoResponse,
    SystemInfoResponse,
    ValidacionResponse,
    ValidarAjusteRequest,
)
from app.services.ajuste_reserva_service import ajuste_reserva_service
from app.services.prioridad_service import AjustePrioridad
from app.services.siniestro_service import siniestro_service
from app.services.toolbar_service import toolbar_service
from app.utils.pagination import Page

router: APIRouter = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


# --- Consultas (Reads) ---

@router.get("/info/{sucursal}/{ramo}/{siniestro}", response_model=SiniestroInfoResponse)
async def get_siniestro_info(
    sucursal: int,
    ramo: int,
    siniestro: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> SiniestroInfoResponse:
    """Información del siniestro con su grilla de coberturas (Claim info with coverage grid)."""
    return await siniestro_service.get_siniestro_info(db, sucursal, ramo, siniestro)


@router.get("/coberturas/{sucursal}/{ramo}/{siniestro}", response_model=list[CoberturaReservaResponse])
async def get_coberturas_siniestro(
    sucursal: int,
    ramo: int,
    siniestro: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[CoberturaReservaResponse]:
    """Grilla de coberturas del siniestro (Coverage grid of a claim)."""
    return await siniestro_service.get_coberturas_siniestro(db, sucursal, ramo, siniestro)


@router.get("/coberturas", response_model=Page)
async def list_coberturas(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    ramo_contable: int | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    """Lista de valores de coberturas, paginada (Paginated coverage LOV)."""
    return await siniestro_service.list_coberturas(db, ramo_contable, search, page, per_page)


@router.get("/reserva-pendiente", response_model=ReservaPendienteResponse)
async def get_reserva_pendiente(
    sucursal: int,
    ramo: int,
    poliza: int,
    certificado: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ReservaPendienteResponse:
    """Reserva pendiente LUC de un certificado (Pending LUC reserve of a certificate)."""
    key = CertificadoKey(sucursal=sucursal, ramo=ramo, poliza=poliza, certificado=certificado)
    return await siniestro_service.get_reserva_pendiente(db, key)


@router.get("/system-info", response_model=SystemInfoResponse)
async def get_system_info(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> SystemInfoResponse:
    """Datos de la barra de herramientas (Toolbar info)."""
    return await toolbar_service.get_system_info(db, current_user)


# --- Ajustes (Adjustments) ---

@router.post(
    "/{sucursal}/{siniestro}/coberturas/{cobertura}/validate",
    response_model=ValidacionResponse,
)
async def validar_ajuste(
    sucursal: int,
    siniestro: int,
    cobertura: str,
    data: ValidarAjusteRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_analista)],
) -> ValidacionResponse:
    """Valida un ajuste sin aplicarlo.

    Validate one adjustment. Business failures return 200 with
    ``valido=false`` and the rule message.
    """
    return await ajuste_reserva_service.validar_ajuste(
        db, sucursal, siniestro, data.ramo_contable, cobertura, data.monto_ajuste
    )


@router.post("/{sucursal}/{siniestro}/ajuste-reserva", response_model=AplicarAjustesResponse)
async def aplicar_ajustes(
    sucursal: int,
    siniestro: int,
    ajustes: list[AjusteReservaRequest],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_analista)],
) -> AplicarAjustesResponse:
    """Aplica los ajustes marcados en una sola transacción.

    Apply the marked adjustments. When any row fails validation nothing
    is written and the errors are returned with ``exito=false``.
    """
    result: AplicarAjustesResponse = await ajuste_reserva_service.aplicar_ajustes(
        db, sucursal, siniestro, ajustes, current_user.username
    )
    if result.exito:
        await db.commit()
    else:
        await db.rollback()
    return result


@router.post("/ajuste-prioridad", response_model=PrioridadResponse)
async def priorizar_ajustes(
    sucursal: int,
    ramo: int,
    poliza: int,
    certificado: int,
    fecha_ocurrencia: date,
    ajustes: list[AjustePrioridadRequest],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_analista)],
) -> PrioridadResponse:
    """Prioriza ajustes LUC y los guarda en una remesa nueva.

    Prioritize LUC adjustments of a certificate and stage them in a new batch.
    """
    key = CertificadoKey(sucursal=sucursal, ramo=ramo, poliza=poliza, certificado=certificado)
    filas: list[AjustePrioridad] = [
        AjustePrioridad(
            ramo_contable=ajuste.ramo_contable,
            cobertura=ajuste.cobertura,
            prioridad=ajuste.prioridad,
            saldo=ajuste.saldo,
            monto_ajuste=ajuste.monto_ajuste,
            marcar=ajuste.marcar,
        )
        for ajuste in ajustes
    ]
    result: PrioridadResponse = await ajuste_reserva_service.priorizar(db, key, fecha_ocurrencia, filas)
    await db.commit()
    return result


@router.post("/{sucursal}/{ramo}/{siniestro}/agregar-fila", response_model=AgregarFilaResponse)
async def agregar_fila(
    sucursal: int,
    ramo: int,
    siniestro: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_analista)],
    ajustes: Annotated[list[AjusteReservaRequest] | None, Body()] = None,
) -> AgregarFilaResponse:
    """Recarga la grilla de coberturas.

    Reload the coverage grid; on the LUC line the optional rows in the body
    are prioritized without staging.
    """
    return await siniestro_service.agregar_fila(db, sucursal, ramo, siniestro, ajustes)


@router.delete("/reserva-cobertura", response_model=MessageResponse)
async def eliminar_reserva_cobertura(
    sucursal: int,
    ramo: int,
    poliza: int,
    certificado: int,
    ramo_contable: int,
    cobertura: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_analista)],
    id_remesa: int | None = None,
) -> MessageResponse:
    """Elimina los ajustes en remesa de una cobertura.

    Delete the staged batch rows of a coverage (given batch and default batch).
    """
    key = CertificadoKey(sucursal=sucursal, ramo=ramo, poliza=poliza, certificado=certificado)
    await siniestro_service.eliminar_remesa(db, key, ramo_contable, cobertura, id_remesa)
    await db.commit()
    return MessageResponse(message="Registro eliminado correctamente")
