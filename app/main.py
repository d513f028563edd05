"""Punto de entrada de la aplicación FastAPI: middleware, errores y routers.

FastAPI application entry point. Registers middleware, global exception
handlers, the health check and the auth and claims routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.utils.exceptions import translate_db_error

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware de logging en Axiom, registrado antes que CORS para capturar todo
# Axiom request/response logging, registered before CORS to capture every request
app.add_middleware(AxiomLoggingMiddleware)

# CORS - Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Manejadores globales de errores (Global exception handlers)
# ---------------------------------------------------------------------------

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Errores de validación de la petición -> 400 (Request validation errors)."""
    request.state.error = "Error de validación"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Error de validación", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Errores de base de datos traducidos a mensajes de usuario.

    Database errors mapped to an error code and a Spanish user message.
    """
    code, http_status, message = translate_db_error(exc)
    request.state.error = f"{code}: {type(exc).__name__}"
    return JSONResponse(status_code=http_status, content={"detail": message, "code": code})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Cualquier otro error -> 500 (Any other error)."""
    request.state.error = f"{type(exc).__name__}: {str(exc)[:300]}"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Error interno del servidor"},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Estado del servidor.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Registro de routers (Router registration)
# ---------------------------------------------------------------------------
from app.api.auth import router as auth_router  # noqa: E402
from app.api.siniestros import router as siniestros_router  # noqa: E402

app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(siniestros_router, prefix="/api/siniestros", tags=["Siniestros"])
