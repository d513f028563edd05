"""Servicio de la barra de herramientas: conexión, fecha y usuario.

Toolbar Service. Header information of the adjustment screen.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.catalogo_repository import catalogo_repository
from app.schemas.siniestro import SystemInfoResponse

CONEXION_NO_IDENTIFICADA: str = "CONNECTION NOT IDENTIFIED"


class ToolbarService:
    """Información del sistema para la barra de herramientas."""

    async def get_system_info(self, db: AsyncSession, user: User) -> SystemInfoResponse:
        """Nombre de la conexión, fecha y hora actual y usuario.

        Args:
            db: Sesión asíncrona (Async database session)
            user: Usuario autenticado (Authenticated user)

        Returns:
            SystemInfoResponse: Información del sistema (Toolbar info)
        """
        nombre: str | None = await catalogo_repository.get_nombre_conexion(db)
        return SystemInfoResponse(
            nombre_conexion=nombre or CONEXION_NO_IDENTIFICADA,
            fecha_hora=datetime.now(),
            usuario=user.username,
        )


# Instancia única (Singleton instance)
toolbar_service: ToolbarService = ToolbarService()
