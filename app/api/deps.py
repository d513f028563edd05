"""Dependencias FastAPI: autenticación y permisos.

FastAPI dependency injection module. Extracts the current user from the
JWT bearer token and enforces the role level required by each endpoint.

Authentication Flow:
    1. El cliente envía Authorization: Bearer <token>
       (Client sends Authorization: Bearer <token> header)
    2. decode_token() verifica el JWT (decode_token verifies the JWT)
    3. Se carga el usuario del "sub" con su rol (User and role loaded from "sub")
    4. Se verifica que esté activo (Active status is verified)

Role levels:
    1 = supervisor, 2 = analista, 3 = consulta
"""

from typing import Annotated, Callable, Awaitable
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.repositories.auth_repository import auth_repository
from app.utils.exceptions import ForbiddenError, UnauthorizedError
from app.utils.jwt import decode_token

# Extrae el JWT del encabezado Authorization (Extracts the JWT from the Authorization header)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Obtiene el usuario autenticado a partir del JWT.

    Decode the JWT from the Authorization header and return the
    authenticated user. The username is left on ``request.state`` for the
    request logging middleware.

    Args:
        request: Petición actual (Current request)
        credentials: Credenciales Bearer (Bearer token credentials from header)
        db: Sesión asíncrona (Async database session)

    Returns:
        User: Usuario autenticado con su rol cargado (Authenticated user, role loaded)

    Raises:
        UnauthorizedError: Token ausente, inválido o vencido, o usuario inactivo
            (Missing, invalid or expired token, or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError()
    try:
        payload: dict = decode_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Token inválido o vencido")

    # Un refresh token no sirve como access token (Refresh tokens are rejected here)
    if payload.get("type") != "access":
        raise UnauthorizedError("Tipo de token inválido")
    try:
        user_id: UUID = UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedError("Token inválido o vencido")

    user: User | None = await auth_repository.get_user_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Usuario no encontrado o inactivo")

    request.state.analista = user.username
    return user


def require_level(max_level: int) -> Callable[..., Awaitable[User]]:
    """Fábrica de dependencias por nivel de rol.

    Dependency factory enforcing a maximum role level. Lower level means
    higher authority.

    Args:
        max_level: Nivel máximo permitido, inclusive (Maximum allowed role level)

    Returns:
        Dependencia que devuelve el usuario o lanza 403
        (FastAPI dependency that returns the User or raises 403)
    """
    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        role = current_user.role
        if role is None or role.level > max_level:
            raise ForbiddenError()
        return current_user
    return _check


require_analista = require_level(2)    # Supervisor y analista (May adjust reserves)
