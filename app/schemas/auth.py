"""Esquemas Pydantic de autenticación.

Authentication-related Pydantic request/response schema definitions.
Covers login, token issuance/refresh, and current user info.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Solicitud de inicio de sesión.

    Login request schema.

    Attributes:
        username: Usuario (User login identifier)
        password: Contraseña (Plain text password, verified against bcrypt hash)
    """

    username: str
    password: str  # Texto plano, se compara con el hash bcrypt (Compared to bcrypt hash)


class TokenResponse(BaseModel):
    """Respuesta con los tokens JWT.

    JWT token issuance response schema, returned after login or refresh.

    Attributes:
        access_token: Token de acceso (Short-lived access token)
        refresh_token: Token de refresco (Long-lived refresh token)
        token_type: Tipo de token (Always "bearer")
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    """Solicitud de renovación de tokens (Token refresh request)."""

    refresh_token: str


class UserMeResponse(BaseModel):
    """Datos del usuario actual (GET /me).

    Attributes:
        id: UUID del usuario (User identifier)
        username: Usuario, registrado como analista (Login name, recorded as analyst)
        full_name: Nombre completo (Full display name)
        role_name: Rol (Role name, e.g. "analista")
        role_level: Nivel del rol (1 supervisor, 2 analista, 3 consulta)
        is_active: Cuenta activa (Account active status)
    """

    id: str
    username: str
    full_name: str
    role_name: str
    role_level: int
    is_active: bool
