"""Servicio de autenticación: login, renovación de tokens y logout.

Auth Service. Business logic for login, JWT token lifecycle and the
current user profile.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.token import RefreshToken
from app.models.user import Role, User
from app.repositories.auth_repository import auth_repository
from app.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from app.utils.exceptions import UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import verify_password


def _as_utc(value: datetime) -> datetime:
    # SQLite devuelve fechas sin zona (SQLite returns naive datetimes)
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class AuthService:
    """Lógica de autenticación.

    Service handling authentication business logic: login, token refresh
    with rotation, and logout.
    """

    def _build_jwt_payload(self, user: User, role: Role) -> dict[str, str | int]:
        """Construye el payload del JWT (Build the JWT payload from user and role)."""
        return {
            "sub": str(user.id),
            "username": user.username,
            "role": role.name,
            "level": role.level,
        }

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
        role: Role,
    ) -> TokenResponse:
        """Genera el par de tokens y guarda el refresh token.

        Generate an access/refresh token pair. Previous refresh tokens of the
        user are deleted so only the latest one stays valid.

        Args:
            db: Sesión asíncrona (Async database session)
            user: Usuario (User model instance)
            role: Rol (Role model instance)

        Returns:
            TokenResponse: Tokens emitidos (Issued tokens)
        """
        payload: dict[str, str | int] = self._build_jwt_payload(user, role)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        await auth_repository.delete_user_refresh_tokens(db, user.id)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """Inicia sesión con usuario y contraseña.

        Args:
            db: Sesión asíncrona (Async database session)
            data: Credenciales (Login request data)

        Returns:
            TokenResponse: Tokens emitidos (Issued tokens)

        Raises:
            UnauthorizedError: Credenciales inválidas o cuenta inactiva
                (Invalid credentials or deactivated account)
        """
        user: User | None = await auth_repository.get_user_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Usuario o contraseña inválidos")

        if not user.is_active:
            raise UnauthorizedError("La cuenta está desactivada")

        return await self._generate_tokens(db, user, user.role)

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """Emite un nuevo par de tokens a partir de un refresh token.

        Issue a new token pair from a stored, unexpired refresh token. The
        used refresh token is revoked.

        Raises:
            UnauthorizedError: Refresh token inválido o vencido (Invalid or expired refresh token)
        """
        db_token: RefreshToken | None = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Refresh token inválido")

        if _as_utc(db_token.expires_at) < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token vencido")

        try:
            payload: dict = decode_token(data.refresh_token)
            user_id: UUID = UUID(str(payload.get("sub")))
        except (jwt.InvalidTokenError, ValueError):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token inválido")

        user: User | None = await auth_repository.get_user_by_id(db, user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("Usuario no encontrado o inactivo")

        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user, user.role)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """Cierra sesión revocando el refresh token (Logout by revoking the refresh token)."""
        await auth_repository.delete_refresh_token(db, refresh_token)

    def get_me(self, user: User) -> UserMeResponse:
        """Perfil del usuario autenticado (Profile of the authenticated user)."""
        return UserMeResponse(
            id=str(user.id),
            username=user.username,
            full_name=user.full_name,
            role_name=user.role.name,
            role_level=user.role.level,
            is_active=user.is_active,
        )


# Instancia única (Singleton instance)
auth_service: AuthService = AuthService()
