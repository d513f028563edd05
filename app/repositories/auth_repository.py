"""Repositorio de autenticación: refresh tokens y búsqueda de usuarios.

Auth Repository. Handles refresh token CRUD and user lookup by username
for the login, refresh and logout workflows.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.token import RefreshToken
from app.models.user import User


class AuthRepository:
    """Consultas de base de datos para autenticación.

    Repository handling authentication-related database queries.
    """

    async def get_user_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> User | None:
        """Busca un usuario por su nombre de usuario.

        Retrieve a user (with its role loaded) by username.

        Args:
            db: Sesión asíncrona (Async database session)
            username: Usuario a buscar (Username to look up)

        Returns:
            User | None: Usuario o None (Found user or None)
        """
        query: Select = (
            select(User)
            .options(selectinload(User.role))
            .where(User.username == username)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_user_by_id(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> User | None:
        """Busca un usuario por id con su rol cargado (Load a user and its role by id)."""
        query: Select = (
            select(User)
            .options(selectinload(User.role))
            .where(User.id == user_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """Crea un refresh token.

        Create a new refresh token record in the database.

        Args:
            db: Sesión asíncrona (Async database session)
            user_id: Dueño del token (Token owner user UUID)
            token: Refresh token JWT (JWT refresh token string)
            expires_at: Expiración (Token expiration timestamp)

        Returns:
            RefreshToken: Registro creado (Created refresh token record)
        """
        db_token: RefreshToken = RefreshToken(
            user_id=user_id,
            token=token,
            expires_at=expires_at,
        )
        db.add(db_token)
        await db.flush()
        await db.refresh(db_token)
        return db_token

    async def get_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        """Busca un refresh token por su cadena (Find a refresh token record by its string)."""
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> bool:
        """Elimina un refresh token.

        Delete a specific refresh token by its token string.

        Args:
            db: Sesión asíncrona (Async database session)
            token: Refresh token a eliminar (Refresh token string to delete)

        Returns:
            bool: True si se eliminó (Whether the deletion was successful)
        """
        db_token: RefreshToken | None = await self.get_refresh_token(db, token)
        if db_token is None:
            return False

        await db.delete(db_token)
        await db.flush()
        return True

    async def delete_user_refresh_tokens(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """Elimina todos los refresh tokens del usuario (Logout from every device)."""
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        await db.execute(stmt)
        await db.flush()


# Instancia única (Singleton instance)
auth_repository: AuthRepository = AuthRepository()
