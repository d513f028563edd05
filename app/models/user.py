"""Modelos de usuarios y roles.

User and Role SQLAlchemy ORM model definitions.
Claim analysts authenticate with these accounts; the role level decides
whether a user may only consult claims or also adjust reserves.

Tables:
    - roles: Roles con nivel jerárquico (Roles with a level-based hierarchy)
    - users: Cuentas de usuario (User accounts, one role each)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Role(Base):
    """Rol - nivel de permisos del usuario.

    Role model. Lower level numbers indicate higher authority:
        1 = supervisor, 2 = analista, 3 = consulta

    Attributes:
        id: Identificador UUID (Unique identifier)
        name: Nombre del rol (Role name, e.g. "supervisor")
        level: Nivel de permisos (Permission level, 1=highest)
        created_at: Fecha de creación UTC (Creation timestamp)
    """

    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Nombre único del rol (Unique role name)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # Nivel: 1 supervisor, 2 analista, 3 consulta
    level: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    users = relationship("User", back_populates="role")


class User(Base):
    """Usuario del sistema.

    User model. The username is recorded as ``analista`` on every movement
    the user generates.

    Attributes:
        id: Identificador UUID (Unique identifier)
        role_id: FK al rol (Assigned role foreign key)
        username: Usuario de acceso (Login username, globally unique)
        full_name: Nombre completo (Full display name)
        password_hash: Hash bcrypt (bcrypt-hashed password)
        is_active: Cuenta activa (Active status, soft-delete pattern)
        created_at: Fecha de creación UTC (Creation timestamp)
        updated_at: Fecha de modificación UTC (Last update timestamp)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id"), nullable=False)
    # Usuario de acceso, se registra como analista (Login name, stored as movement analyst)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Nunca en texto plano (bcrypt hash, never plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    role = relationship("Role", back_populates="users")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
