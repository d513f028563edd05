"""Modelo de refresh tokens.

Refresh Token model. Stores issued JWT refresh tokens so that they can be
rotated on refresh and revoked on logout.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class RefreshToken(Base):
    """Tabla de refresh tokens emitidos.

    Attributes:
        id: Identificador UUID (Primary key UUID)
        user_id: Usuario dueño (Owner user UUID)
        token: Refresh token JWT (JWT refresh token string)
        expires_at: Expiración (Expiration timestamp)
        created_at: Emisión (Creation timestamp)
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    user = relationship("User", back_populates="refresh_tokens")
