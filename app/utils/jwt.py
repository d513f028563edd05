"""Utilidades de creación y verificación de tokens JWT.

JWT token creation and verification utility module.

JWT Payload Structure:
    Access and refresh tokens share the same base payload:
    {
        "sub": "user_uuid",         # Id del usuario (User identifier)
        "username": "jperez",       # Usuario, registrado como analista (Login name)
        "role": "analista",         # Rol (Role name)
        "level": 2,                 # Nivel del rol (Role permission level)
        "exp": 1234567890,          # Expiración UNIX (Expiration)
        "type": "access"|"refresh", # Tipo de token (Token type discriminator)
        "jti": "hex"                # Identificador único (Unique token id)
    }
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from app.config import settings


def _encode(data: dict[str, Any], expires_in: timedelta, token_type: str) -> str:
    to_encode: dict[str, Any] = data.copy()
    # jti: dos tokens emitidos en el mismo segundo nunca coinciden (unique per token)
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires_in,
        "type": token_type,
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """Genera un access token JWT.

    Generate a JWT access token that expires after
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES (default: 30 min).

    Args:
        data: Payload del token (JWT payload data with user and role info)

    Returns:
        str: JWT codificado (Encoded JWT token string)
    """
    return _encode(data, timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES), "access")


def create_refresh_token(data: dict[str, Any]) -> str:
    """Genera un refresh token JWT (vigencia JWT_REFRESH_TOKEN_EXPIRE_DAYS)."""
    return _encode(data, timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS), "refresh")


def decode_token(token: str) -> dict[str, Any]:
    """Decodifica y verifica un token JWT.

    Args:
        token: JWT codificado (Encoded JWT token string)

    Returns:
        dict[str, Any]: Payload decodificado (Decoded payload dictionary)

    Raises:
        jwt.ExpiredSignatureError: Token vencido (When token has expired)
        jwt.InvalidTokenError: Token inválido (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
