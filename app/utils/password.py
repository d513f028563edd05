"""Hash y verificación de contraseñas con bcrypt.

Password hashing and verification utility module. Passwords are never
stored in plain text.
"""

import bcrypt


def hash_password(password: str) -> str:
    """Convierte una contraseña en un hash bcrypt con sal aleatoria.

    Args:
        password: Contraseña en texto plano (Plain text password to hash)

    Returns:
        str: Hash bcrypt (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compara una contraseña con su hash bcrypt (Verify a password against a bcrypt hash)."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )
