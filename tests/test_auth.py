"""Pruebas de la API de autenticación: login, refresh, logout y /me.

Auth API tests. Login, token refresh with rotation, logout and /me.
"""

from httpx import AsyncClient

from tests.conftest import auth_header

AUTH = "/api/auth"


class TestLogin:
    """Inicio de sesión."""

    async def test_login_success(self, client: AsyncClient, analista_user):
        """Login correcto devuelve el par de tokens."""
        res = await client.post(f"{AUTH}/login", json={"username": "jperez", "password": "analista123!"})
        assert res.status_code == 200
        data = res.json()
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"

    async def test_login_wrong_password(self, client: AsyncClient, analista_user):
        """Contraseña incorrecta -> 401."""
        res = await client.post(f"{AUTH}/login", json={"username": "jperez", "password": "nope"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Usuario o contraseña inválidos"

    async def test_login_unknown_user(self, client: AsyncClient, roles):
        """Usuario inexistente -> 401."""
        res = await client.post(f"{AUTH}/login", json={"username": "ghost", "password": "whatever"})
        assert res.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, db, analista_user):
        """Cuenta desactivada -> 401."""
        analista_user.is_active = False
        await db.commit()

        res = await client.post(f"{AUTH}/login", json={"username": "jperez", "password": "analista123!"})
        assert res.status_code == 401
        assert res.json()["detail"] == "La cuenta está desactivada"

    async def test_login_missing_field(self, client: AsyncClient):
        """Cuerpo incompleto -> 400 de validación."""
        res = await client.post(f"{AUTH}/login", json={"username": "jperez"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Error de validación"


class TestRefresh:
    """Renovación de tokens."""

    async def _login(self, client: AsyncClient) -> dict:
        res = await client.post(f"{AUTH}/login", json={"username": "jperez", "password": "analista123!"})
        return res.json()

    async def test_refresh_rotates_token(self, client: AsyncClient, analista_user):
        """El refresh emite tokens nuevos y revoca el usado."""
        tokens = await self._login(client)

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        assert res.json()["refresh_token"] != tokens["refresh_token"]

        again = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert again.status_code == 401

    async def test_refresh_invalid_token(self, client: AsyncClient, roles):
        """Refresh token desconocido -> 401."""
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "not-a-token"})
        assert res.status_code == 401

    async def test_logout_revokes_refresh(self, client: AsyncClient, analista_user):
        """Tras el logout el refresh token ya no sirve."""
        tokens = await self._login(client)

        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401


class TestMe:
    """Perfil del usuario actual."""

    async def test_me(self, client: AsyncClient, analista_token):
        res = await client.get(f"{AUTH}/me", headers=auth_header(analista_token))
        assert res.status_code == 200
        data = res.json()
        assert data["username"] == "jperez"
        assert data["role_name"] == "analista"
        assert data["role_level"] == 2

    async def test_me_without_token(self, client: AsyncClient):
        """Sin token -> 401."""
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_me_with_refresh_token(self, client: AsyncClient, analista_user):
        """Un refresh token no sirve como access token."""
        res = await client.post(f"{AUTH}/login", json={"username": "jperez", "password": "analista123!"})
        refresh = res.json()["refresh_token"]

        res = await client.get(f"{AUTH}/me", headers=auth_header(refresh))
        assert res.status_code == 401

    async def test_me_with_garbage_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("garbage"))
        assert res.status_code == 401
