"""Login, token validation and role guards."""

import pytest

from app.utils.security import hash_password, verify_password


class TestLogin:
    def test_login_returns_token_and_profile(self, client, personal):
        response = client.post(
            "/api/auth/login", json={"login": "dra.vega", "password": "password"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["user"]["login"] == "dra.vega"
        assert body["user"]["rol"] == "Medico"
        assert "password_hash" not in body["user"]

    def test_token_from_login_opens_me(self, client, personal):
        token = client.post(
            "/api/auth/login", json={"login": "enf.lopez", "password": "password"}
        ).json()["access_token"]

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["nombre"] == "Laura"

    @pytest.mark.parametrize(
        "login,password",
        [("dra.vega", "incorrecta"), ("nadie", "password")],
    )
    def test_bad_credentials_are_401(self, client, personal, login, password):
        response = client.post(
            "/api/auth/login", json={"login": login, "password": password}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Credenciales inválidas."

    def test_inactive_account_cannot_log_in(self, client, personal, db_session):
        personal["dr.gomez"].activo = False
        db_session.commit()

        response = client.post(
            "/api/auth/login", json={"login": "dr.gomez", "password": "password"}
        )

        assert response.status_code == 401

    def test_login_records_last_access(self, client, personal, db_session):
        assert personal["adm.rios"].ultimo_acceso is None

        client.post("/api/auth/login", json={"login": "adm.rios", "password": "password"})

        db_session.expire_all()
        assert personal["adm.rios"].ultimo_acceso is not None


class TestTokens:
    def test_missing_token_is_401(self, client, personal):
        assert client.get("/api/auth/me").status_code == 401

    def test_garbage_token_is_401(self, client, personal):
        response = client.get(
            "/api/auth/me", headers={"Authorization": "Bearer no-es-un-jwt"}
        )
        assert response.status_code == 401

    def test_token_of_deactivated_user_is_401(self, client, headers, personal, db_session):
        auth = headers("dr.soto")
        personal["dr.soto"].activo = False
        db_session.commit()

        assert client.get("/api/auth/me", headers=auth).status_code == 401


def test_password_hash_round_trip():
    hashed = hash_password("secreta")
    assert hashed != "secreta"
    assert verify_password("secreta", hashed)
    assert not verify_password("otra", hashed)
    assert not verify_password("secreta", None)
