"""User administration (Admin only)."""

import pytest


def _nuevo_medico(**cambios):
    payload = {
        "login": "dra.ruiz",
        "email": "isabel.ruiz@clinica.com",
        "password": "secreta1",
        "nombre": "Isabel",
        "apellido": "Ruiz",
        "rol": "Medico",
        "cedula": "99887766",
        "especialidad": "Cirujana Plástica",
    }
    payload.update(cambios)
    return payload


class TestUsuarios:
    def test_list_users(self, client, headers, personal):
        response = client.get("/api/usuarios", headers=headers("admin"))

        assert response.status_code == 200
        usuarios = {u["login"]: u for u in response.json()["usuarios"]}
        assert len(usuarios) == len(personal)
        assert usuarios["dra.vega"]["nombre_display"] == "Dra. Ana Vega"
        assert usuarios["dra.vega"]["especialidad"] == "Anestesióloga"
        assert usuarios["enf.lopez"]["especialidad"] is None
        assert "password_hash" not in usuarios["admin"]

    def test_create_doctor_with_profile(self, client, headers, personal):
        response = client.post("/api/usuarios", json=_nuevo_medico(), headers=headers("admin"))

        assert response.status_code == 201
        creado = response.json()
        assert creado["activo"] is True
        assert creado["nombre_display"] == "Dra. Isabel Ruiz"
        assert creado["cedula"] == "99887766"

        cirujanos = client.get(
            "/api/medicos/cirujanos", headers=headers("adm.rios")
        ).json()["medicos"]
        assert creado["id"] in [m["id"] for m in cirujanos]

    def test_new_user_can_log_in(self, client, headers, personal):
        client.post("/api/usuarios", json=_nuevo_medico(), headers=headers("admin"))

        response = client.post(
            "/api/auth/login", json={"login": "dra.ruiz", "password": "secreta1"}
        )

        assert response.status_code == 200

    def test_duplicate_login_is_409(self, client, headers, personal):
        response = client.post(
            "/api/usuarios", json=_nuevo_medico(login="dr.soto"), headers=headers("admin")
        )
        assert response.status_code == 409

    def test_invalid_role_is_422(self, client, headers, personal):
        response = client.post(
            "/api/usuarios", json=_nuevo_medico(rol="Cirujano"), headers=headers("admin")
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("login", ["dra.vega", "enf.lopez", "adm.rios"])
    def test_only_admin(self, client, headers, personal, login):
        assert client.get("/api/usuarios", headers=headers(login)).status_code == 403


class TestActualizar:
    def test_deactivate_blocks_login(self, client, headers, ids):
        response = client.put(
            f"/api/usuarios/{ids['dr.gomez']}",
            json={"activo": False},
            headers=headers("admin"),
        )

        assert response.status_code == 200
        assert response.json()["activo"] is False
        login = client.post(
            "/api/auth/login", json={"login": "dr.gomez", "password": "password"}
        )
        assert login.status_code == 401

    def test_omitted_password_is_kept(self, client, headers, ids):
        client.put(
            f"/api/usuarios/{ids['enf.lopez']}",
            json={"telefono": "555-0104"},
            headers=headers("admin"),
        )

        login = client.post(
            "/api/auth/login", json={"login": "enf.lopez", "password": "password"}
        )
        assert login.status_code == 200

    def test_new_password(self, client, headers, ids):
        client.put(
            f"/api/usuarios/{ids['enf.lopez']}",
            json={"password": "nueva123"},
            headers=headers("admin"),
        )

        vieja = client.post("/api/auth/login", json={"login": "enf.lopez", "password": "password"})
        nueva = client.post("/api/auth/login", json={"login": "enf.lopez", "password": "nueva123"})
        assert vieja.status_code == 401
        assert nueva.status_code == 200

    def test_change_specialty_moves_pools(self, client, headers, ids):
        client.put(
            f"/api/usuarios/{ids['dr.gomez']}",
            json={"especialidad": "Cirujano General"},
            headers=headers("admin"),
        )

        cirujanos = client.get(
            "/api/medicos/cirujanos", headers=headers("admin")
        ).json()["medicos"]
        assert ids["dr.gomez"] in [m["id"] for m in cirujanos]

    def test_unknown_user_is_404(self, client, headers, personal):
        response = client.put("/api/usuarios/9999", json={"nombre": "X"}, headers=headers("admin"))
        assert response.status_code == 404
