"""Role menus and typed view resolution."""

import pytest


def _resolver(client, auth, destino):
    return client.post("/api/navegacion/resolver", json={"destino": destino}, headers=auth)


class TestMenu:
    def test_admin_menu(self, client, headers, personal):
        body = client.get("/api/navegacion/menu", headers=headers("admin")).json()

        assert body["rol"] == "Admin"
        assert [i["vista"] for i in body["items"]] == ["programacion", "pacientes", "usuarios"]

    def test_doctor_menu_lists_own_patients(self, client, headers, personal):
        items = client.get("/api/navegacion/menu", headers=headers("dra.vega")).json()["items"]

        assert {"vista": "pacientes", "etiqueta": "Mis Pacientes"} in items
        assert "usuarios" not in [i["vista"] for i in items]

    def test_nurse_menu(self, client, headers, personal):
        items = client.get("/api/navegacion/menu", headers=headers("enf.lopez")).json()["items"]
        assert [i["vista"] for i in items] == ["programacion"]


class TestResolver:
    def test_schedule_with_date(self, client, headers, personal):
        response = _resolver(
            client, headers("enf.lopez"), {"vista": "programacion", "fecha": "2025-08-22"}
        )

        assert response.status_code == 200
        assert response.json()["recurso"] == "/api/procedimientos?fecha=2025-08-22"

    def test_schedule_with_bad_date_is_422(self, client, headers, personal):
        response = _resolver(
            client, headers("admin"), {"vista": "programacion", "fecha": "22/08/2025"}
        )
        assert response.status_code == 422

    def test_patients_view_keeps_search_in_resource(self, client, headers, personal):
        body = _resolver(
            client, headers("dr.perez"), {"vista": "pacientes", "buscar": "Ramírez G", "page": 2}
        ).json()

        assert body["titulo"] == "Mis Pacientes"
        assert body["parametros"] == {"buscar": "Ramírez G", "page": 2}
        assert body["recurso"] == "/api/pacientes?page=2&buscar=Ram%C3%ADrez+G"

    def test_patients_view_without_search(self, client, headers, personal):
        body = _resolver(client, headers("admin"), {"vista": "pacientes"}).json()
        assert body["recurso"] == "/api/pacientes?page=1"

    def test_procedure_view(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        body = _resolver(
            client,
            headers("dr.perez"),
            {"vista": "procedimiento", "procedimiento_id": creado["id"]},
        ).json()

        assert body["titulo"] == "Procedimiento: Elena Ramírez Gómez"
        assert body["parametros"] == {"procedimiento_id": creado["id"]}

    def test_document_view(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        body = _resolver(
            client,
            headers("enf.lopez"),
            {"vista": "documento", "procedimiento_id": creado["id"], "tipo": "nota_alta"},
        ).json()

        assert body["titulo"] == "Nota de Alta: Elena Ramírez Gómez"
        assert body["recurso"] == f"/api/procedimientos/{creado['id']}/documentos/nota_alta"

    def test_unknown_document_type_is_404(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = _resolver(
            client,
            headers("admin"),
            {"vista": "documento", "procedimiento_id": creado["id"], "tipo": "receta"},
        )

        assert response.status_code == 404

    def test_unknown_procedure_is_404(self, client, headers, personal):
        response = _resolver(
            client, headers("admin"), {"vista": "agregar_foto", "procedimiento_id": 9999}
        )
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "destino",
        [
            {"vista": "procedimiento"},
            {"vista": "documento", "procedimiento_id": 1},
            {"vista": "inexistente"},
        ],
    )
    def test_missing_or_unknown_parameters_are_422(self, client, headers, personal, destino):
        assert _resolver(client, headers("admin"), destino).status_code == 422

    @pytest.mark.parametrize(
        "login,destino",
        [
            ("enf.lopez", {"vista": "usuarios"}),
            ("enf.lopez", {"vista": "pacientes"}),
            ("adm.rios", {"vista": "agregar_foto", "procedimiento_id": 1}),
        ],
    )
    def test_role_without_access_is_403(self, client, headers, personal, login, destino):
        assert _resolver(client, headers(login), destino).status_code == 403
