"""Patient registry: search, pagination, derived age and the doctor's own list."""

import datetime

from app.utils.formatting import calcular_edad


class TestListado:
    def test_admin_sees_every_patient(self, client, headers, pacientes):
        body = client.get("/api/pacientes", headers=headers("admin")).json()

        assert body["total"] == 3
        assert body["page"] == 1
        assert body["page_size"] == 10
        assert [p["apellido"] for p in body["pacientes"]] == [
            "Hernández Cruz", "Jiménez López", "Ramírez Gómez",
        ]

    def test_search_by_name_or_rfc(self, client, headers, pacientes):
        auth = headers("adm.rios")

        por_nombre = client.get(
            "/api/pacientes", params={"buscar": "sofía"}, headers=auth
        ).json()["pacientes"]
        por_rfc = client.get(
            "/api/pacientes", params={"buscar": "JILR72"}, headers=auth
        ).json()["pacientes"]

        assert [p["nombre"] for p in por_nombre] == ["Sofía"]
        assert [p["nombre"] for p in por_rfc] == ["Roberto"]

    def test_search_treats_wildcards_literally(self, client, headers, pacientes):
        auth = headers("admin")

        for termino in ("%", "_", "R_GE"):
            body = client.get("/api/pacientes", params={"buscar": termino}, headers=auth).json()
            assert body["total"] == 0, termino

    def test_pagination(self, client, headers, pacientes):
        body = client.get(
            "/api/pacientes", params={"page": 2, "page_size": 2}, headers=headers("admin")
        ).json()

        assert body["total"] == 3
        assert [p["nombre"] for p in body["pacientes"]] == ["Elena"]

    def test_age_is_derived(self, client, headers, pacientes):
        body = client.get(
            "/api/pacientes", params={"buscar": "Elena"}, headers=headers("admin")
        ).json()

        assert body["pacientes"][0]["edad"] == calcular_edad(datetime.date(1985, 5, 20))

    def test_doctor_only_sees_own_patients(self, client, headers, pacientes, nuevo_procedimiento):
        nuevo_procedimiento(paciente_id=pacientes["elena"].id)

        para_vega = client.get("/api/pacientes", headers=headers("dra.vega")).json()
        para_gomez = client.get("/api/pacientes", headers=headers("dr.gomez")).json()

        assert [p["nombre"] for p in para_vega["pacientes"]] == ["Elena"]
        assert para_vega["total"] == 1
        assert para_gomez["pacientes"] == []

    def test_latest_procedure_link(self, client, headers, pacientes, nuevo_procedimiento):
        nuevo_procedimiento(fecha_qx="2025-08-01")
        reciente = nuevo_procedimiento(fecha_qx="2025-09-01")

        fila = client.get(
            "/api/pacientes", params={"buscar": "Elena"}, headers=headers("admin")
        ).json()["pacientes"][0]

        assert fila["ultimo_procedimiento_id"] == reciente["id"]

    def test_nurse_has_no_access(self, client, headers, pacientes):
        assert client.get("/api/pacientes", headers=headers("enf.lopez")).status_code == 403


class TestDetalle:
    def test_get_patient(self, client, headers, pacientes):
        response = client.get(
            f"/api/pacientes/{pacientes['roberto'].id}", headers=headers("admin")
        )

        assert response.status_code == 200
        assert response.json()["rfc"] == "JILR721115HDF"

    def test_doctor_gets_404_for_foreign_patient(self, client, headers, pacientes):
        response = client.get(
            f"/api/pacientes/{pacientes['roberto'].id}", headers=headers("dr.perez")
        )
        assert response.status_code == 404

    def test_unknown_patient_is_404(self, client, headers, pacientes):
        assert client.get("/api/pacientes/9999", headers=headers("admin")).status_code == 404


class TestEscritura:
    def test_create_patient(self, client, headers, personal):
        response = client.post(
            "/api/pacientes",
            json={
                "nombre": "Miguel Ángel",
                "apellido": "Flores",
                "fecha_nacimiento": "2001-07-22",
                "sexo": "M",
                "rfc": "FLOM010722HDF",
            },
            headers=headers("adm.rios"),
        )

        assert response.status_code == 201
        creado = response.json()
        assert creado["id"] >= 1
        assert creado["telefono"] == ""
        assert creado["edad"] == calcular_edad(datetime.date(2001, 7, 22))

    def test_age_is_not_accepted_from_client(self, client, headers, personal):
        creado = client.post(
            "/api/pacientes",
            json={
                "nombre": "Miguel",
                "apellido": "Flores",
                "fecha_nacimiento": "2001-07-22",
                "sexo": "M",
                "edad": 99,
            },
            headers=headers("admin"),
        ).json()

        assert creado["edad"] != 99

    def test_invalid_sex_is_422(self, client, headers, personal):
        response = client.post(
            "/api/pacientes",
            json={
                "nombre": "Miguel",
                "apellido": "Flores",
                "fecha_nacimiento": "2001-07-22",
                "sexo": "X",
            },
            headers=headers("admin"),
        )
        assert response.status_code == 422

    def test_partial_update(self, client, headers, pacientes):
        response = client.put(
            f"/api/pacientes/{pacientes['sofia'].id}",
            json={"telefono": "555-9999"},
            headers=headers("adm.rios"),
        )

        assert response.status_code == 200
        actualizado = response.json()
        assert actualizado["telefono"] == "555-9999"
        assert actualizado["nombre"] == "Sofía"

    def test_null_clears_optional_identifiers(self, client, headers, pacientes):
        response = client.put(
            f"/api/pacientes/{pacientes['roberto'].id}",
            json={"rfc": None, "telefono": None, "nombre": None},
            headers=headers("admin"),
        )

        assert response.status_code == 200
        actualizado = response.json()
        assert actualizado["rfc"] == ""
        assert actualizado["telefono"] == ""
        assert actualizado["nombre"] == "Roberto"
