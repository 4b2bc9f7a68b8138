"""Surgical schedule: upsert, optimistic versioning, staff rules, status and delete."""

import pytest


class TestUpsert:
    def test_create_then_get_returns_same_record(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.get(
            f"/api/procedimientos/{creado['id']}", headers=headers("enf.lopez")
        )

        assert response.status_code == 200
        assert response.json()["procedimiento"] == creado
        assert creado["version"] == 1
        assert creado["status"] == "Programado"

    def test_sections_round_trip_in_complete_shape(self, client, headers, nuevo_procedimiento):
        consentimiento = {"riesgos": "Sangrado, infección.", "beneficios": "Resolución del cuadro."}
        creado = nuevo_procedimiento(
            consentimiento=consentimiento,
            nota_alta={"dx_egreso": "Colecistitis crónica", "resumen_egreso": None},
        )

        assert creado["consentimiento"] == consentimiento
        assert creado["nota_alta"] == {
            "fecha_egreso": "",
            "dx_egreso": "Colecistitis crónica",
            "motivo_egreso": "mejoria",
            "resumen_egreso": "",
            "indicaciones_egreso": "",
        }
        assert creado["nota_postoperatoria"] is None

        response = client.get(
            f"/api/procedimientos/{creado['id']}", headers=headers("dr.perez")
        )

        assert response.json()["procedimiento"] == creado

    def test_display_labels(self, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        assert creado["paciente_nombre"] == "Elena Ramírez Gómez"
        assert creado["cirujano_nombre"] == "Dr. Roberto Perez"
        assert creado["anestesiologo_nombre"] == "Dra. Ana Vega"
        assert creado["ayudante_nombre"] == "Dr. Carlos Soto"

    def test_new_procedure_has_no_sections(self, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        assert creado["nota_postoperatoria"] is None
        assert creado["nota_alta"] is None
        assert creado["fotos"] == []

    def test_anesthesiologist_and_assistant_are_optional(self, nuevo_procedimiento):
        creado = nuevo_procedimiento(anestesiologo_id=None, ayudante_id=None)

        assert creado["anestesiologo_nombre"] == "N/A"
        assert creado["ayudante_nombre"] == "N/A"

    def test_full_replace_bumps_version(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        payload = {**creado, "diagnostico": "Colecistitis aguda"}

        response = client.post("/api/procedimientos", json=payload, headers=headers("admin"))

        assert response.status_code == 200
        actualizado = response.json()["procedimiento"]
        assert actualizado["id"] == creado["id"]
        assert actualizado["version"] == 2
        assert actualizado["diagnostico"] == "Colecistitis aguda"

    def test_stale_version_is_rejected(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        client.post(
            "/api/procedimientos",
            json={**creado, "diagnostico": "Primera edición"},
            headers=headers("admin"),
        )

        response = client.post(
            "/api/procedimientos",
            json={**creado, "diagnostico": "Edición con versión vieja"},
            headers=headers("adm.rios"),
        )

        assert response.status_code == 409
        guardado = client.get(
            f"/api/procedimientos/{creado['id']}", headers=headers("admin")
        ).json()["procedimiento"]
        assert guardado["diagnostico"] == "Primera edición"

    def test_update_without_version_is_422(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        payload = {**creado}
        payload.pop("version")

        response = client.post("/api/procedimientos", json=payload, headers=headers("admin"))

        assert response.status_code == 422

    def test_update_unknown_id_is_404(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.post(
            "/api/procedimientos",
            json={**creado, "id": 9999},
            headers=headers("admin"),
        )

        assert response.status_code == 404

    def test_unknown_patient_is_422(self, client, headers, ids):
        response = client.post(
            "/api/procedimientos",
            json={
                "paciente_id": 9999,
                "medico_id": ids["dr.perez"],
                "fecha_qx": "2025-08-22",
                "diagnostico": "Hernia inguinal",
                "qx_planeada": "Hernioplastia",
            },
            headers=headers("admin"),
        )

        assert response.status_code == 422


class TestStaffRules:
    @pytest.mark.parametrize(
        "campo,login",
        [
            ("medico_id", "dra.vega"),
            ("medico_id", "dr.gomez"),
            ("medico_id", "enf.lopez"),
            ("anestesiologo_id", "dr.soto"),
            ("ayudante_id", "adm.rios"),
        ],
    )
    def test_ineligible_staff_is_422(self, client, headers, ids, pacientes, campo, login):
        payload = {
            "paciente_id": pacientes["roberto"].id,
            "medico_id": ids["dr.perez"],
            "fecha_qx": "2025-08-22",
            "diagnostico": "Fractura de tobillo",
            "qx_planeada": "Reducción abierta y fijación interna",
        }
        payload[campo] = ids[login]

        response = client.post("/api/procedimientos", json=payload, headers=headers("admin"))

        assert response.status_code == 422
        assert "no puede asignarse" in response.json()["detail"]

    def test_general_practitioner_may_assist(self, nuevo_procedimiento, ids):
        creado = nuevo_procedimiento(ayudante_id=ids["dr.gomez"])
        assert creado["ayudante_nombre"] == "Dr. Luis Gómez"

    def test_surgeon_cannot_also_assist(self, client, headers, ids, pacientes):
        response = client.post(
            "/api/procedimientos",
            json={
                "paciente_id": pacientes["elena"].id,
                "medico_id": ids["dr.perez"],
                "ayudante_id": ids["dr.perez"],
                "fecha_qx": "2025-08-22",
                "diagnostico": "Colecistitis crónica",
                "qx_planeada": "Colecistectomía laparoscópica",
            },
            headers=headers("admin"),
        )

        assert response.status_code == 422

    def test_unknown_staff_id_is_422(self, client, headers, ids, pacientes):
        response = client.post(
            "/api/procedimientos",
            json={
                "paciente_id": pacientes["elena"].id,
                "medico_id": 9999,
                "fecha_qx": "2025-08-22",
                "diagnostico": "Colecistitis crónica",
                "qx_planeada": "Colecistectomía laparoscópica",
            },
            headers=headers("admin"),
        )

        assert response.status_code == 422
        assert "no existe" in response.json()["detail"]


class TestListado:
    def test_filters(self, client, headers, ids, pacientes, nuevo_procedimiento):
        a = nuevo_procedimiento(fecha_qx="2025-08-22")
        b = nuevo_procedimiento(
            fecha_qx="2025-08-23",
            paciente_id=pacientes["roberto"].id,
            medico_id=ids["dr.soto"],
            ayudante_id=ids["dr.gomez"],
        )
        auth = headers("enf.lopez")

        todos = client.get("/api/procedimientos", headers=auth).json()["procedimientos"]
        assert [p["id"] for p in todos] == [a["id"], b["id"]]

        por_fecha = client.get(
            "/api/procedimientos", params={"fecha": "2025-08-23"}, headers=auth
        ).json()["procedimientos"]
        assert [p["id"] for p in por_fecha] == [b["id"]]

        por_paciente = client.get(
            "/api/procedimientos",
            params={"paciente_id": pacientes["elena"].id},
            headers=auth,
        ).json()["procedimientos"]
        assert [p["id"] for p in por_paciente] == [a["id"]]

        por_ayudante = client.get(
            "/api/procedimientos", params={"personal_id": ids["dr.gomez"]}, headers=auth
        ).json()["procedimientos"]
        assert [p["id"] for p in por_ayudante] == [b["id"]]

    def test_schedule_row_labels(self, client, headers, nuevo_procedimiento):
        nuevo_procedimiento(ayudante_id=None)

        fila = client.get(
            "/api/procedimientos", headers=headers("admin")
        ).json()["procedimientos"][0]

        assert fila["cirujano"] == "Dr. Roberto Perez"
        assert fila["anestesiologo"] == "Dra. Ana Vega"
        assert fila["ayudante"] == "N/A"

    def test_requires_token(self, client, personal):
        assert client.get("/api/procedimientos").status_code == 401


class TestStatus:
    def test_patch_status_only_changes_status(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.patch(
            f"/api/procedimientos/{creado['id']}/status",
            json={"status": "Post-op"},
            headers=headers("dr.perez"),
        )

        assert response.status_code == 200
        actualizado = response.json()["procedimiento"]
        assert actualizado["status"] == "Post-op"
        assert actualizado["version"] == creado["version"] + 1
        assert actualizado["diagnostico"] == creado["diagnostico"]
        assert actualizado["medico_id"] == creado["medico_id"]

    def test_invalid_status_is_422(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.patch(
            f"/api/procedimientos/{creado['id']}/status",
            json={"status": "Cancelado"},
            headers=headers("admin"),
        )

        assert response.status_code == 422

    def test_nurse_cannot_change_status(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.patch(
            f"/api/procedimientos/{creado['id']}/status",
            json={"status": "Alta"},
            headers=headers("enf.lopez"),
        )

        assert response.status_code == 403


class TestPermisos:
    @pytest.mark.parametrize("login", ["dra.vega", "enf.lopez"])
    def test_clinical_roles_cannot_schedule(self, client, headers, ids, pacientes, login):
        response = client.post(
            "/api/procedimientos",
            json={
                "paciente_id": pacientes["elena"].id,
                "medico_id": ids["dr.perez"],
                "fecha_qx": "2025-08-22",
                "diagnostico": "Colecistitis crónica",
                "qx_planeada": "Colecistectomía laparoscópica",
            },
            headers=headers(login),
        )

        assert response.status_code == 403


class TestEliminar:
    def test_delete_then_get_is_404(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.delete(
            f"/api/procedimientos/{creado['id']}", headers=headers("adm.rios")
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(
            f"/api/procedimientos/{creado['id']}", headers=headers("admin")
        ).status_code == 404

    def test_delete_is_idempotent(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        url = f"/api/procedimientos/{creado['id']}"
        client.delete(url, headers=headers("admin"))

        response = client.delete(url, headers=headers("admin"))

        assert response.status_code == 200
        assert "no existía" in response.json()["message"]

    def test_doctor_cannot_delete(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.delete(
            f"/api/procedimientos/{creado['id']}", headers=headers("dr.perez")
        )

        assert response.status_code == 403
