"""Clinical documents: section reads with prefills, scoped saves and PDF rendering."""

import pytest

from app.services.documento_service import TIPOS_DOCUMENTO


def _url(procedimiento_id, tipo=""):
    base = f"/api/procedimientos/{procedimiento_id}/documentos"
    return f"{base}/{tipo}" if tipo else base


class TestTipos:
    def test_lists_every_document_type(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.get(_url(creado["id"]), headers=headers("enf.lopez"))

        assert response.status_code == 200
        tipos = {t["tipo"]: t for t in response.json()}
        assert set(tipos) == set(TIPOS_DOCUMENTO)
        assert tipos["consentimiento_anestesico"]["editable"] is False
        assert tipos["consentimiento_anestesico"]["seccion"] == "consentimiento"
        assert tipos["indicaciones_postoperatorias"]["seccion"] == "indicaciones_postop"

    def test_unknown_type_is_404(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.get(_url(creado["id"], "receta"), headers=headers("admin"))

        assert response.status_code == 404

    def test_unknown_procedure_is_404(self, client, headers, personal):
        response = client.get(_url(9999, "nota_alta"), headers=headers("admin"))
        assert response.status_code == 404


class TestPrefill:
    def test_unsaved_section_has_complete_default_shape(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        body = client.get(
            _url(creado["id"], "nota_preanestesica"), headers=headers("dra.vega")
        ).json()

        assert body["guardado"] is False
        assert body["datos"]["via_aerea"]["mallampati"] == ""
        assert body["datos"]["laboratorio"]["inr"] == ""
        assert body["datos"]["ekg"] == ""

    def test_postop_note_is_prefilled_from_the_procedure(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        datos = client.get(
            _url(creado["id"], "nota_postoperatoria"), headers=headers("dr.perez")
        ).json()["datos"]

        assert datos["diagnostico_postqx"] == "Colecistitis crónica"
        assert datos["cirugia_realizada"] == "Colecistectomía laparoscópica"
        assert datos["incidentes"] == "Ninguno"

    def test_discharge_note_uses_document_date_and_postop_diagnosis(
        self, client, headers, nuevo_procedimiento
    ):
        creado = nuevo_procedimiento()
        client.put(
            _url(creado["id"], "nota_postoperatoria"),
            json={"diagnostico_postqx": "Colecistitis crónica litiásica"},
            headers=headers("dr.perez"),
        )

        datos = client.get(
            _url(creado["id"], "nota_alta"),
            params={"fecha": "2025-08-25"},
            headers=headers("dr.perez"),
        ).json()["datos"]

        assert datos["fecha_egreso"] == "2025-08-25"
        assert datos["dx_egreso"] == "Colecistitis crónica litiásica"
        assert datos["motivo_egreso"] == "mejoria"

    def test_reading_never_writes(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        client.get(_url(creado["id"], "nota_alta"), headers=headers("admin"))

        guardado = client.get(
            f"/api/procedimientos/{creado['id']}", headers=headers("admin")
        ).json()["procedimiento"]

        assert guardado["nota_alta"] is None
        assert guardado["version"] == creado["version"]


class TestGuardar:
    def test_save_fills_missing_fields(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.put(
            _url(creado["id"], "nota_ingreso"),
            json={"signos_vitales": {"ta": "120/80", "fc": 75}, "interrogatorio": None},
            headers=headers("enf.lopez"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["guardado"] is True
        assert body["seccion"] == "resumen_ingreso"
        assert body["datos"]["signos_vitales"] == {
            "ta": "120/80", "fc": "75", "fr": "", "temp": "", "sat_o2": "",
        }
        assert body["datos"]["interrogatorio"] == ""

    def test_save_only_touches_its_section(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        consentimiento = {"riesgos": "Sangrado, infección.", "beneficios": "Resolución del cuadro."}
        client.put(
            _url(creado["id"], "consentimiento_quirurgico"),
            json=consentimiento,
            headers=headers("dr.perez"),
        )

        client.put(
            _url(creado["id"], "indicaciones_postoperatorias"),
            json={"medicamentos": "Paracetamol 1g IV cada 8 horas."},
            headers=headers("enf.lopez"),
        )

        guardado = client.get(
            f"/api/procedimientos/{creado['id']}", headers=headers("admin")
        ).json()["procedimiento"]
        assert guardado["consentimiento"] == consentimiento
        assert guardado["indicaciones_postop"]["medicamentos"] == "Paracetamol 1g IV cada 8 horas."
        assert guardado["nota_alta"] is None
        assert guardado["diagnostico"] == creado["diagnostico"]
        assert guardado["status"] == creado["status"]
        assert guardado["version"] == creado["version"] + 2

    def test_section_save_makes_full_replace_stale(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        client.put(
            _url(creado["id"], "nota_postanestesica"),
            json={"liquidos": "1000cc Solución Hartmann"},
            headers=headers("dra.vega"),
        )

        response = client.post(
            "/api/procedimientos",
            json={**creado, "qx_planeada": "Colecistectomía abierta"},
            headers=headers("adm.rios"),
        )

        assert response.status_code == 409

    def test_anesthesia_consent_is_read_only(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.put(
            _url(creado["id"], "consentimiento_anestesico"),
            json={"riesgos": "Otros"},
            headers=headers("dra.vega"),
        )

        assert response.status_code == 422

    def test_invalid_discharge_reason_is_422(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.put(
            _url(creado["id"], "nota_alta"),
            json={"motivo_egreso": "aburrimiento"},
            headers=headers("dr.perez"),
        )

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["motivo_egreso"]

    def test_administrative_role_cannot_save(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.put(
            _url(creado["id"], "nota_ingreso"),
            json={"interrogatorio": "Dolor abdominal"},
            headers=headers("adm.rios"),
        )

        assert response.status_code == 403


class TestPdf:
    @pytest.mark.parametrize("tipo", sorted(TIPOS_DOCUMENTO))
    def test_every_type_renders(self, client, headers, nuevo_procedimiento, tipo):
        creado = nuevo_procedimiento()

        response = client.get(
            _url(creado["id"], tipo) + "/pdf",
            params={"fecha": "2025-08-22"},
            headers=headers("enf.lopez"),
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_same_data_and_date_give_identical_bytes(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()
        url = _url(creado["id"], "consentimiento_quirurgico") + "/pdf"
        params = {"fecha": "2025-08-22"}

        primero = client.get(url, params=params, headers=headers("admin")).content
        segundo = client.get(url, params=params, headers=headers("admin")).content

        assert primero == segundo

    def test_filename_is_ascii(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.get(
            _url(creado["id"], "nota_alta") + "/pdf", headers=headers("admin")
        )

        assert (
            'filename="Nota_Alta_Elena_Ramirez_Gomez.pdf"'
            in response.headers["content-disposition"]
        )

    def test_save_and_render(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.post(
            _url(creado["id"], "nota_postoperatoria") + "/pdf",
            json={"sangrado": "50cc", "complicaciones": "Ninguna"},
            headers=headers("dr.perez"),
        )

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")
        guardado = client.get(
            _url(creado["id"], "nota_postoperatoria"), headers=headers("admin")
        ).json()
        assert guardado["guardado"] is True
        assert guardado["datos"]["sangrado"] == "50cc"

    @pytest.mark.parametrize(
        "tipo,datos",
        [
            (
                "nota_postoperatoria",
                {"complicaciones": "Sangrado en capa del lecho vesicular. " * 260},
            ),
            (
                "nota_preanestesica",
                {"antecedentes": {"cardiovascular": "Hipertensión arterial en control. " * 90}},
            ),
            (
                "nota_postoperatoria",
                {"incidentes": "\n".join(f"Incidente {n}" for n in range(120))},
            ),
        ],
    )
    def test_long_field_values_still_render(
        self, client, headers, nuevo_procedimiento, tipo, datos
    ):
        creado = nuevo_procedimiento()
        guardado = client.put(_url(creado["id"], tipo), json=datos, headers=headers("dr.perez"))
        assert guardado.status_code == 200

        response = client.get(
            _url(creado["id"], tipo) + "/pdf",
            params={"fecha": "2025-08-22"},
            headers=headers("dr.perez"),
        )

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")

    def test_failed_save_does_not_render(self, client, headers, nuevo_procedimiento):
        creado = nuevo_procedimiento()

        response = client.post(
            _url(creado["id"], "consentimiento_anestesico") + "/pdf",
            json={},
            headers=headers("dra.vega"),
        )

        assert response.status_code == 422
