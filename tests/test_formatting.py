"""Display helpers: age, staff titles, specialty matching and Spanish dates."""

import datetime
from types import SimpleNamespace

import pytest

from app.utils.formatting import (
    calcular_edad,
    es_anestesiologo,
    es_medicina_general,
    fecha_castellano,
    fecha_larga,
    formatear_nombre_medico,
    parse_fecha,
)


def _usuario(nombre, apellido, rol="Medico"):
    return SimpleNamespace(nombre=nombre, apellido=apellido, rol=rol)


class TestCalcularEdad:
    def test_day_before_birthday(self):
        assert calcular_edad(datetime.date(1990, 2, 10), datetime.date(2024, 2, 9)) == 33

    def test_on_birthday(self):
        assert calcular_edad(datetime.date(1990, 2, 10), datetime.date(2024, 2, 10)) == 34

    def test_earlier_month(self):
        assert calcular_edad(datetime.date(1985, 5, 20), datetime.date(2025, 1, 31)) == 39

    def test_missing_birth_date(self):
        assert calcular_edad(None) is None


class TestFormatearNombreMedico:
    @pytest.mark.parametrize(
        "nombre,apellido,esperado",
        [
            ("Ana", "Vega", "Dra. Ana Vega"),
            ("Carlos", "Soto", "Dr. Carlos Soto"),
            ("Isabel", "Ruiz", "Dra. Isabel Ruiz"),
            ("Carmen", "Díaz", "Dra. Carmen Díaz"),
            ("Roberto", "Perez", "Dr. Roberto Perez"),
        ],
    )
    def test_title_follows_given_name(self, nombre, apellido, esperado):
        assert formatear_nombre_medico(_usuario(nombre, apellido)) == esperado

    def test_non_doctor_has_no_title(self):
        assert formatear_nombre_medico(_usuario("Laura", "López", "Enfermeria")) == "Laura López"

    def test_missing_user(self):
        assert formatear_nombre_medico(None) == "N/A"


class TestEspecialidades:
    @pytest.mark.parametrize("texto", ["Anestesióloga", "ANESTESIOLOGIA", "anestesiólogo pediatra"])
    def test_anesthesiology_ignores_case_and_accents(self, texto):
        assert es_anestesiologo(texto)

    def test_surgeon_is_not_anesthesiologist(self):
        assert not es_anestesiologo("Cirujano General")
        assert not es_anestesiologo(None)

    @pytest.mark.parametrize("texto", ["Médico General", "medicina general"])
    def test_general_medicine(self, texto):
        assert es_medicina_general(texto)

    def test_general_surgeon_is_not_general_medicine(self):
        assert not es_medicina_general("Cirujano General")


class TestFechas:
    def test_fecha_larga(self):
        assert fecha_larga(datetime.date(2025, 8, 22)) == "22 de agosto de 2025"

    def test_fecha_castellano(self):
        assert fecha_castellano(datetime.date(2025, 8, 22)) == "viernes, 22 de agosto de 2025"

    @pytest.mark.parametrize("valor", ["", None, "22/08/2025", "2025-13-01"])
    def test_parse_fecha_rejects_bad_input(self, valor):
        assert parse_fecha(valor) is None

    def test_parse_fecha(self):
        assert parse_fecha("2025-08-22") == datetime.date(2025, 8, 22)
