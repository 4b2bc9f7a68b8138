"""
Pytest configuration for the entire test suite.

Every test gets a fresh in-memory SQLite database (one shared connection
through ``StaticPool``) wired into the app by overriding ``get_db``, and
its own photo directory under ``tmp_path``.
"""

from __future__ import annotations

import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.config import get_settings
from app.database import Base, get_db
from app.main import app
from app.models import Medico, Paciente, Usuario
from app.utils.security import create_access_token, hash_password, token_claims

PASSWORD = "password"

# Hashing is slow on purpose; every seeded account shares one hash.
_PASSWORD_HASH = hash_password(PASSWORD)

# login, nombre, apellido, rol, especialidad
_PERSONAL = [
    ("admin", "Admin", "General", "Admin", None),
    ("dra.vega", "Ana", "Vega", "Medico", "Anestesióloga"),
    ("dr.soto", "Carlos", "Soto", "Medico", "Cirujano Ortopedista"),
    ("enf.lopez", "Laura", "López", "Enfermeria", None),
    ("adm.rios", "Mario", "Ríos", "Administrativo", None),
    ("dr.perez", "Roberto", "Perez", "Medico", "Cirujano General"),
    ("dr.gomez", "Luis", "Gómez", "Medico", "Médico General"),
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fotos_dir(tmp_path, monkeypatch):
    directorio = tmp_path / "fotos"
    monkeypatch.setattr(get_settings(), "FOTOS_DIR", directorio)
    return directorio


@pytest.fixture
def client(session_factory, fotos_dir):
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def personal(db_session) -> dict[str, Usuario]:
    """The clinic staff, keyed by login."""
    usuarios: dict[str, Usuario] = {}
    for login, nombre, apellido, rol, especialidad in _PERSONAL:
        usuario = Usuario(
            login=login,
            email=f"{login}@clinica.com",
            password_hash=_PASSWORD_HASH,
            nombre=nombre,
            apellido=apellido,
            rol=rol,
            activo=True,
        )
        if especialidad is not None:
            usuario.perfil_medico = Medico(cedula="12345678", especialidad=especialidad)
        db_session.add(usuario)
        usuarios[login] = usuario
    db_session.commit()
    return usuarios


@pytest.fixture
def ids(personal) -> dict[str, int]:
    return {login: usuario.id for login, usuario in personal.items()}


@pytest.fixture
def headers(personal):
    """``headers("dra.vega")`` → ``Authorization`` header for that account."""

    def _headers(login: str) -> dict[str, str]:
        token = create_access_token(token_claims(personal[login]))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def pacientes(db_session) -> dict[str, Paciente]:
    registros = {
        "elena": Paciente(
            nombre="Elena",
            apellido="Ramírez Gómez",
            fecha_nacimiento=datetime.date(1985, 5, 20),
            sexo="F",
            rfc="RAGE850520HDF",
            telefono="555-0201",
        ),
        "roberto": Paciente(
            nombre="Roberto",
            apellido="Jiménez López",
            fecha_nacimiento=datetime.date(1972, 11, 15),
            sexo="M",
            rfc="JILR721115HDF",
            telefono="555-0202",
        ),
        "sofia": Paciente(
            nombre="Sofía",
            apellido="Hernández Cruz",
            fecha_nacimiento=datetime.date(1990, 2, 10),
            sexo="F",
            rfc="HECS900210MDF",
            telefono="555-0203",
        ),
    }
    db_session.add_all(registros.values())
    db_session.commit()
    return registros


@pytest.fixture
def nuevo_procedimiento(client, headers, ids, pacientes):
    """Create a procedure through the API and return its JSON record."""

    def _crear(**cambios) -> dict:
        payload = {
            "paciente_id": pacientes["elena"].id,
            "medico_id": ids["dr.perez"],
            "anestesiologo_id": ids["dra.vega"],
            "ayudante_id": ids["dr.soto"],
            "fecha_qx": "2025-08-22",
            "diagnostico": "Colecistitis crónica",
            "qx_planeada": "Colecistectomía laparoscópica",
        }
        payload.update(cambios)
        response = client.post(
            "/api/procedimientos", json=payload, headers=headers("adm.rios")
        )
        assert response.status_code == 200, response.text
        return response.json()["procedimiento"]

    return _crear
