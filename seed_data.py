"""Seed data script for the Clínica SIC database.

Populates the database with the demo staff, patients and surgeries used
during development. The script is idempotent: it checks for existing
records before inserting.

Usage (from the repository root):
    python seed_data.py
"""

from __future__ import annotations

import os
import sys
from datetime import date

# Ensure the app package is importable when running from the repo root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import models  # noqa: E402,F401
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models import Medico, Paciente, Procedimiento, Usuario  # noqa: E402
from app.schemas.documentos import SECCIONES  # noqa: E402
from app.utils.constants import STATUS_ALTA, STATUS_POSTOP, STATUS_PROGRAMADO  # noqa: E402
from app.utils.security import hash_password  # noqa: E402

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

HOY = date.today()
DEMO_PASSWORD = "password"


def _d(year: int, month: int, day: int) -> date:
    """Shorthand date constructor."""
    return date(year, month, day)


def _seccion(nombre: str, datos: dict) -> dict:
    """Normalise a section dict through its schema so stored JSON is complete."""
    return SECCIONES[nombre].model_validate(datos).model_dump()


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_usuarios(session) -> dict[str, Usuario]:
    """Insert the seven demo accounts; doctors get their ``Medico`` profile."""
    if session.query(Usuario).count() > 0:
        print("  [SKIP] Usuario — table already has data.")
        return {u.login: u for u in session.query(Usuario).all()}

    # login, email, password, nombre, apellido, telefono, rol
    registros = [
        ("admin", "admin@clinica.com", "admin", "Admin", "General", "555-0101", "Admin"),
        ("dra.vega", "ana.vega@clinica.com", DEMO_PASSWORD, "Ana", "Vega", "555-0102", "Medico"),
        ("dr.soto", "carlos.soto@clinica.com", DEMO_PASSWORD, "Carlos", "Soto", "555-0103", "Medico"),
        ("enf.lopez", "laura.lopez@clinica.com", DEMO_PASSWORD, "Laura", "López", "555-0104", "Enfermeria"),
        ("adm.rios", "mario.rios@clinica.com", DEMO_PASSWORD, "Mario", "Ríos", "555-0105", "Administrativo"),
        ("dr.perez", "roberto.perez@clinica.com", DEMO_PASSWORD, "Roberto", "Perez", "555-0106", "Medico"),
        ("dr.gomez", "luis.gomez@clinica.com", DEMO_PASSWORD, "Luis", "Gómez", "555-0107", "Medico"),
    ]
    perfiles = {
        "dra.vega": ("12345678", "Anestesióloga"),
        "dr.soto": ("87654321", "Cirujano Ortopedista"),
        "dr.perez": ("11223344", "Cirujano General"),
        "dr.gomez": ("44332211", "Médico General"),
    }

    usuarios: dict[str, Usuario] = {}
    for login, email, password, nombre, apellido, telefono, rol in registros:
        usuario = Usuario(
            login=login,
            email=email,
            password_hash=hash_password(password),
            nombre=nombre,
            apellido=apellido,
            telefono=telefono,
            rol=rol,
            id_hospital=1,
            activo=True,
        )
        if login in perfiles:
            cedula, especialidad = perfiles[login]
            usuario.perfil_medico = Medico(cedula=cedula, especialidad=especialidad)
        session.add(usuario)
        usuarios[login] = usuario

    session.flush()
    print(f"  Inserted {len(usuarios)} usuarios ({len(perfiles)} con perfil médico).")
    return usuarios


def seed_pacientes(session) -> list[Paciente]:
    """Insert four demo patients."""
    if session.query(Paciente).count() > 0:
        print("  [SKIP] Paciente — table already has data.")
        return session.query(Paciente).order_by(Paciente.id).all()

    registros = [
        Paciente(
            nombre="Elena",
            apellido="Ramírez Gómez",
            fecha_nacimiento=_d(1985, 5, 20),
            sexo="F",
            rfc="RAGE850520HDF",
            telefono="555-0201",
        ),
        Paciente(
            nombre="Roberto",
            apellido="Jiménez López",
            fecha_nacimiento=_d(1972, 11, 15),
            sexo="M",
            rfc="JILR721115HDF",
            telefono="555-0202",
        ),
        Paciente(
            nombre="Sofía",
            apellido="Hernández Cruz",
            fecha_nacimiento=_d(1990, 2, 10),
            sexo="F",
            rfc="HECS900210MDF",
            telefono="555-0203",
        ),
        Paciente(
            nombre="Miguel Ángel",
            apellido="Flores",
            fecha_nacimiento=_d(2001, 7, 22),
            sexo="M",
            rfc="FLOM010722HDF",
            telefono="555-0204",
        ),
    ]
    session.add_all(registros)
    session.flush()
    print(f"  Inserted {len(registros)} pacientes.")
    return registros


def _procedimiento_completo(paciente, cirujano, anestesiologo, ayudante) -> Procedimiento:
    """Laparoscopic cholecystectomy with every document already filled in."""
    return Procedimiento(
        paciente_id=paciente.id,
        medico_id=cirujano.id,
        anestesiologo_id=anestesiologo.id,
        ayudante_id=ayudante.id,
        fecha_qx=HOY,
        diagnostico="Colecistitis crónica",
        qx_planeada="Colecistectomía laparoscópica",
        status=STATUS_POSTOP,
        version=1,
        consentimiento=_seccion("consentimiento", {
            "riesgos": (
                "Lesión de vía biliar, sangrado, infección de sitio quirúrgico, "
                "conversión a cirugía abierta."
            ),
            "beneficios": (
                "Resolución del cuadro de colecistitis, disminución del dolor, "
                "prevención de complicaciones como pancreatitis o colangitis."
            ),
        }),
        resumen_ingreso=_seccion("resumen_ingreso", {
            "signos_vitales": {"ta": "120/80", "fc": "75", "fr": "16", "temp": "36.5", "sat_o2": "98"},
            "interrogatorio": "Paciente refiere dolor en hipocondrio derecho de 2 semanas de evolución.",
            "exploracion_fisica": (
                "Abdomen blando, depresible, doloroso a la palpación en hipocondrio "
                "derecho, Murphy positivo."
            ),
            "plan_tratamiento": (
                "Se programa para colecistectomía laparoscópica bajo anestesia "
                "general balanceada."
            ),
        }),
        nota_preanestesica=_seccion("nota_preanestesica", {
            "antecedentes": {
                "tabaquismo": "Negado",
                "alcoholismo": "Social",
                "toxicomanias": "Negado",
                "ejercicio": "Ocasional",
                "asma": "Negado",
                "alergias": "Penicilina",
                "cardiovascular": "Hipertensión controlada",
                "pulmonar": "Negado",
                "endocrinologico": "Negado",
                "antecedentes_anestesicos": "Anestesia general en 2010 sin complicaciones",
                "antecedentes_quirurgicos": "Apendicectomía en 2010",
            },
            "exploracion": {
                "peso": "65", "talla": "160", "ta": "125/85", "fc": "80", "fr": "17",
                "temp": "36.6", "sat_o2": "97", "tegumentos": "Normal", "cabeza": "Normal",
                "traquea": "Central", "cardiopulmonar": "Bien ventilados",
                "cardio": "Rítmico", "extremidades": "Normales",
            },
            "via_aerea": {
                "mallampati": "Clase I",
                "aldrete": "9",
                "bellhouse_dorr": "Grado I",
                "interincisiva": "4 cm",
                "otras": "Ninguna",
            },
            "laboratorio": {
                "hb": "13.5", "hct": "40", "leucos": "8.5", "plaquetas": "250",
                "glucosa": "95", "creatinina": "0.8", "bun": "15", "urea": "30",
                "tp": "12.5", "ttp": "30", "inr": "1.0",
            },
            "ekg": "Ritmo sinusal, sin alteraciones.",
            "plan_anestesico": {
                "valoraciones": "Valoración cardiológica preoperatoria sin contraindicaciones.",
                "plan": "Anestesia general balanceada con intubación orotraqueal.",
                "indicaciones": "Ayuno de 8 horas, continuar antihipertensivo.",
            },
        }),
        nota_postanestesica=_seccion("nota_postanestesica", {
            "tecnica_anestesica": "Anestesia general balanceada con Sevoflurano, Fentanilo y Rocuronio.",
            "liquidos": "1000cc Solución Hartmann",
            "inicio_anestesia": "08:00",
            "termino_anestesia": "09:30",
            "inicio_cirugia": "08:15",
            "termino_cirugia": "09:15",
            "signos_vitales_ingreso_ucpa": {"ta": "110/70", "fc": "70", "fr": "15", "temp": "36.8", "sat_o2": "99"},
            "signos_vitales_alta_ucpa": {"ta": "115/75", "fc": "68", "fr": "16", "temp": "36.7", "sat_o2": "98"},
            "signos_vitales_alta_anestesio": {"ta": "120/80", "fc": "65", "fr": "16", "temp": "36.6", "sat_o2": "98"},
            "indicaciones_alta_anestesio": (
                "Vigilar sangrado, control del dolor con analgésicos IV. Puede iniciar "
                "dieta líquida en 2 horas si no hay náuseas."
            ),
        }),
        nota_postoperatoria=_seccion("nota_postoperatoria", {
            "diagnostico_postqx": "Colecistitis crónica litiásica",
            "cirugia_realizada": "Colecistectomía laparoscópica",
            "tecnica": (
                "Bajo anestesia general balanceada, se realiza asepsia y antisepsia, se "
                "colocan trocares y se procede a la disección del triángulo de Calot, "
                "identificando arteria y conducto cístico, los cuales se ligan y "
                "seccionan. Se extrae vesícula biliar sin incidentes."
            ),
            "hallazgos": "Vesícula biliar de paredes engrosadas, con múltiples litos en su interior.",
            "sangrado": "50cc",
            "incidentes": "Ninguno",
            "complicaciones": "Ninguna",
            "cuenta_material": "Completa",
            "pronostico": "Bueno para la vida y la función.",
        }),
        indicaciones_postop=_seccion("indicaciones_postop", {
            "soluciones_dieta": "Dieta líquida por 24h, luego progresar a blanda según tolerancia.",
            "medicamentos": "Paracetamol 1g IV cada 8 horas.\nKetorolaco 30mg IV cada 12 horas.",
            "examenes": "No se requieren por el momento.",
            "actividades_enfermeria": (
                "Vigilar signos vitales cada 4 horas. Curación de herida quirúrgica "
                "cada 24h. Fomentar deambulación asistida."
            ),
        }),
        nota_alta=_seccion("nota_alta", {
            "fecha_egreso": HOY.isoformat(),
            "dx_egreso": "Postoperada de colecistectomía laparoscópica, evolución favorable.",
            "motivo_egreso": "mejoria",
            "resumen_egreso": (
                "Paciente evoluciona satisfactoriamente, sin dolor, tolera la vía oral. "
                "Heridas quirúrgicas limpias."
            ),
            "indicaciones_egreso": (
                "Cita en 7 días para retiro de puntos. Continuar con analgésicos vía "
                "oral. Dieta blanda."
            ),
        }),
    )


def seed_procedimientos(session, usuarios: dict[str, Usuario], pacientes: list[Paciente]) -> None:
    """Insert four surgeries covering every status."""
    if session.query(Procedimiento).count() > 0:
        print("  [SKIP] Procedimiento — table already has data.")
        return

    elena, roberto, sofia, miguel = pacientes[:4]
    vega = usuarios["dra.vega"]
    soto = usuarios["dr.soto"]
    perez = usuarios["dr.perez"]
    gomez = usuarios["dr.gomez"]

    registros = [
        _procedimiento_completo(elena, perez, vega, soto),
        Procedimiento(
            paciente_id=roberto.id,
            medico_id=soto.id,
            anestesiologo_id=vega.id,
            ayudante_id=perez.id,
            fecha_qx=HOY,
            diagnostico="Fractura de tobillo",
            qx_planeada="Reducción abierta y fijación interna",
            status=STATUS_PROGRAMADO,
        ),
        Procedimiento(
            paciente_id=sofia.id,
            medico_id=perez.id,
            anestesiologo_id=vega.id,
            ayudante_id=gomez.id,
            fecha_qx=HOY,
            diagnostico="Extracción de lipoma",
            qx_planeada="Resección de lipoma",
            status=STATUS_ALTA,
            nota_alta=_seccion("nota_alta", {
                "fecha_egreso": HOY.isoformat(),
                "dx_egreso": "Postoperada de resección de lipoma.",
                "motivo_egreso": "mejoria",
                "resumen_egreso": (
                    "Paciente egresa por mejoría, con herida quirúrgica limpia y sin "
                    "dolor. Cita en 7 días para retiro de puntos."
                ),
                "indicaciones_egreso": "Mantener herida limpia y seca.",
            }),
        ),
        Procedimiento(
            paciente_id=miguel.id,
            medico_id=perez.id,
            anestesiologo_id=vega.id,
            ayudante_id=soto.id,
            fecha_qx=_d(2025, 8, 22),
            diagnostico="Hernia inguinal",
            qx_planeada="Hernioplastia",
            status=STATUS_PROGRAMADO,
        ),
    ]
    session.add_all(registros)
    session.flush()
    print(f"  Inserted {len(registros)} procedimientos.")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the complete seed process within a single database transaction."""
    print("=" * 60)
    print("  Clínica SIC — Seed Data Script")
    print(f"  Fecha de cirugías: {HOY.isoformat()}")
    print("=" * 60)

    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        print("\n[1/3] Usuarios y perfiles médicos...")
        usuarios = seed_usuarios(session)

        print("\n[2/3] Pacientes...")
        pacientes = seed_pacientes(session)

        print("\n[3/3] Procedimientos...")
        seed_procedimientos(session, usuarios, pacientes)

        session.commit()
        print("\n" + "=" * 60)
        print("  Seed completado exitosamente.")
        print("=" * 60)

    except Exception as exc:
        session.rollback()
        print("\n[ERROR] Seed fallido, se hizo rollback.")
        print(f"  Detalle: {exc}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
