import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _init_database() -> None:
    """Create missing tables and the bootstrap admin account."""
    from app import models  # noqa: F401  (registers every mapper)
    from app.database import Base, SessionLocal, engine
    from app.services.usuario_service import asegurar_admin

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        asegurar_admin(db, settings.ADMIN_LOGIN, settings.ADMIN_PASSWORD)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not ensure admin account '%s'", settings.ADMIN_LOGIN)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: schema, admin user and photo directory
    _init_database()
    Path(settings.FOTOS_DIR).mkdir(parents=True, exist_ok=True)
    logger.info("%s listo (fotos en %s)", settings.APP_NAME, settings.FOTOS_DIR)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from app.routers import auth  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])

# Surgical schedule, documents and gallery
from app.routers import procedimientos  # noqa: E402

app.include_router(
    procedimientos.router,
    prefix="/api/procedimientos",
    tags=["Procedimientos"],
)

from app.routers import fotos  # noqa: E402

app.include_router(fotos.router, prefix="/api/fotos", tags=["Fotos"])

# Patient registry
from app.routers import pacientes  # noqa: E402

app.include_router(pacientes.router, prefix="/api/pacientes", tags=["Pacientes"])

# User administration
from app.routers import usuarios  # noqa: E402

app.include_router(usuarios.router, prefix="/api/usuarios", tags=["Usuarios"])

# Staff dropdown sources
from app.routers import medicos  # noqa: E402

app.include_router(medicos.router, prefix="/api/medicos", tags=["Personal"])

# Role menus and view resolution
from app.routers import navegacion  # noqa: E402

app.include_router(navegacion.router, prefix="/api/navegacion", tags=["Navegación"])

# Exportación (Excel + PDF)
from app.routers import exportacion  # noqa: E402

app.include_router(
    exportacion.router,
    prefix="/api/exportar",
    tags=["Exportación"],
)
