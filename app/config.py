from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

# Backend root (the directory that holds ``app/``)
_BACKEND_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = f"sqlite:///{_BACKEND_ROOT / 'clinica_sic.db'}"

    # JWT
    JWT_SECRET: str = "change-this-secret-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 720  # 12 hours, one clinical shift

    # App
    APP_NAME: str = "Clínica SIC"
    DEBUG: bool = True
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Clinic identity printed on every document
    CLINICA_NOMBRE: str = "Clínica SIC"
    CLINICA_DIRECCION: str = "Dirección de la Clínica, Cancún, Q.Roo"
    ID_HOSPITAL: int = 1

    # Default admin account created on startup when missing
    ADMIN_LOGIN: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # CORS: se puede sobreescribir con env var CORS_ORIGINS como JSON array
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # File storage
    FOTOS_DIR: Path = _BACKEND_ROOT / "storage" / "fotos"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
