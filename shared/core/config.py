import os
from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    APP_NAME: str = "Travel Booking API"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", 1440))  # 24 hours default

    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASS: str = os.getenv("DB_PASS", "postgres")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    AUTH_DB_NAME: str = os.getenv("AUTH_DB_NAME", "travel_auth")
    TRAVEL_DB_NAME: str = os.getenv("TRAVEL_DB_NAME", "travel")

    # Full URLs win over the DB_* parts (used by tests and local sqlite runs)
    AUTH_DATABASE_URL: Optional[str] = os.getenv("AUTH_DATABASE_URL")
    TRAVEL_DATABASE_URL: Optional[str] = os.getenv("TRAVEL_DATABASE_URL")

    # Cloudinary image host
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_TIMEOUT: int = int(os.getenv("CLOUDINARY_TIMEOUT", 30))

    # First admin account, see shared/data/admin_insert.py
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_EMAIL: Optional[str] = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD: Optional[str] = os.getenv("ADMIN_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def _postgres_url(db_name: str) -> str:
    return (
        f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{db_name}"
    )


AUTH_DATABASE_URL = settings.AUTH_DATABASE_URL or _postgres_url(
    settings.AUTH_DB_NAME)

TRAVEL_DATABASE_URL = settings.TRAVEL_DATABASE_URL or _postgres_url(
    settings.TRAVEL_DB_NAME)
