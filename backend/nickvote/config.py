from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "nickvote-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "NickVote")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/nickvote_dev")

    # Sessions
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    session_ttl_hours: int = int(os.getenv("SESSION_TTL_HOURS", "24"))
    cookie_secure: bool = os.getenv("COOKIE_SECURE", "0") == "1"

    # Seeding
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin@nickvote.com")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")  # random when empty
    seed_password_length: int = int(os.getenv("SEED_PASSWORD_LENGTH", "10"))

settings = Settings()
