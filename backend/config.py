# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Dict
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Required at startup: signing key and outbound mail credentials
    SECRET_KEY: str
    MAIL_USER: str
    MAIL_PASSWORD: str

    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    VERIFICATION_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./catalog.db"

    MAIL_HOST: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    MAIL_FROM: str = ""

    # Public backend URL used to build e-mail verification links
    BACKEND_URL: str = "http://127.0.0.1:8000"
    FRONTEND_URL: str = ""
    LOG_LEVEL: str = "INFO"

    # Capability required for mutations per resource: public | user | admin
    ROUTE_POLICIES: Dict[str, str] = {
        "categories": "admin",
        "products": "admin",
        "users": "admin",
        "reviews": "public",
        "orders": "public",
    }

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()
