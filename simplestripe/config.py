import os
from pathlib import Path
from dotenv import load_dotenv

# Force-load .env from the project root (reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def database_url():
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set. Check your .env file.")
    return url


def jwt_secret():
    return os.getenv("JWT_SECRET")


def store_url():
    return os.getenv("STORE_URL", "http://localhost:8000").rstrip("/")


def log_level():
    return os.getenv("LOG_LEVEL", "INFO").upper()
