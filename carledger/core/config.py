import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# .env lives next to the project root in dev, next to the executable when frozen
if getattr(sys, "frozen", False):
    BASE_DIR = Path(sys.executable).parent
else:
    BASE_DIR = Path(__file__).resolve().parents[2]

load_dotenv(dotenv_path=BASE_DIR / ".env")

# ---------------------
# Database
# ---------------------
DB_HOST = os.getenv("DB_HOST", "127.0.0.1")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "carledger")
DB_USER = os.getenv("DB_USER", "carledger")
DB_PASS = os.getenv("DB_PASS", "carledger")

# Fix the None / empty / "None" port issue
if not DB_PORT or str(DB_PORT).lower() == "none":
    DB_PORT = "5432"

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# ---------------------
# Server / logging
# ---------------------
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "5001"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "standard")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8080,http://localhost:8081,http://127.0.0.1:8080,http://127.0.0.1:8081",
    ).split(",")
    if o.strip()
]

# Header the upstream auth layer uses to pass the resolved user id
AUTH_USER_HEADER = "X-User-Id"

# Users registered with one of these emails may change system settings
ADMIN_EMAILS = {
    e.strip().lower()
    for e in os.getenv("ADMIN_EMAILS", "").split(",")
    if e.strip()
}
