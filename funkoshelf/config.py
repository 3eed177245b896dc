"""Configuration: env, data directory, TCP and HTTP endpoints."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of funkoshelf package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so FUNKOSHELF_* overrides are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("FUNKOSHELF_DATA_DIR", str(BASE_DIR / "data")))

# TCP request/response server
SERVER_HOST = os.getenv("FUNKOSHELF_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("FUNKOSHELF_PORT", "60300"))
# Seconds a client may take to finish sending (half-close); 0 disables
REQUEST_TIMEOUT_SEC = float(os.getenv("FUNKOSHELF_REQUEST_TIMEOUT", "30"))
MAX_REQUEST_BYTES = int(os.getenv("FUNKOSHELF_MAX_REQUEST_BYTES", str(1024 * 1024)))

# Client defaults
CLIENT_HOST = os.getenv("FUNKOSHELF_CLIENT_HOST", "localhost")
CLIENT_TIMEOUT_SEC = float(os.getenv("FUNKOSHELF_CLIENT_TIMEOUT", "10"))

# Optional HTTP gateway (served on the same event loop)
HTTP_ENABLED = os.getenv("FUNKOSHELF_HTTP_ENABLED", "0").lower() in ("1", "true", "yes")
HTTP_HOST = os.getenv("FUNKOSHELF_HTTP_HOST", "0.0.0.0")
HTTP_PORT = int(os.getenv("FUNKOSHELF_HTTP_PORT", "8000"))

LOG_LEVEL = os.getenv("FUNKOSHELF_LOG_LEVEL", "INFO").upper()


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
