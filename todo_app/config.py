"""Environment driven settings for the to-do service."""

import os
from pathlib import Path

DATA_FILE = Path(os.getenv("TODO_DATA_FILE", str(Path.cwd() / "data" / "tasks.json")))

ALLOWED_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173,http://localhost:8000",
).split(",")

LOG_LEVEL = os.getenv("TODO_LOG_LEVEL", "INFO").upper()

HOST = os.getenv("TODO_HOST", "127.0.0.1")
PORT = int(os.getenv("TODO_PORT", "8000"))

MAX_TITLE_LENGTH = 500
TITLE_WARNING_THRESHOLD = 450
