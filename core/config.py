# core/config.py
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///lending.db")

# Sessions expire this many hours after the last authenticated request
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))

# Candidates tried before display id generation gives up
ID_MAX_ATTEMPTS = int(os.getenv("ID_MAX_ATTEMPTS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() in ("1", "true", "yes")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:4173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
