# /app/core/config.py

"""
Central runtime configuration.

Every setting is read once from the environment (a local `.env` file is
loaded first for development) and exposed as a module-level constant.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# --- Database ---
# SQLite is the local default; production points this at PostgreSQL.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./classroom.db")

# --- Auth ---
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# --- Feature Settings ---
NOTIFICATIONS_PAGE_SIZE = int(os.getenv("NOTIFICATIONS_PAGE_SIZE", "20"))
MAX_HOMEWORK_GRADE = 10.0
MIN_HOMEWORK_GRADE = 0.0

# --- Server ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
