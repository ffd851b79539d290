import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./chronos.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))

# Gemini (AI insights and chat)
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# Storage behind the hosted timer: database, http, file or memory
CHRONOS_STATE_BACKEND = os.getenv("CHRONOS_STATE_BACKEND", "database").strip().lower()

# Remote CRUD API used by the HTTP state backend
CHRONOS_API_URL = os.getenv("CHRONOS_API_URL", "http://localhost:8000")

# Local state directory used by the file state backend
CHRONOS_STATE_DIR = os.getenv("CHRONOS_STATE_DIR", os.path.expanduser("~/.chronos"))

# Desktop notification + audio cue on timer completion
NOTIFICATIONS_ENABLED = os.getenv("CHRONOS_NOTIFICATIONS", "1").lower() not in ("0", "false", "no")
