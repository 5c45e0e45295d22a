# ========================================
# teamup/config.py - ENVIRONMENT SETTINGS
# ========================================

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the project root, then fall back to the working directory
current_dir = Path(__file__).resolve().parent   # teamup/
backend_dir = current_dir.parent                 # project root
env_path = backend_dir / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()

# ===========================
# DATABASE
# ===========================
MONGO_URI = os.getenv("MONGO_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "teamup")

# ===========================
# TOKENS
# ===========================
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "access_secret_CHANGE_THIS")
REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "refresh_secret_CHANGE_THIS")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

# ===========================
# HTTP
# ===========================
raw_origins = os.getenv("ALLOWED_ORIGINS", "")
ALLOWED_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]

# ===========================
# LOGGING
# ===========================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()  # console | json

# ===========================
# WORKFLOW
# ===========================
# Compare-and-swap attempts for a slot admission before giving up
ACCEPT_MAX_ATTEMPTS = int(os.getenv("ACCEPT_MAX_ATTEMPTS", "5"))
