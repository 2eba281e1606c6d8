import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
}

# REST backend used by stations and the planner client
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "UTC")
CHECKIN_LEAD_MINUTES = int(os.getenv("CHECKIN_LEAD_MINUTES", "5"))
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))

REFRESH_INTERVAL_SECONDS = float(os.getenv("REFRESH_INTERVAL_SECONDS", "30"))
COUNTDOWN_TICK_SECONDS = float(os.getenv("COUNTDOWN_TICK_SECONDS", "1"))

STATION_TOKEN_PATH = os.getenv("STATION_TOKEN_PATH", "~/.shift_attendance/station_token")
FACE_VERIFIER_URL = os.getenv("FACE_VERIFIER_URL", "http://localhost:8001/verify")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
