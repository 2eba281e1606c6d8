import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
}

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "UTC")
CHECKIN_LEAD_MINUTES = int(os.getenv("CHECKIN_LEAD_MINUTES", "5"))
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))

REFRESH_INTERVAL_SECONDS = float(os.getenv("REFRESH_INTERVAL_SECONDS", "30"))
COUNTDOWN_TICK_SECONDS = float(os.getenv("COUNTDOWN_TICK_SECONDS", "1"))

STATION_TOKEN_PATH = os.getenv("STATION_TOKEN_PATH", "/var/lib/shift_attendance/station_token")
FACE_VERIFIER_URL = os.getenv("FACE_VERIFIER_URL", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
