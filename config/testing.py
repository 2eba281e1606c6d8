import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance_test"),
}

API_BASE_URL = "http://backend.test/api"
HTTP_TIMEOUT_SECONDS = 2.0

BUSINESS_TIMEZONE = "UTC"
CHECKIN_LEAD_MINUTES = 5
LATE_GRACE_MINUTES = 5

REFRESH_INTERVAL_SECONDS = 30.0
COUNTDOWN_TICK_SECONDS = 1.0

STATION_TOKEN_PATH = os.getenv("STATION_TOKEN_PATH", "/tmp/shift_attendance_test/station_token")
FACE_VERIFIER_URL = "http://verifier.test/verify"

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
