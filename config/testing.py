import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance_test"),
}

SHIFT_PROFILE = os.getenv("SHIFT_PROFILE", "day")
OVERTIME_POLICY = None
STANDARD_HOURS = 8.0

PROXY_FIX_HOPS = 0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
