import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance"),
}

# Shift profile used for employees without their own: day | night | night-0400
SHIFT_PROFILE = os.getenv("SHIFT_PROFILE", "day")
# Optional override of the profile's overtime rule: fixed-threshold | checkout-boundary
OVERTIME_POLICY = os.getenv("OVERTIME_POLICY") or None
STANDARD_HOURS = float(os.getenv("STANDARD_HOURS", "8"))

# Number of trusted reverse proxies in front of the app; 0 uses the socket address
PROXY_FIX_HOPS = int(os.getenv("PROXY_FIX_HOPS", "0"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
