import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance"),
}

SHIFT_PROFILE = os.getenv("SHIFT_PROFILE", "day")
OVERTIME_POLICY = os.getenv("OVERTIME_POLICY") or None
STANDARD_HOURS = float(os.getenv("STANDARD_HOURS", "8"))

# Number of trusted reverse proxies in front of the app; 0 uses the socket address
PROXY_FIX_HOPS = int(os.getenv("PROXY_FIX_HOPS", "0"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
