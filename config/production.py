import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "homestay_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

GRACE_MINUTES = int(os.getenv("GRACE_MINUTES", "15"))
ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE") or None
SHIFT_LOCK_TIMEOUT_SECONDS = int(os.getenv("SHIFT_LOCK_TIMEOUT_SECONDS", "10"))
