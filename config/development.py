import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "homestay_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Minutes of tolerance around shift start (late) and shift end (early leave)
GRACE_MINUTES = int(os.getenv("GRACE_MINUTES", "15"))
# IANA name, e.g. "Asia/Ho_Chi_Minh"; empty means server local time
ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE") or None
SHIFT_LOCK_TIMEOUT_SECONDS = int(os.getenv("SHIFT_LOCK_TIMEOUT_SECONDS", "10"))
