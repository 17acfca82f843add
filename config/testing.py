import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance_test"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "2")),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

ADMIN_USERNAME = None
ADMIN_PASSWORD = None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
