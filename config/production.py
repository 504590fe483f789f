import os

from config import split_codes

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

PROMOTED_WARNINGS = split_codes(os.getenv("PROMOTED_WARNINGS", ""))
ALLOW_NEGATIVE_VACATION = bool(int(os.getenv("ALLOW_NEGATIVE_VACATION", "0")))
BATCH_WORKERS = int(os.getenv("BATCH_WORKERS", "8"))
