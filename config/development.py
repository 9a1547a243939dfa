import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

LEDGER_STORAGE = Config.LEDGER_STORAGE
DB_CONFIG = Config.db_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
EVENTS_PAGE_LIMIT = Config.EVENTS_PAGE_LIMIT

# If enabled (and LEDGER_STORAGE=mysql), app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
