import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

LEDGER_STORAGE = os.getenv("LEDGER_STORAGE", "mysql")
DB_CONFIG = Config.db_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL
EVENTS_PAGE_LIMIT = Config.EVENTS_PAGE_LIMIT

AUTO_INIT_DB = Config.AUTO_INIT_DB
