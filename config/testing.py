SECRET_KEY = "test-secret"

# Tests never touch MySQL; every app gets a fresh in-memory ledger.
LEDGER_STORAGE = "memory"
DB_CONFIG = {}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
EVENTS_PAGE_LIMIT = 100

AUTO_INIT_DB = False
