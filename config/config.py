import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "attendance-ledger-dev-secret"

    # Lưu trữ sổ điểm danh: "memory" (một tiến trình) hoặc "mysql"
    LEDGER_STORAGE = os.environ.get("LEDGER_STORAGE", "memory")

    # Cấu hình DB
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "attendance_ledger")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    EVENTS_PAGE_LIMIT = int(os.environ.get("EVENTS_PAGE_LIMIT", "100"))

    # Dev helpers
    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
