import os
from pathlib import Path

_DEFAULT_SQLITE_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "keybot.db"


class Store:
    def __init__(self, config: dict | None = None) -> None:
        store_cfg = (config or {}).get("keybot", {}).get("store", {})
        self.SQL_DB_PATH: str = str(store_cfg.get("sql_db_path", os.getenv("SQL_DB_PATH", str(_DEFAULT_SQLITE_PATH))))
