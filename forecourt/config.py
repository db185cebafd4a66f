# forecourt/config.py
"""Process configuration.

Values come from the environment (and a local `.env`, if present). The admin
key is mandatory; everything else has a sensible default for local runs.
"""
import os
from datetime import timedelta
from typing import Literal, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    admin_key: str = Field(..., min_length=1)
    store_backend: Literal["file", "sql"] = "file"
    cars_file: str = "cars.json"
    cars_backup_file: Optional[str] = None
    postgres_url: Optional[str] = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    sold_hide_days: int = Field(7, ge=0)
    garages_file: str = "garages.json"
    static_dir: str = "public"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def hide_window(self) -> timedelta:
        return timedelta(days=self.sold_hide_days)

    @classmethod
    def from_env(cls) -> "Settings":
        admin_key = (os.getenv("ADMIN_KEY") or "").strip()
        if not admin_key:
            raise RuntimeError("ADMIN_KEY not set")
        return cls(
            admin_key=admin_key,
            store_backend=os.getenv("STORE_BACKEND", "file").lower(),
            cars_file=os.getenv("CARS_FILE", "cars.json"),
            cars_backup_file=os.getenv("CARS_BACKUP_FILE") or None,
            postgres_url=os.getenv("POSTGRES_URL") or None,
            db_pool_size=os.getenv("DB_POOL_SIZE", 5),
            db_max_overflow=os.getenv("DB_MAX_OVERFLOW", 10),
            sold_hide_days=os.getenv("SOLD_HIDE_DAYS", 7),
            garages_file=os.getenv("GARAGES_FILE", "garages.json"),
            static_dir=os.getenv("STATIC_DIR", "public"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=os.getenv("PORT", 3000),
        )
