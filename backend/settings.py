import os
from pathlib import Path

# Basic settings helper to read environment configuration.

BACKEND_ROOT = Path(__file__).resolve().parent


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv(
            "DATABASE_URL", f"sqlite:///{BACKEND_ROOT / 'library.db'}"
        )
        self.JACKETS_ROOT: Path = Path(
            os.getenv("JACKETS_ROOT", str(BACKEND_ROOT / "uploads" / "jackets"))
        )
        self.JACKET_ENCODE_CONCURRENCY: int = max(
            1, _as_int(os.getenv("JACKET_ENCODE_CONCURRENCY"), 3)
        )
        self.LIST_PER_PAGE: int = max(1, _as_int(os.getenv("LIST_PER_PAGE"), 10))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
