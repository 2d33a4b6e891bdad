import os
import re
from dataclasses import dataclass, field
from dotenv import load_dotenv

DEFAULT_TOKEN_EXPIRES_IN = 7 * 24 * 60 * 60

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | int | None, default: int = DEFAULT_TOKEN_EXPIRES_IN) -> int:
    """Seconds from `3600`, `"3600"`, `"30m"`, `"12h"` or `"7d"`."""
    if value is None:
        return default
    if isinstance(value, int):
        return value

    raw = value.strip().lower()
    if not raw:
        return default

    match = re.fullmatch(r"(\d+)\s*([smhd]?)", raw)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit or "s"]


@dataclass(frozen=True)
class Settings:
    secret_key: str
    database_url: str = "sqlite:///./tasks.db"
    token_expires_in: int = DEFAULT_TOKEN_EXPIRES_IN
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    env: str = "development"
    port: int = 3001
    log_level: str = "INFO"


def get_settings() -> Settings:
    load_dotenv()

    secret_key = os.getenv("SECRET_KEY")
    if not secret_key:
        raise RuntimeError("SECRET_KEY is not set")

    origins = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    return Settings(
        secret_key=secret_key,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./tasks.db"),
        token_expires_in=parse_duration(os.getenv("TOKEN_EXPIRES_IN", "7d")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        env=os.getenv("ENV", "development"),
        port=int(os.getenv("PORT", 3001)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
