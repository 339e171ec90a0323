import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    cors_origins: tuple[str, ...]
    token_max_age_days: int
    log_level: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///kitchenops.db"),
        cors_origins=_split_origins(_getenv("CORS_ORIGINS", "http://localhost:5173")),
        token_max_age_days=int(_getenv("TOKEN_MAX_AGE_DAYS", "30")),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "CORS_ORIGINS": list(s.cors_origins),
        "TOKEN_MAX_AGE_SECONDS": s.token_max_age_days * 24 * 60 * 60,
        "LOG_LEVEL": s.log_level,
        # JSON payloads only; spreadsheet imports are small
        "MAX_CONTENT_LENGTH": 5 * 1024 * 1024,
    }
