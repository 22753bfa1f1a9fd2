"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────
    POSTGRES_USER: str = "brokerage_user"
    POSTGRES_PASSWORD: str = "brokerage_pass"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "brokerage_db"

    # Full async URL; when set it wins over the POSTGRES_* parts
    # (e.g. sqlite+aiosqlite:///./brokerage.db for local runs).
    DATABASE_URL_OVERRIDE: str = ""

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for Alembic migrations (psycopg2)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE.replace("+aiosqlite", "").replace("+asyncpg", "")
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Sequence generator ───────────────────
    SEQUENCE_MAX_RETRIES: int = 5
    SEQUENCE_RETRY_BACKOFF_MS: int = 50
    SEQUENCE_COMPENSATE_ON_FAILURE: bool = True

    # ── Document codes ───────────────────────
    CODE_PREFIX: str = "MEIBL"

    # ── Financial defaults ───────────────────
    DEFAULT_VAT_PCT: float = 7.5
    DEFAULT_AGENT_COMMISSION_PCT: float = 0.0
    DEFAULT_LEVY_RATES: dict[str, float] = Field(
        default_factory=lambda: {"niacom": 1.0, "ncrib": 0.5, "ed_tax": 0.5}
    )
    DEFAULT_CURRENCY: str = "NGN"

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = ""
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
