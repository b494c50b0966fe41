"""Centralized configuration — all env vars in one place."""

import os


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Supabase (durable token storage)
        self.supabase_url: str | None = os.getenv("SUPABASE_URL")
        self.supabase_key: str | None = os.getenv("SUPABASE_ANON_KEY")
        self.supabase_table: str = os.getenv("SUPABASE_TABLE", "oauth_tokens")
        self.supabase_timeout_seconds: float = float(os.getenv("SUPABASE_TIMEOUT_SECONDS", "10"))

        # Token staging
        self.token_ttl_seconds: int = int(os.getenv("TOKEN_TTL_SECONDS", "600"))
        self.require_durable: bool = _env_bool("TOKEN_STORE_REQUIRE_DURABLE")
        self.sweep_enabled: bool = _env_bool("TOKEN_SWEEP_ENABLED")
        self.sweep_schedule: str = os.getenv("TOKEN_SWEEP_SCHEDULE", "0 */15 * * * *")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing env vars for durable token storage."""
        required = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "SUPABASE_URL": "supabase_url",
        "SUPABASE_ANON_KEY": "supabase_key",
    }
    return mapping.get(env_var, env_var.lower())
