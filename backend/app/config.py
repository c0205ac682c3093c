"""Application configuration from environment (APP_ prefix)."""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Server settings with defaults for the bet API."""

    model_config = ConfigDict(env_prefix="APP_")

    # Server
    debug: bool = False
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    # Stakes accepted by /api/bet/place and /api/bet/many-spins
    allowed_bets: list[int] = [1, 5, 10, 25, 50, 100]

    # Batch spins
    default_spins: int = 1000
    min_spins: int = 1
    max_spins: int = 10_000_000


settings = Settings()
