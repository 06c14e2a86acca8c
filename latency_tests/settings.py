from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LT_", case_sensitive=False)

    # Warm-up run before measurement; 0 disables it.
    warmup_seconds: float = 5.0

    # How often the deadline timer checks the clock.
    poll_interval_s: float = 1.0

    # None: requests may take as long as they need (the run deadline is the only limit).
    request_timeout_s: Optional[float] = None

    user_agent: str = "latency-tests"
    log_level: str = "WARNING"


settings = Settings()
