from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LT_TARGET_", case_sensitive=False)

    # Default /ping behavior, overridable per request via query params
    latency_ms: float = 10.0
    status_code: int = 200
    body_bytes: int = 64

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8000


settings = Settings()
