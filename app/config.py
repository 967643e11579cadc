from typing import Literal
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    app_name: str = Field("Markdown Explorer", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_transactions: bool = Field(True, alias="DB_TRANSACTIONS")

    secret_key: str | None = Field(default=None, alias="SECRET_KEY")
    default_user_email: str = Field("explorer@localhost", alias="DEFAULT_USER_EMAIL")
    default_user_name: str = Field("Explorer", alias="DEFAULT_USER_NAME")

    deepseek_api_key: str | None = Field(default=None, alias="DEEPSEEK_API_KEY")
    deepseek_base_url: str = Field("https://api.deepseek.com", alias="DEEPSEEK_BASE_URL")
    default_model: str = Field("deepseek-chat", alias="DEFAULT_MODEL")
    provider_timeout_seconds: float = Field(60, alias="PROVIDER_TIMEOUT_SECONDS")
    # "preview" degrades to a local content preview, "raise" fails the request
    summary_failure_policy: Literal["preview", "raise"] = Field("preview", alias="SUMMARY_FAILURE_POLICY")

    rate_limit_window_seconds: int = Field(60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_calls: int = Field(30, alias="RATE_LIMIT_MAX_CALLS")

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
