import logging
from functools import lru_cache

from pydantic import BaseModel, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wipelog.pipeline.document import DEFAULT_REPORT_URL
from wipelog.wcl.client import DEFAULT_API_URL


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""


class WCLConfig(BaseModel):
    access_token: SecretStr = SecretStr("")
    api_url: str = DEFAULT_API_URL
    report_url: str = DEFAULT_REPORT_URL
    timeout: float = 30.0


class ReportConfig(BaseModel):
    code: str = ""
    output_dir: str = "logs"
    max_deaths: int = 3
    event_limit: int = 500
    death_window_ms: int = 5000
    concurrency: int = 1  # 1 = strictly sequential fight fetches


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    wcl: WCLConfig = WCLConfig()
    report: ReportConfig = ReportConfig()

    @model_validator(mode="after")
    def _check_values(self):
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL {self.log_level!r} is not a logging level")
        if self.report.max_deaths < 0:
            raise ValueError("REPORT__MAX_DEATHS must be >= 0")
        if self.report.event_limit < 1:
            raise ValueError("REPORT__EVENT_LIMIT must be >= 1")
        if self.report.concurrency < 1:
            raise ValueError("REPORT__CONCURRENCY must be >= 1")
        return self

    def require(self) -> None:
        """Raise ConfigurationError unless the token and report code are set."""
        missing = []
        if not self.wcl.access_token.get_secret_value():
            missing.append("WCL__ACCESS_TOKEN")
        if not self.report.code:
            missing.append("REPORT__CODE")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
