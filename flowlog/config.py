from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    logger_name: str = Field(default="flowlog", alias="FLOWLOG_LOGGER_NAME")
    log_level: str = Field(default="INFO", alias="FLOWLOG_LOG_LEVEL")
    json_logs: bool = Field(default=True, alias="FLOWLOG_JSON_LOGS")
    # Empty keeps the historic "<prefix>lineNumber" key that downstream parsers expect.
    line_number_separator: str = Field(default="", alias="FLOWLOG_LINE_NUMBER_SEPARATOR")
    http_container_name: str = Field(default="http", alias="FLOWLOG_HTTP_CONTAINER_NAME")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
