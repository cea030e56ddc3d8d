from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from imgconvert.core.constants import (
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_LOG_SIZE_MB,
)


class Settings(BaseSettings):
    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    enable_file_logging: bool = Field(
        default=False, description="Also write logs to a rotating file"
    )
    log_dir: str = Field(default=DEFAULT_LOG_DIR, description="Directory for log files")
    max_log_size_mb: int = Field(
        default=DEFAULT_MAX_LOG_SIZE_MB, ge=1, description="Max size per log file in MB"
    )
    log_backup_count: int = Field(
        default=DEFAULT_LOG_BACKUP_COUNT, ge=0, description="Rotated log files to keep"
    )

    # Conversion
    remove_partial_output: bool = Field(
        default=True,
        description="Delete the output file when encoding fails part way",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="IMGCONVERT_",
        extra="ignore",
    )


settings = Settings()
