from typing import Optional
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from .core.holidays import DEFAULT_END_YEAR, DEFAULT_START_YEAR

ENV_PREFIX = "TINYMONTH_"


class AppConfig(BaseModel):
    # Persistence
    store_backend: str = Field(default="json", description="Store backend: json, memory or remote")
    data_file: str = Field(default="data/tinymonth-data.json", description="Document path for the json backend")
    remote_url: Optional[str] = Field(default=None, description="Persistence endpoint for the remote backend")
    remote_timeout: float = Field(default=10.0, gt=0, description="Remote request timeout in seconds")

    # Holiday generation
    holiday_start_year: int = Field(default=DEFAULT_START_YEAR, ge=1583)
    holiday_end_year: int = Field(default=DEFAULT_END_YEAR, ge=1583)

    # Batch import
    default_color: str = Field(default="#3b82f6", pattern=r"^#[0-9a-fA-F]{6}$")

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return v

    @model_validator(mode="after")
    def validate_holiday_range(self) -> "AppConfig":
        if self.holiday_end_year < self.holiday_start_year:
            raise ValueError("holiday_end_year must be >= holiday_start_year")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "AppConfig":
        """Read ``TINYMONTH_*`` variables (and a ``.env`` file) over the defaults."""
        load_dotenv()
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        values.update(overrides)
        return cls(**values)
