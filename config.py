"""Configuration for the SignalFx exporter"""
import logging
from pathlib import Path
from typing import Annotated, Dict, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ENDPOINT = "https://ingest.signalfx.com/v2/datapoint"


class Config(BaseSettings):
    """Exporter configuration, immutable once built"""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, frozen=True)

    # SignalFx settings
    signalfx_endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Datapoint ingestion URL")
    signalfx_token: str = Field(default="", description="API token sent as X-SF-Token")
    metric_prefix: str = Field(default="", description="Prefix dot-joined to every metric name")
    dimensions: Annotated[Dict[str, str], NoDecode] = Field(
        default_factory=dict,
        description="Dimensions attached to every metric (k=v,k2=v2)"
    )

    # Flush settings
    flush_interval: float = Field(default=10.0, gt=0, description="Flush interval in seconds")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP request timeout in seconds")

    service_name: str = Field(default="signalfx-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file")

    @field_validator('signalfx_endpoint')
    @classmethod
    def default_empty_endpoint(cls, v):
        return v.strip() or DEFAULT_ENDPOINT

    @field_validator('dimensions', mode='before')
    @classmethod
    def parse_dimensions(cls, v):
        if isinstance(v, str):
            dimensions = {}
            for pair in v.split(','):
                if '=' in pair:
                    key, value = pair.split('=', 1)
                    dimensions[key.strip()] = value.strip()
            return dimensions
        return v or {}

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('log_file')
    @classmethod
    def ensure_log_directory(cls, v):
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def user_agent(self) -> str:
        return f"{self.service_name}/{self.service_version}"

    def prefixed(self, name: str) -> str:
        """Apply the configured metric prefix to a name"""
        if self.metric_prefix:
            return f"{self.metric_prefix}.{name}"
        return name
