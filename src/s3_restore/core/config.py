"""Configuration management for s3-restore."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    log_json: bool = True
    otel_enabled: bool = False
    otel_service_name: str = "s3-restore"
    otel_exporter_endpoint: str = "http://localhost:4317"

    max_concurrency: int = Field(default=5, gt=0)
    region_name: str = "us-east-1"
    page_size: int = Field(default=1000, gt=0, le=1000)
    prefix_header: str = "embed_code"
    fail_fast: bool = True

    model_config = {
        "env_prefix": "S3_RESTORE_",
        "case_sensitive": False,
    }


settings = Settings()
