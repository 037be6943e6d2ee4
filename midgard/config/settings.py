"""Application settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from ``MIDGARD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MIDGARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Generation defaults
    default_polygon_count: int = Field(default=1000, description="Default number of polygons")
    default_relaxation_passes: int = Field(default=2, description="Default Lloyd relaxation passes")
    default_water_threshold: float = Field(
        default=0.3, description="Fraction of water corners that makes a cell water"
    )
    max_polygon_count: int = Field(default=20000, description="Largest polygon count the API accepts")


settings = Settings()
