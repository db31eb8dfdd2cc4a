"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Graph construction
    vertex_precision: int = Field(default=3, ge=0, description="Decimals kept for vertex identity")
    snap_distance: float = Field(default=1e-3, gt=0, description="Segments shorter than this are snapped away")
    neighbor_tolerance: float = Field(
        default=0.5, gt=0, description="Per-axis tolerance when matching opposite edges"
    )

    class Config:
        env_file = ".env"
        env_prefix = "MAPGRAPH_"


settings = Settings()
