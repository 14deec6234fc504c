"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from TERRAIN_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TERRAIN_",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Terrain Dimensions
    default_width: int = Field(default=256, ge=1, description="Default terrain width")
    default_height: int = Field(default=256, ge=1, description="Default terrain height")
    max_width: int = Field(default=1024, ge=1, description="Max allowed terrain width")
    max_height: int = Field(default=1024, ge=1, description="Max allowed terrain height")

    # Noise Configuration
    noise_octaves: int = Field(default=4, ge=1, description="Number of noise octaves")
    noise_persistence: float = Field(default=0.3, description="Amplitude decay per octave")
    noise_lacunarity: float = Field(default=2.0, description="Frequency growth per octave")
    noise_scale: float = Field(default=10.0, gt=0, description="Base noise frequency")

    # Smoothing and Erosion
    smoothing_radius: int = Field(default=2, ge=1, description="Box filter half-width")
    smoothing_border: str = Field(default="copy", description="Border policy (copy or zero)")
    erosion_radius: int = Field(default=3, ge=1, description="Erosion neighborhood half-width")
    erosion_strength: float = Field(default=0.01, ge=0, le=1, description="Erosion strength")
    erosion_iterations: int = Field(default=1, ge=0, description="Erosion passes per generation")

    # Mesh and Presentation
    height_scale: float = Field(default=50.0, gt=0, description="Vertical scale of mesh vertices")
    weather_duration_seconds: float = Field(
        default=10.0, gt=0, description="How long rain and snow effects play"
    )


# Instantiate singleton settings object
settings = Settings()
