"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from LOWPOLY_* environment variables."""

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Mosaic defaults
    default_blur_kernel_size: int = Field(default=5, description="Box blur kernel side")
    default_edge_kernel_size: int = Field(default=5, description="Edge kernel side")
    default_threshold: int = Field(default=50, description="Edge threshold on the red channel")
    default_sample_rate: float = Field(default=0.03, description="Fraction of edge points triangulated")
    default_color_mode: str = Field(default="quick", description="Triangle colouring: exact or quick")

    # Images larger than this are scaled down before processing
    max_image_width: int = Field(default=1024, description="Maximum processed image width")
    max_image_height: int = Field(default=1024, description="Maximum processed image height")

    class Config:
        env_prefix = "LOWPOLY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
