import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from CONSTELLATION_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONSTELLATION_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Generation Configuration
    num_points: int = Field(default=20, ge=0, description="Default number of points")
    radius: float = Field(default=5.0, gt=0, description="Sphere radius (changing it changes note timing)")
    max_neighbor_count: int = Field(default=3, ge=1, description="3 is good, 2 is sparse, 1 is too sparse")
    points_per_cluster: int = Field(default=15, ge=1, description="Target number of points per cluster")
    global_seed: int = Field(default=0, ge=-(2**63), le=2**63 - 1, description="Default global seed")
    root_local_seed: int = Field(default=0xA0A0BE63, ge=0, le=2**32 - 1, description="Local seed mixed into the global seed")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    max_api_points: int = Field(default=5000, ge=0, description="Max points per API request")
    max_api_neighbor_count: int = Field(default=8, ge=1, description="Max neighbour count per API request")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")


# Instantiate singleton settings object
settings = Settings()
