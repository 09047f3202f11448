from pathlib import Path
from typing import Literal, Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Load .env for local/dev environments only for values missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Logging format (console or json)"
    )

    # Subsector Generation Configuration
    default_seed: Optional[str] = Field(
        default=None, description="Seed used when the caller passes none"
    )
    geometry: Literal["square", "hex"] = Field(
        default="square", description="Grid topology used for distances"
    )
    density_threshold: int = Field(
        default=3, ge=0, le=6, description="A cell is occupied when 1d6 exceeds this"
    )
    gas_giant_threshold: int = Field(
        default=9, ge=0, description="A gas giant is present when 1d6 is at or below this"
    )
    include_file: str = Field(
        default="traveller.txt", description="File named by the trailing include directive"
    )

    class Config:
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
