"""
Configuration management for Lane Rush.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from LANE_RUSH_* environment variables."""

    # Display
    screen_width: int = Field(
        default=40,
        description="Terminal window width in character cells"
    )
    screen_height: int = Field(
        default=30,
        description="Terminal window height in character cells"
    )
    cell_size: float = Field(
        default=12.0,
        description="Play-area units per character cell"
    )

    # Content source
    fetch_facts: bool = Field(
        default=True,
        description="Load sports facts from the remote API (fallback facts otherwise)"
    )
    facts_base_url: str = Field(
        default="https://www.thesportsdb.com/api/v1/json/3",
        description="TheSportsDB API root"
    )
    facts_timeout_seconds: float = Field(
        default=5.0,
        description="Per-request timeout for fact loading"
    )

    # Gameplay
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for spawns. Unset means nondeterministic"
    )

    # Persistence
    high_score_path: str = Field(
        default="~/.lane-rush/highscore.json",
        description="File holding the best score"
    )

    # Logging
    log_level: str = Field(default="INFO")

    class Config:
        env_prefix = "LANE_RUSH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
