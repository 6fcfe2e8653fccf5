"""
Central application configuration using pydantic-settings.

Environment variables (prefix: DEAL_), also read from a local .env file:
    DEAL_HOST               - Bind address (default: 0.0.0.0)
    DEAL_PORT               - Bind port (default: 8000)
    DEAL_MAX_PLAYERS        - Seats per room (default: 5)
    DEAL_LOG_LEVEL          - Python logging level (default: INFO)
    DEAL_EVENT_LOG_DIR      - Directory for per-room JSONL event logs (default: off)
    DEAL_SEED               - Fixed shuffle seed, for reproducible games
    DEAL_HAND_LIMIT         - Cards a player may hold at turn end (default: 7)
    DEAL_MAX_CARDS_PER_TURN - Plays allowed per turn (default: 3)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from monodeal.config import GameConfig


class ServerSettings(BaseSettings):
    """Configuration for the game server and the games it hosts."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DEAL_",
    )

    host: str = Field(default="0.0.0.0", description="Address the server binds to.")
    port: int = Field(default=8000, ge=1, le=65535, description="Port the server binds to.")
    max_players: int = Field(default=5, ge=2, le=10, description="Maximum seats in one room.")
    log_level: str = Field(default="INFO", description="Logging level for the server.")
    event_log_dir: Optional[str] = Field(
        default=None,
        description="Directory for JSONL event logs, one file per room. Disabled when unset.",
    )
    seed: Optional[int] = Field(default=None, description="Shuffle seed applied to every new game.")
    hand_limit: int = Field(default=7, ge=1, description="Hand size allowed at the end of a turn.")
    max_cards_per_turn: int = Field(default=3, ge=1, description="Cards a player may play per turn.")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return str(value).upper()

    def build_game_config(self) -> GameConfig:
        """Engine configuration for a new game hosted by this server."""
        return GameConfig(
            hand_limit=self.hand_limit,
            max_cards_per_turn=self.max_cards_per_turn,
            seed=self.seed,
        )


@lru_cache
def get_settings() -> ServerSettings:
    """Return cached server settings instance."""
    return ServerSettings()
