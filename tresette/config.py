"""Application configuration using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    environment: str = Field(default="development", description="Environment")
    frontend_url: str = Field(default="http://localhost:5173", description="Frontend URL")

    # Timing
    bot_move_delay_seconds: float = Field(
        default=2.0, ge=0, description="Delay before a bot plays its card"
    )
    trick_resolution_delay_seconds: float = Field(
        default=1.2, ge=0, description="Delay between the last card and the trick result"
    )

    # Match defaults
    default_winning_score: int = Field(default=21, description="Points needed to win a match")
    default_difficulty: str = Field(default="medium", description="Default bot difficulty")
    default_username: str = Field(default="Giocatore", description="Default human player name")


# Global settings instance
settings = Settings()
