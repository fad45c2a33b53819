"""Bot runtime configuration."""

from pydantic import BaseModel, Field


class BotConfig(BaseModel):
    """Message handling configuration."""

    directory_cache_ttl_seconds: int = Field(
        default=60,
        description="How long user and tag lookups are reused",
        ge=1,
        le=3600,
    )
    directory_cache_max_entries: int = Field(
        default=1000,
        description="Upper bound on cached user lists and on cached tag expressions",
        ge=1,
    )
    language_code_max_length: int = Field(
        default=3,
        description="Longer `language` arguments are treated as language names",
        ge=2,
    )


# Persistence layout shared with earlier deployments of the bot
BOT_NAMESPACE = "state"
BOT_ADDR_KEY = "addr"
LANGUAGE_NAMESPACE = "language"
