"""Configuration management"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables
load_dotenv()

# YouTube Data API hard limit on ids per videos.list / channels.list call
MAX_BATCH_SIZE = 50

# Values shipped in example .env files; treated as "not configured"
PLACEHOLDER_API_KEYS = frozenset(
    {
        "your_youtube_api_key_here",
        "YOUR_API_KEY",
        "changeme",
    }
)


class Config(BaseModel):
    """Application configuration"""

    # API Keys
    youtube_api_key: str = Field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY", ""))

    # Delegated access (Data Portability API)
    google_client_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLIENT_ID")
    )
    google_access_token: Optional[str] = Field(
        default_factory=lambda: os.getenv("GOOGLE_ACCESS_TOKEN")
    )

    # Enrichment batching
    batch_size: int = Field(
        default_factory=lambda: int(os.getenv("METADATA_BATCH_SIZE", str(MAX_BATCH_SIZE))),
        validate_default=True,
    )
    batch_delay_seconds: float = Field(
        default_factory=lambda: float(os.getenv("METADATA_BATCH_DELAY", "0.2"))
    )
    top_channel_count: int = Field(
        default_factory=lambda: int(os.getenv("TOP_CHANNEL_COUNT", "10"))
    )

    # Takeout export polling
    takeout_poll_interval: float = Field(
        default_factory=lambda: float(os.getenv("TAKEOUT_POLL_INTERVAL", "10"))
    )
    takeout_max_attempts: int = Field(
        default_factory=lambda: int(os.getenv("TAKEOUT_MAX_ATTEMPTS", "30"))
    )

    # MCP Server Configuration
    mcp_server_name: str = Field(
        default_factory=lambda: os.getenv("MCP_SERVER_NAME", "watch-history-stats")
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @field_validator("batch_size")
    @classmethod
    def _clamp_batch_size(cls, value: int) -> int:
        return max(1, min(value, MAX_BATCH_SIZE))

    def validate_keys(self) -> list[str]:
        """Return the optional credentials that are not configured"""
        missing = []
        if not self.youtube_api_key:
            missing.append("YOUTUBE_API_KEY")
        if not self.google_client_id:
            missing.append("GOOGLE_CLIENT_ID")
        return missing


# Global config instance
config = Config()
