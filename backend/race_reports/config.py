"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Echo SQL statements")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./race_reports.db",
        description="Database connection URL"
    )

    # === Ingestion ===
    debug_uploads: bool = Field(
        default=False,
        description="Log every ingestion step at INFO level"
    )
    csv_encoding: str = Field(
        default="utf-8-sig",
        description="Encoding used to read result files (BOM tolerant)"
    )

    # === Analysis ===
    ranking_limit: int = Field(default=5, description="Top-N size for rankings")
    default_category_label: str = Field(
        default="Sin categoría",
        description="Label for records without category in category stats"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('ranking_limit')
    @classmethod
    def check_ranking_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("ranking_limit must be positive")
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
