"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables
    2. .env file (for local development)
    3. Default values

    For local development, put overrides in a .env file (PARSER_WINDOW_SIZE=30).
    For production, set environment variables directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "Questionnaire Import API"
    debug: bool = False

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = ["http://localhost:3000"]

    # =========================================================================
    # API Settings
    # =========================================================================
    api_v1_prefix: str = "/api/v1"

    # Documents with more lines than this are rejected with 413
    max_document_lines: int = Field(
        default=20_000,
        ge=1,
        description="Maximum number of lines accepted by the parse endpoint",
    )

    # Characters of an error response body included in the request log
    log_detail_max_length: int = Field(default=500, ge=0)

    # =========================================================================
    # Parser
    # =========================================================================
    parser_window_size: int = Field(
        default=20,
        ge=1,
        description="Maximum number of lines scanned after a question",
    )
    parser_help_text_min_length: int = Field(
        default=10,
        ge=0,
        description="Parenthesised help text must be longer than this",
    )
    parser_select_threshold: int = Field(
        default=10,
        ge=1,
        description="Single-choice questions with more options render as select",
    )
    parser_lookahead: int = Field(
        default=20,
        ge=1,
        description="Lines inspected to tell numbered headings from questions",
    )


settings = Settings()
