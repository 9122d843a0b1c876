from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr

# Markers found in the sample keys shipped with .env templates
PLACEHOLDER_KEY_MARKERS = ("REPLACE", "AbCdEf", "your-api-key")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    ENVIRONMENT: Literal["development", "production", "test"] = Field("development")
    LOG_LEVEL: str = Field("INFO")
    PORT: int = Field(5000, description="Port used by `supportbot serve`")

    OPENAI_API_KEY: SecretStr | None = Field(None, description="OpenAI API Key")
    OPENAI_MODEL: str = Field("gpt-3.5-turbo", description="Chat model used for generated replies")
    OPENAI_BASE_URL: str | None = Field(None, description="Override for OpenAI-compatible endpoints")
    LLM_MAX_TOKENS: int = Field(500, description="Maximum completion length")
    LLM_TEMPERATURE: float = Field(0.7)
    LLM_TIMEOUT_SECONDS: float = Field(30.0, description="Per-request timeout for the OpenAI client")
    LLM_MAX_RETRIES: int = Field(2, description="Retries with backoff performed by the OpenAI client")
    HISTORY_WINDOW: int = Field(10, description="Number of previous turns sent to the model")

    DEMO_MODE: bool | None = Field(
        None,
        description="Force keyword-matching replies (true) regardless of the API key. Unset = decide from the key.",
    )

    DOCS_PATH: Path = Field(Path("docs.json"), description="JSON array of {title, content} documents")
    DATA_DIR: Path = Field(Path("data"))
    DATABASE_URL: str | None = Field(None, description="SQLAlchemy URL; defaults to SQLite under DATA_DIR")

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.DATA_DIR / 'support.db'}"

    @property
    def generation_enabled(self) -> bool:
        """True when replies should come from the OpenAI model instead of keyword rules."""
        if self.DEMO_MODE:
            return False
        if self.OPENAI_API_KEY is None:
            return False
        key = self.OPENAI_API_KEY.get_secret_value().strip()
        if not key:
            return False
        return not any(marker in key for marker in PLACEHOLDER_KEY_MARKERS)

    @property
    def resolution_mode(self) -> str:
        return "generation" if self.generation_enabled else "demo"

# Singleton instance
settings = Settings()
