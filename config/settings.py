"""
Environment settings using pydantic-settings.
Secrets and deployment knobs that should never live in config.yaml.
"""
from typing import Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Connector settings loaded from environment variables and .env files.
    """
    model_config = SettingsConfigDict(
        env_file=('.env', '.env.local'),  # Load both .env and .env.local
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False
    )

    # --- Logging ---
    LOG_LEVEL: Optional[str] = Field(None, description="Logging level override")
    LOG_JSON: bool = Field(True, description="Render logs as JSON (False for console output)")

    # --- Config file ---
    CONFIG_PATH: str = Field("config/config.yaml", description="Path to the connector YAML config")

    # --- MotherDuck ---
    MOTHERDUCK_TOKEN: Optional[SecretStr] = Field(None, description="Fallback MotherDuck access token")

    # --- Defaults ---
    DEFAULT_DATABASE: str = Field(":memory:", description="Database used when a request names none")

    def get_motherduck_token(self) -> Optional[SecretStr]:
        """Token, treating an empty value as unset."""
        if self.MOTHERDUCK_TOKEN and self.MOTHERDUCK_TOKEN.get_secret_value():
            return self.MOTHERDUCK_TOKEN
        return None

# Global settings instance
settings = Settings()
