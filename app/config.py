"""Application configuration using pydantic-settings."""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CORS_ORIGINS = "https://recetas-faciles-eta.vercel.app,http://localhost:3000"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    gemini_api_key: str

    # Server
    port: int = 5000
    host: str = "0.0.0.0"
    environment: str = "development"

    # Logging
    log_level: str = "INFO"

    # Rate Limiting
    rate_limit: str = "100/15minutes"
    rate_limit_enabled: bool = True
    # Only honor X-Forwarded-For when a trusted proxy (Cloud Run, Vercel) sets it
    trust_forwarded_for: bool = False

    # CORS
    cors_origins: str = DEFAULT_CORS_ORIGINS  # Comma-separated origins or "*" for all
    frontend_url: Optional[str] = None

    # Gemini Settings
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.9
    gemini_top_p: float = 1.0
    gemini_max_tokens: int = 2048
    generation_timeout_s: float = 60.0

    # Recipe store
    recipe_store: str = "firestore"  # "firestore" or "memory"
    recipes_collection: str = "recetas"
    counters_collection: str = "contadores"
    counter_document: str = "recetas"

    # Firebase service account (GOOGLE_APPLICATION_CREDENTIALS is honoured too)
    firebase_credentials_path: Optional[str] = None
    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None

    # Listing
    recipes_default_limit: int = 10
    recipes_max_limit: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def expose_error_details(self) -> bool:
        """Internal error text is only returned to callers in development."""
        return self.environment.lower() == "development"

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins.strip() == "*":
            return ["*"]
        origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


# Global settings instance
settings = Settings()
