"""Configuration settings for the GCP Project Manager API."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Google OAuth settings
    google_client_id: str = ""
    google_client_secret: str = ""
    oauth_redirect_uri: str = ""
    oauth_verify_state: bool = True
    google_auth_uri: str = "https://accounts.google.com/o/oauth2/v2/auth"
    google_token_uri: str = "https://oauth2.googleapis.com/token"
    google_userinfo_url: str = "https://www.googleapis.com/oauth2/v2/userinfo"

    # Cloud Resource Manager settings
    resource_manager_base_url: str = "https://cloudresourcemanager.googleapis.com/v1"
    gcp_organization_id: str = "123456789"
    strict_upstream: bool = False

    # Application settings
    app_name: str = "GCP Project Manager"
    environment: str = "development"
    port: int = 3001
    frontend_url: str = "http://localhost:5173"

    # Session settings
    session_ttl_seconds: int | None = None

    # Rate limiting applied to /api endpoints
    api_rate_limit: str = "100 per 15 minutes"

    # Bulk operation pacing
    bulk_create_delay_seconds: float = 1.0
    bulk_delete_delay_seconds: float = 0.8

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def redirect_uri(self) -> str:
        """OAuth redirect URI registered with Google."""
        return self.oauth_redirect_uri or f"http://localhost:{self.port}/auth/callback"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
