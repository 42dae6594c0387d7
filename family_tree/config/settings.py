from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


DEFAULT_GENERATION_PALETTE = "#3b82f6,#10b981,#f59e0b,#ef4444,#8b5cf6,#06b6d4"


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for deleting auth users

    # Auth
    auth_cache_ttl_seconds: int = 60
    auth_cache_max_size: int = 500

    # Tree rendering
    generation_palette: str = DEFAULT_GENERATION_PALETTE

    # Notifications
    notification_ttl_seconds: int = 60
    notification_max_per_user: int = 50

    # App
    app_name: str = "family-tree-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_generation_palette(self) -> List[str]:
        colors = [c.strip() for c in self.generation_palette.split(",") if c.strip()]
        return colors or DEFAULT_GENERATION_PALETTE.split(",")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
