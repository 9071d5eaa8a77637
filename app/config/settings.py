from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required by the bootstrap script and admin document reads

    # Document storage
    document_bucket: str = "id-documents"
    document_max_bytes: int = 5 * 1024 * 1024
    document_allowed_types: str = "image/jpeg,image/png,application/pdf"
    document_url_ttl_seconds: int = 3600
    admin_document_access: bool = False  # Storage policies grant admins no override unless enabled

    # Auth flows
    password_reset_redirect_url: str = "http://localhost:5173/admin/login"
    admin_login_url: str = "/api/v1/auth/admin/login"

    # App
    app_name: str = "membership-admin-backend"
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

    def get_document_allowed_types(self) -> List[str]:
        return [t.strip() for t in self.document_allowed_types.split(",") if t.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
