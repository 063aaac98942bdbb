from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin operations like creating users

    # Document storage
    document_storage_backend: str = "supabase"  # supabase | s3
    documents_bucket: str = "documents"
    max_upload_size_mb: int = 10
    allowed_upload_types: str = "application/pdf,image/png,image/jpeg,application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    # AWS S3 (will read from uppercase env vars automatically)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None

    # Reminders
    reminder_scheduler_enabled: bool = False
    reminder_poll_interval_seconds: int = 300
    reminder_lookahead_minutes: int = 5
    cron_secret: Optional[str] = None

    # Auth
    auth_cache_ttl_seconds: int = 60

    # App
    app_name: str = "gsv-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    material_request_rate_limit: str = "5 per 15 minutes"
    material_approve_rate_limit: str = "50/hour"
    auth_rate_limit: str = "10 per 15 minutes"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_allowed_upload_types(self) -> List[str]:
        return [t.strip() for t in self.allowed_upload_types.split(",") if t.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
