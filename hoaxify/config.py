from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    env: str = Field(default="production")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_name: str = Field(default="hoaxify_db")
    db_user: str = Field(default="postgres")
    db_password: str = Field(default="postgres")
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_url: str = Field(default="")
    run_migrations: bool = Field(default=True)

    http_host: str = Field(default="0.0.0.0")
    http_port: int = Field(default=3000)
    http_workers: int = Field(default=1)

    upload_dir: str = Field(default="upload")
    profile_dir: str = Field(default="profile")
    attachment_dir: str = Field(default="attachment")

    token_length: int = Field(default=32)
    token_expiry_days: int = Field(default=7)
    token_cleanup_enabled: bool = Field(default=True)
    token_cleanup_interval_hours: float = Field(default=24)

    attachment_retention_hours: float = Field(default=24)
    attachment_cleanup_enabled: bool = Field(default=True)
    attachment_cleanup_interval_hours: float = Field(default=24)

    max_attachment_bytes: int = Field(default=5 * 1024 * 1024)
    max_profile_image_bytes: int = Field(default=2 * 1024 * 1024)

    bcrypt_rounds: int = Field(default=10)

    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=100)

    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=8587)
    smtp_user: str = Field(default="")
    smtp_password: str = Field(default="")
    smtp_timeout: float = Field(default=10.0)
    mail_from: str = Field(default="My App <info@my-app.com>")
    app_base_url: str = Field(default="http://localhost:8080")

    rate_limit_enabled: bool = Field(default=False)
    rate_limit_per_minute: int = Field(default=60)
    rate_limit_auth_per_minute: int = Field(default=10)

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"


settings = Settings()
