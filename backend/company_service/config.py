import os
from functools import lru_cache
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Company Service"
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite+aiosqlite:///./company_service.db")
    redis_url: str = Field(default="redis://localhost:6379/0")

    jwt_secret_key: str = Field(...)
    jwt_refresh_secret_key: str = Field(...)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=120)
    refresh_token_expire_days: int = Field(default=7)
    bcrypt_rounds: int = Field(default=10, ge=10)

    otp_ttl_seconds: int = Field(default=300)

    access_cookie_name: str = Field(default="companyToken")
    refresh_cookie_name: str = Field(default="companyRefreshToken")

    # Identity headers injected by the upstream gateway; not re-verified here.
    # Enable only when clients cannot reach the service except through the gateway.
    trust_gateway_headers: bool = Field(default=False)
    identity_header_id: str = Field(default="x-user-id")
    identity_header_email: str = Field(default="x-user-email")
    identity_header_role: str = Field(default="x-user-role")

    mail_server: str = Field(default="smtp.gmail.com")
    mail_port: int = Field(default=587)
    mail_use_tls: bool = Field(default=True)
    mail_username: str | None = Field(default=None)
    mail_password: str | None = Field(default=None)
    mail_default_sender: str | None = Field(default=None)
    mail_suppress_send: bool = Field(default=False)
    mail_timeout_seconds: float = Field(default=10.0)

    job_service_url: str = Field(default="http://localhost:3002")
    job_service_timeout_seconds: float = Field(default=3.0)

    frontend_urls: str = Field(default="http://localhost:5173")

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_token_secrets(self):
        if self.jwt_secret_key == self.jwt_refresh_secret_key:
            raise ValueError("jwt_refresh_secret_key must differ from jwt_secret_key")
        if self.refresh_token_expire_days * 24 * 60 <= self.access_token_expire_minutes:
            raise ValueError("refresh tokens must outlive access tokens")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.frontend_urls.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
