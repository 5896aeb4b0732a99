# app/config/settings.py
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 🔵 Banco principal (PostgreSQL)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "auth_token"
    db_user: str = "postgres"
    db_password: str = "postgres"

    # URL completa (ex.: sqlite:///./auth.db) tem prioridade sobre db_*
    db_url: str | None = None

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    api_prefix: str = "/api"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "auth-token-api"
    jwt_audience: str = "auth-token-front"

    # TTLs em minutos
    jwt_access_minutes: int = 60
    jwt_refresh_minutes: int = 60 * 24 * 7

    refresh_token_header: str = "X-Refresh-Token"

    password_iterations: int = 600_000

    # prefixos liberados sem access token
    public_paths: str = "/api/auth/,/api/test/all,/health"

    # tentativas da rotação quando outra transação ganha a corrida
    rotation_retries: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_host", "db_name", "db_user", "db_password", "jwt_secret", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @field_validator("jwt_access_minutes", "jwt_refresh_minutes", "rotation_retries")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password)
        host = self.db_host
        port = self.db_port
        db = self.db_name

        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def public_path_list(self) -> list[str]:
        return [p.strip() for p in self.public_paths.split(",") if p.strip()]


settings = Settings()
