"""Application settings loaded from environment variables and ``.env``."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    app_name: str = Field(default="Bookmatch", alias="APP_NAME")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./bookmatch.db", alias="DATABASE_URL"
    )
    auto_create_schema: bool = Field(default=True, alias="AUTO_CREATE_SCHEMA")
    seed_catalog: bool = Field(default=False, alias="SEED_CATALOG")

    jwt_secret: str = Field(default="change-me", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expire_minutes: int = Field(default=7 * 24 * 60, alias="JWT_EXPIRE_MINUTES")

    recommendation_genre_limit: int = Field(
        default=3, ge=1, alias="RECOMMENDATION_GENRE_LIMIT"
    )
    recommendation_max_results: int = Field(
        default=10, ge=1, alias="RECOMMENDATION_MAX_RESULTS"
    )

    allowed_cors_origins: str = Field(default="*", alias="ALLOWED_CORS_ORIGINS")

    @property
    def cors_origins(self) -> list[str]:
        return [x.strip() for x in self.allowed_cors_origins.split(",") if x.strip()]

    @property
    def database_backend(self) -> str:
        return self.database_url.split(":", 1)[0]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
