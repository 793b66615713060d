from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "tenant-admin-backend"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8081"

    DATABASE_URL: str = "sqlite+pysqlite:///./admin_backend.db"
    STORAGE_BACKEND: str = "memory"  # memory | sql

    QUERY_DEFAULT_LIMIT: int = 20
    QUERY_MAX_LIMIT: int = 100
    BULK_MAX_CONCURRENCY: int = 10
    EXPORT_JSON_INDENT: int = 2

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def uses_sql_storage(self) -> bool:
        return self.STORAGE_BACKEND.strip().lower() == "sql"

settings = Settings()
