from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    env: str = "dev"
    database_url: str = "postgresql+psycopg2://warehouse:warehouse@db:5432/warehouse"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    backend_cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"
    receipt_prefix: str = "BP"

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from a comma-separated string"""
        origins = self.backend_cors_origins
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
