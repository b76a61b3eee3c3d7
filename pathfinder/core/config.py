"""
Configuration settings for the Pathfinder API
"""

from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """Application settings"""

    # Database
    db_host: str = "localhost"
    db_port: str = "5432"
    db_name: str = "pathfinder_dev"
    db_user: str = "postgres"
    db_password: str = "postgres"
    database_url: str = ""

    # Auth
    jwt_secret: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24h

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    debug: bool = True
    environment: str = "development"
    cors_origins: List[str] = ["http://localhost:3000"]

    # Device data queries
    data_query_default_limit: int = 100
    data_query_max_limit: int = 1000

    # Device client
    device_api_url: str = "http://localhost:5000/api"
    device_api_key: Optional[str] = None
    device_check_in_interval: int = 60  # seconds
    device_data_interval: int = 30  # seconds

    # Logging
    log_level: str = "INFO"
    log_buffer_capacity: int = 1000

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Build database_url from components unless given explicitly
        if not self.database_url:
            self.database_url = f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

# Global settings instance
settings = Settings()
