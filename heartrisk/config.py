"""
Configuration Management for Heart Risk Service

Environment-based configuration using Pydantic Settings.
"""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields from .env file
    )
    
    # Application
    app_name: str = "Heart Disease Risk Service"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level for heartrisk loggers")
    
    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]
    
    # Reference dataset
    dataset_path: str = Field(
        default="data/Heart_Disease_Prediction.csv",
        description="CSV used to build presence/absence group profiles"
    )
    dataset_label_column: str = Field(default="Heart Disease", description="Outcome label column")
    load_dataset_on_startup: bool = Field(default=True, description="Schedule the dataset load at startup")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
