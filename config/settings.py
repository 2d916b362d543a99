"""Application settings and configuration."""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Neo4j Configuration
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str
    neo4j_database: str = "neo4j"
    
    # Dataset Configuration
    dataset_path: str = "data/universities.json"
    dataset_url: str = (
        "https://raw.githubusercontent.com/Hipo/university-domains-list/master/"
        "world_universities_and_domains.json"
    )
    dataset_timeout: int = 60
    seed_on_startup: bool = True
    seed_batch_size: int = 1000
    
    # Query limits
    query_limit: int = 100
    search_limit: int = 50
    
    # Application Configuration
    log_level: str = "INFO"
    log_file: str = "logs/app.log"
    api_host: str = "0.0.0.0"
    api_port: int = 5001
    cors_origins: List[str] = ["*"]
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance
settings = Settings()
