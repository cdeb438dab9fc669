"""Shared configuration for all services."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Redis Configuration
    redis_url: str = "redis://localhost:6379"
    redis_result_channel: str = "job_updates"

    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "article_jobs"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"

    # AI Provider Configuration
    default_ai_provider: str = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-flash-latest"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    zai_api_key: str = ""
    zai_model: str = "glm-4.7"
    zai_base_url: str = "https://api.z.ai/api/coding/paas/v4"
    provider_timeout: int = 180  # seconds

    # Article defaults
    placeholder_image_base: str = "https://picsum.photos"
    default_author: str = "Admin"

    # WebSocket Configuration
    ws_heartbeat_interval: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
