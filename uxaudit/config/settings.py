from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "uxaudit"
    db_username: str = "uxaudit"
    db_password: str = "secret"
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: float = 10

    job_poll_interval_seconds: int = 5

    files_root: str = "/app/files"
    fetch_timeout_seconds: int = 30

    vision_provider: str = "gemini"
    vision_api_key: str = ""
    vision_model_name: str = "gemini-2.0-flash"
    vision_base_url: str = ""
    vision_timeout_seconds: int = 30
    vision_max_findings: int = 15
    vision_image_max_dim: int = 2048
    vision_jpeg_quality: int = 82
    vision_temperature: float = 0.2
