from pydantic_settings import BaseSettings

SERVER_NAME = "outage-monitor-mcp"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2024-11-05"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # StatusGator upstream
    statusgator_api_key: str | None = None
    statusgator_base_url: str = "https://statusgator.com/api/v3"
    statusgator_timeout: float = 30.0

    # Transport
    mcp_transport: str = "http"  # "http" or "stdio"
    host: str = "0.0.0.0"
    port: int = 3002

    # Logging
    log_level: str = "info"

    # CORS
    cors_origins: str = "*"

    # Secrets (AWS Secrets Manager, off for local development)
    use_secrets_manager: bool = False
    aws_region: str = "us-east-1"
    secret_prefix: str = "outage-monitor/prod"

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
