"""Application configuration."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings.

    Everything can be overridden through environment variables or a `.env`
    file. `DATABASE_URL` has no default; the server refuses to start without it.

    Priority: Environment variables > .env file > defaults defined here
    """

    # App Configuration
    APP_NAME: str = "nodefleet"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True  # Default to True for development

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    # Database Configuration
    DATABASE_URL: Optional[str] = None

    # Logging Configuration
    # Either a level ("info") or directives like "warning,nodefleet=debug"
    LOG_LEVEL: str = "info"
    # None follows DEBUG: pretty output in debug, JSON otherwise
    JSON_LOGS: Optional[bool] = None

    # Bearer token accepted on the clusters, nodes and operations routes
    API_TOKEN: str = "im_a_valid_user"

    # CORS Configuration
    CORS_ENABLED: bool = True
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Seconds before a rebooted node reports poweron again; unset disables it
    REBOOT_SIMULATION_DELAY: Optional[float] = None

    @property
    def use_json_logs(self) -> bool:
        if self.JSON_LOGS is None:
            return not self.DEBUG
        return self.JSON_LOGS

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
