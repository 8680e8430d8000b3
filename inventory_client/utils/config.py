"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class APIConfig(BaseModel):
    """API configuration settings."""
    timeout: int = 30
    max_retries: int = 1  # 1 attempt == no retry
    retry_delay: int = 1
    exponential_backoff: bool = True


class CacheConfig(BaseModel):
    """Freshness windows (seconds) per cached resource."""
    default_window: float = 300
    windows: Dict[str, float] = {
        "warehouse.items": 300,
        "warehouse.expiring": 300,
        "store.active": 300,
        "store.expired": 300,
        "store.removed": 300,
        "store.reports": 300,
        "store.cart": 60,
        "prediction.forecast": 600,
        "prediction.stats": 600,
        "prediction.products": 600,
        "prediction.categories": 1800,
        "prediction.analytics": 600,
        "prediction.trends": 600,
        "prediction.insights": 600,
        "dashboard.stats": 300,
    }

    def window_for(self, key: str) -> float:
        """Resolve the window for ``key``; ``prefix:suffix`` keys use the prefix."""
        if key in self.windows:
            return self.windows[key]
        prefix = key.split(":", 1)[0]
        return self.windows.get(prefix, self.default_window)


class RefreshConfig(BaseModel):
    """Background re-fetch scheduling."""
    refetch_delay: float = 1.0
    timezone: str = "UTC"
    periodic_interval_minutes: int = 0  # 0 disables periodic refresh


class AuthConfig(BaseModel):
    """Session behaviour."""
    login_path: str = "/auth/login"


class LoggingFilesConfig(BaseModel):
    """Log file paths."""
    client: str = "logs/client.log"
    error: str = "logs/error.log"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5
    files: LoggingFilesConfig = LoggingFilesConfig()


class YAMLConfig(BaseModel):
    """Configuration loaded from YAML file."""
    api: APIConfig = APIConfig()
    cache: CacheConfig = CacheConfig()
    refresh: RefreshConfig = RefreshConfig()
    auth: AuthConfig = AuthConfig()
    logging: LoggingConfig = LoggingConfig()


class Settings(BaseSettings):
    """Application settings from environment variables."""

    api_base_url: str = Field(
        default="http://localhost:8000/api/v1",
        description="Inventory backend base URL"
    )
    token_file: str = Field(
        default=str(Path.home() / ".inventory_client" / "token"),
        description="Where the bearer token is kept between runs"
    )

    # Application settings
    environment: str = Field(default="development", description="Environment (development/production)")
    log_level: Optional[str] = Field(default=None, description="Override log level")
    port: int = Field(default=8080, description="Dashboard server port")

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class AppConfig:
    """Combined application configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        self.env = Settings()

        # Load YAML config
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "config.yml"
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    yaml_data = yaml.safe_load(f) or {}
                self.yaml = YAMLConfig(**yaml_data)
            except (yaml.YAMLError, ValidationError) as e:
                raise ConfigurationError(
                    f"Invalid configuration file {config_path}", details={"error": str(e)}
                )
        else:
            self.yaml = YAMLConfig()

        # Override log level if specified in env
        if self.env.log_level:
            self.yaml.logging.level = self.env.log_level

    @property
    def api(self) -> APIConfig:
        return self.yaml.api

    @property
    def cache(self) -> CacheConfig:
        return self.yaml.cache

    @property
    def refresh(self) -> RefreshConfig:
        return self.yaml.refresh

    @property
    def auth(self) -> AuthConfig:
        return self.yaml.auth

    @property
    def logging(self) -> LoggingConfig:
        return self.yaml.logging

    @property
    def is_production(self) -> bool:
        return self.env.environment.lower() == "production"


@lru_cache()
def get_config() -> AppConfig:
    """Get cached configuration instance."""
    return AppConfig()
