"""
Application settings, read from the process environment and ``.env`` files.

Each concern is its own settings group with an environment prefix
(``DATABASE_``, ``QUERY_``, ``IMPORT_``, ``SECURITY_``); top-level keys have
no prefix.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENV_FILE = ".env"


def _group_config(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DatabaseSettings(BaseSettings):
    """Activity and favorite store"""
    model_config = _group_config("DATABASE_")

    url: str = Field(default="sqlite:///./poi_catalog.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Log every SQL statement")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def sqlite_path(self) -> Optional[Path]:
        """File of a file-backed SQLite database; None for other stores and in-memory SQLite"""
        if not self.is_sqlite or "///" not in self.url:
            return None
        path = self.url.split("///", 1)[1]
        if not path or path == ":memory:":
            return None
        return Path(path)


class QuerySettings(BaseSettings):
    """Map queries and favorites"""
    model_config = _group_config("QUERY_")

    unbounded_result_limit: int = Field(
        default=100, ge=1, le=10000,
        description="Results returned by a centered query without a radius",
    )
    default_user_id: str = Field(default="default-user", min_length=1)


class ImportSettings(BaseSettings):
    """Bulk GeoJSON import"""
    model_config = _group_config("IMPORT_")

    geojson_dir: str = Field(default="data/geojson", description="Directory scanned for .geojson files")
    backup_dir: str = Field(default="data/backup", description="Where the database is copied before an import")
    max_reported_errors: int = Field(default=5, ge=0, le=100, description="Failures printed per file")


class SecuritySettings(BaseSettings):
    """CORS"""
    model_config = _group_config("SECURITY_")

    cors_origins: Union[List[str], str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a comma separated string as well as a list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v or ["*"]


class Settings(BaseSettings):
    """Main application settings"""
    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="POI Catalog API")
    app_version: str = Field(default="2.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file: Optional[str] = Field(default=None)
    log_json: bool = Field(default=True, description="Emit one JSON object per log line")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    imports: ImportSettings = Field(default_factory=ImportSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @classmethod
    def from_env_file(cls, env_file: Union[str, Path], **overrides: Any) -> "Settings":
        """Settings with ``env_file`` layered over ``.env`` for the top-level keys and every group"""
        env_files = (DEFAULT_ENV_FILE, str(env_file))
        groups = {
            "database": DatabaseSettings(_env_file=env_files),
            "query": QuerySettings(_env_file=env_files),
            "imports": ImportSettings(_env_file=env_files),
            "security": SecuritySettings(_env_file=env_files),
        }
        groups.update(overrides)
        return cls(_env_file=env_files, **groups)

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def get_cors_config(self) -> Dict[str, Any]:
        """Keyword arguments for ``CORSMiddleware``"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }


def _load_settings() -> Settings:
    """Settings for the ENVIRONMENT variable, including its ``.env.<environment>`` file when present"""
    env_file = Path(f".env.{os.getenv('ENVIRONMENT', Environment.DEVELOPMENT.value).lower()}")
    if env_file.is_file():
        return Settings.from_env_file(env_file)
    return Settings()


# Global settings instance
settings = _load_settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = _load_settings()
    return settings
