"""
Per-environment configuration files.

``.env.<environment>`` files sit in the working directory next to the
default ``.env``; ``.env.<environment>.sample`` files are templates and are
never loaded.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from .settings import Environment, Settings

logger = logging.getLogger(__name__)

SAMPLE_SUFFIX = ".sample"

SAMPLE_TEMPLATE = """# {environment} configuration for {app_name}
# Copy to .env.{environment} and adjust

ENVIRONMENT={environment}
DEBUG={debug}
HOST={host}
PORT={port}
RELOAD={debug}
WORKERS={workers}

LOG_LEVEL={log_level}
LOG_JSON={log_json}

DATABASE_URL={database_url}

QUERY_UNBOUNDED_RESULT_LIMIT={result_limit}
QUERY_DEFAULT_USER_ID={default_user_id}

IMPORT_GEOJSON_DIR={geojson_dir}
IMPORT_BACKUP_DIR={backup_dir}
IMPORT_MAX_REPORTED_ERRORS={max_reported_errors}

SECURITY_CORS_ORIGINS=*
"""


def env_file_for(environment: Environment) -> Path:
    return Path(f".env.{environment.value}")


class ConfigLoader:
    """Loads, lists and scaffolds per-environment settings files"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Settings for ``environment``, read from its ``.env.<environment>`` file when present.

        Args:
            environment: development, staging, production or testing;
                defaults to the ENVIRONMENT variable, then development

        Raises:
            ValueError: unknown environment name
        """
        env = Environment((environment or os.getenv("ENVIRONMENT", "development")).lower())
        env_file = env_file_for(env)

        if not env_file.exists():
            logger.warning(f"{env_file} not found, using defaults and process environment")
            return Settings(environment=env)

        logger.info(f"Loading settings from {env_file}")
        return Settings.from_env_file(env_file, environment=env)

    @staticmethod
    def get_available_environments() -> List[str]:
        """Names of the environments that have a settings file, sorted"""
        names = (path.name[len(".env."):] for path in Path(".").glob(".env.*"))
        return sorted(name for name in names if not name.endswith(SAMPLE_SUFFIX))

    @staticmethod
    def validate_environment_config(environment: str) -> bool:
        """True when settings for ``environment`` load and name a database"""
        try:
            settings = ConfigLoader.load_environment_config(environment)
        except ValueError as e:
            logger.error(f"Invalid configuration for {environment}: {e}")
            return False
        return bool(settings.database.url) and settings.port > 0

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Write a settings template for ``environment``.

        Returns:
            Path of the written file (``.env.<environment>.sample`` by default)
        """
        env = Environment(environment.lower())
        output_path = output_path or f"{env_file_for(env)}{SAMPLE_SUFFIX}"
        defaults = Settings()
        is_dev = env == Environment.DEVELOPMENT

        content = SAMPLE_TEMPLATE.format(
            environment=env.value,
            app_name=defaults.app_name,
            debug=str(is_dev).lower(),
            host=defaults.host,
            port=defaults.port,
            workers=1 if is_dev else 4,
            log_level=defaults.log_level.value,
            log_json=str(not is_dev).lower(),
            database_url=defaults.database.url,
            result_limit=defaults.query.unbounded_result_limit,
            default_user_id=defaults.query.default_user_id,
            geojson_dir=defaults.imports.geojson_dir,
            backup_dir=defaults.imports.backup_dir,
            max_reported_errors=defaults.imports.max_reported_errors,
        )
        Path(output_path).write_text(content, encoding="utf-8")
        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
