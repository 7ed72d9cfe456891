"""
YAML configuration loader with validation.

Loads run settings from YAML files with:
- Environment variable substitution
- Credentials from LEZEC_USER / LEZEC_PASS (and a .env file)
- Default values from the packaged lezec.yml
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from dotenv import load_dotenv

from lezec_diary.core.exceptions import ConfigurationError
from lezec_diary.core.retry import RetryPolicy

logger = structlog.get_logger(__name__)


DEFAULT_CONFIG_FILE = "lezec.yml"

USER_ENV_VAR = "LEZEC_USER"
PASSWORD_ENV_VAR = "LEZEC_PASS"


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - required, empty string and a warning if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        else:
            value = os.getenv(var_expr)
            if value is None:
                logger.warning("env_var_not_set", var=var_expr)
                return ""
            return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


@dataclass
class Settings:
    """Settings for one diary run."""

    username: str
    password: str

    base_url: str = "https://lezec.cz"
    timeout: float = 30.0

    # Window and mode
    offset: int = 0
    limit: Optional[int] = None  # None = up to the end
    enrich: bool = False
    output_dir: str = "output"

    # Route detail requests
    retry_attempts: int = 3
    retry_delay: float = 2.0
    pacing_delay: float = 1.5

    def __post_init__(self):
        if not self.username or not self.password:
            raise ConfigurationError(
                f"Missing credentials - set {USER_ENV_VAR} and {PASSWORD_ENV_VAR} "
                "(environment or .env file) or the credentials section of the config file"
            )
        if self.offset < 0:
            raise ConfigurationError(f"offset must be >= 0, got {self.offset}")
        if self.limit is not None and self.limit <= 0:
            raise ConfigurationError(f"limit must be > 0, got {self.limit}")

    def retry_policy(self) -> RetryPolicy:
        """Build the retry/pacing policy for route detail requests."""
        return RetryPolicy(
            attempts=self.retry_attempts,
            retry_delay=self.retry_delay,
            pacing_delay=self.pacing_delay,
        )


class ConfigLoader:
    """
    Configuration loader for diary runs.

    Loads a YAML config file and flattens it into Settings.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise ConfigurationError(f"Config file not found: {filepath}")

        logger.debug("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        # Substitute environment variables
        content = substitute_env_vars(content)

        # Parse YAML
        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {filepath}: {e}") from e

        return config or {}

    def load_settings(
        self,
        filename: str = DEFAULT_CONFIG_FILE,
        overrides: Optional[dict[str, Any]] = None,
    ) -> Settings:
        """
        Load Settings from a YAML file.

        Args:
            filename: Config file name
            overrides: Flat setting values that win over the file
                       (None values are ignored)

        Returns:
            Settings object

        Raises:
            ConfigurationError: If credentials are missing or values invalid
        """
        config = self.load_file(filename)
        values = self._flatten(config)

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        try:
            return Settings(**values)
        except TypeError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    def _flatten(self, data: dict) -> dict:
        """
        Map the sectioned YAML layout onto Settings fields.

        LEZEC_USER / LEZEC_PASS from the environment win over the
        credentials section.

        Args:
            data: Parsed config dict

        Returns:
            Flat dict of Settings keyword arguments
        """
        site = data.get("site") or {}
        credentials = data.get("credentials") or {}
        run = data.get("run") or {}
        enrichment = data.get("enrichment") or {}

        values = {
            "username": os.getenv(USER_ENV_VAR) or credentials.get("username") or "",
            "password": os.getenv(PASSWORD_ENV_VAR) or credentials.get("password") or "",
            "base_url": site.get("base_url"),
            "timeout": site.get("timeout"),
            "offset": run.get("offset"),
            "limit": run.get("limit"),
            "enrich": run.get("enrich"),
            "output_dir": run.get("output_dir"),
            "retry_attempts": enrichment.get("attempts"),
            "retry_delay": enrichment.get("retry_delay"),
            "pacing_delay": enrichment.get("pacing_delay"),
        }
        return {k: v for k, v in values.items() if v is not None}


def load_settings(
    config_path: Optional[str] = None,
    env_file: Optional[str] = ".env",
    **overrides,
) -> Settings:
    """
    Convenience function to load run settings.

    Args:
        config_path: Optional path to a YAML config file
        env_file: .env file to read credentials from, if it exists
        **overrides: Setting values from the command line

    Returns:
        Settings object

    Raises:
        ConfigurationError: If credentials are missing or values invalid
    """
    if env_file and Path(env_file).is_file():
        load_dotenv(env_file)

    if config_path:
        loader = ConfigLoader(str(Path(config_path).parent))
        return loader.load_settings(Path(config_path).name, overrides)
    else:
        loader = ConfigLoader()
        return loader.load_settings(overrides=overrides)
