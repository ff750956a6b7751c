"""Portfolio Auditor configuration system.

Configuration is loaded once at process start and passed explicitly to the
capabilities; nothing reads the credential from ambient state afterwards.
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. Explicit path passed to load_config
2. ./.portfolio-auditor/config.yaml
3. ./portfolio-auditor.yaml

Without a config file, the credential comes from GEMINI_API_KEY (or API_KEY).
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from portfolio_auditor.models.llm_config import (
    DEFAULT_FLASH_MODEL,
    DEFAULT_PRO_MODEL,
    LLMConfig,
    parse_bool,
)

VALID_LOG_MODES = frozenset({"human", "verbose", "json"})
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class LoggingConfig:
    """Logging configuration.

    Attributes:
        mode: Output mode (human, verbose, json)
        level: Minimum level name
    """

    mode: str = "human"
    level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        self.mode = self.mode.lower()
        self.level = self.level.upper()
        if self.mode not in VALID_LOG_MODES:
            raise ValueError(f"Invalid log mode: {self.mode}. Valid: {sorted(VALID_LOG_MODES)}")
        if self.level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}. Valid: {sorted(VALID_LOG_LEVELS)}")


@dataclass
class AuditorConfig:
    """Top-level configuration.

    Attributes:
        llm: Completion service settings, including the credential
        logging: Logging output settings
    """

    llm: LLMConfig = field(default_factory=LLMConfig.from_env)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${GEMINI_API_KEY} -> value of GEMINI_API_KEY

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".portfolio-auditor" / "config.yaml",
        start_path / "portfolio-auditor.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> AuditorConfig:
    """Load configuration from a dictionary.

    A missing ``llm.api_key`` falls back to the environment credential.

    Args:
        data: Configuration dictionary

    Returns:
        AuditorConfig instance
    """
    data = substitute_env_vars(data)

    config = AuditorConfig()

    if "llm" in data:
        llm_data = data["llm"] or {}
        overrides = {
            "pro_model": llm_data.get("pro_model", DEFAULT_PRO_MODEL),
            "flash_model": llm_data.get("flash_model", DEFAULT_FLASH_MODEL),
            "temperature": float(llm_data.get("temperature", 0.2)),
            "max_tokens": int(llm_data.get("max_tokens", 8192)),
            "timeout": float(llm_data.get("timeout", 120.0)),
            "grounding": parse_bool(llm_data.get("grounding", True), "llm.grounding"),
        }
        if llm_data.get("api_key"):
            overrides["api_key"] = llm_data["api_key"]
        config.llm = LLMConfig.from_env(**overrides)

    if "logging" in data:
        logging_data = data["logging"] or {}
        config.logging = LoggingConfig(
            mode=logging_data.get("mode", "human"),
            level=logging_data.get("level", "INFO"),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> AuditorConfig:
    """Load configuration from file, or from the environment alone.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        AuditorConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = AuditorConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return f'''# Portfolio Auditor Configuration

# Completion service (Google Gemini via LiteLLM)
llm:
  api_key: "${{GEMINI_API_KEY}}"   # Required; env var substitution supported
  pro_model: "{DEFAULT_PRO_MODEL}"    # Portfolio analysis, CI/CD, doc strategy
  flash_model: "{DEFAULT_FLASH_MODEL}"  # Single-artifact generation
  temperature: 0.2
  max_tokens: 8192
  timeout: 120         # Seconds, enforced by the service client
  grounding: true      # Allow Google Search grounding for the analysis call

# Logging
logging:
  mode: "human"        # human, verbose, json
  level: "INFO"
'''
