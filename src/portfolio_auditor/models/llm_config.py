"""LLM configuration entity for Portfolio Auditor.

Defines the connection settings for the Gemini completion service and the
two model tiers capabilities choose between.
"""

import os
from dataclasses import dataclass, field
from enum import Enum

# Environment variables consulted for the credential, in priority order
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

DEFAULT_PRO_MODEL = "gemini-3-pro-preview"
DEFAULT_FLASH_MODEL = "gemini-3-flash-preview"

_TRUE_STRINGS = frozenset({"true", "1"})
_FALSE_STRINGS = frozenset({"false", "0"})


def parse_bool(value: object, name: str) -> bool:
    """Interpret a config value as a boolean.

    Accepts real booleans and the strings "true"/"false"/"1"/"0" in any case,
    which is what ${VAR} substitution produces.

    Raises:
        ValueError: If the value is anything else
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{name} must be true or false, got {value!r}")


class ModelTier(Enum):
    """Service-side model variant.

    PRO handles multi-entity reasoning (portfolio analysis, CI/CD, doc strategy).
    FLASH handles single-artifact generation.
    """

    PRO = "pro"
    FLASH = "flash"


@dataclass
class LLMConfig:
    """Configuration for the completion service.

    The credential may be absent here; presence is validated when a
    CompletionGateway is constructed so that every capability reports a
    missing key the same way.

    Attributes:
        api_key: Gemini API key
        pro_model: Model identifier for the PRO tier
        flash_model: Model identifier for the FLASH tier
        temperature: Sampling temperature (0-2)
        max_tokens: Maximum response tokens
        timeout: Request timeout in seconds, enforced by the service client
        grounding: Whether the analysis call may use Google Search grounding
    """

    api_key: str | None = None
    pro_model: str = DEFAULT_PRO_MODEL
    flash_model: str = DEFAULT_FLASH_MODEL
    temperature: float = field(default=0.2)
    max_tokens: int = field(default=8192)
    timeout: float = field(default=120.0)
    grounding: bool = field(default=True)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.api_key is not None:
            self.api_key = self.api_key.strip() or None

        for attr in ("pro_model", "flash_model"):
            value = getattr(self, attr)
            if not value or not value.strip():
                raise ValueError(f"{attr} cannot be empty")
            setattr(self, attr, value.strip())

        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0 and 2. Got: {self.temperature}")

        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive. Got: {self.max_tokens}")

        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive. Got: {self.timeout}")

    @property
    def has_credential(self) -> bool:
        """Return True if an API key is configured."""
        return bool(self.api_key)

    def model_for(self, tier: ModelTier) -> str:
        """Return the configured model identifier for a tier."""
        return self.pro_model if tier is ModelTier.PRO else self.flash_model

    def get_litellm_model_name(self, tier: ModelTier) -> str:
        """Get the model name in LiteLLM format.

        Args:
            tier: Model tier to resolve

        Returns:
            Model name with LiteLLM's gemini/ provider prefix
        """
        return f"gemini/{self.model_for(tier)}"

    def to_dict(self) -> dict[str, str | int | float | bool | None]:
        """Convert to dictionary for serialization (credential redacted)."""
        return {
            "api_key": "***" if self.api_key else None,
            "pro_model": self.pro_model,
            "flash_model": self.flash_model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "grounding": self.grounding,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str | int | float | bool | None]) -> "LLMConfig":
        """Create LLMConfig from dictionary.

        Args:
            data: Dictionary with configuration values

        Returns:
            LLMConfig instance
        """
        return cls(
            api_key=data.get("api_key") if data.get("api_key") else None,  # type: ignore[arg-type]
            pro_model=str(data.get("pro_model", DEFAULT_PRO_MODEL)),
            flash_model=str(data.get("flash_model", DEFAULT_FLASH_MODEL)),
            temperature=float(data.get("temperature", 0.2)),  # type: ignore[arg-type]
            max_tokens=int(data.get("max_tokens", 8192)),  # type: ignore[arg-type]
            timeout=float(data.get("timeout", 120.0)),  # type: ignore[arg-type]
            grounding=parse_bool(data.get("grounding", True), "grounding"),
        )

    @classmethod
    def from_env(cls, **overrides: object) -> "LLMConfig":
        """Create LLMConfig with the credential sourced from the environment.

        Args:
            **overrides: Field values that take precedence over defaults

        Returns:
            LLMConfig instance (api_key None if no variable is set)
        """
        api_key = None
        for name in API_KEY_ENV_VARS:
            value = os.environ.get(name)
            if value:
                api_key = value
                break

        overrides.setdefault("api_key", api_key)
        return cls(**overrides)  # type: ignore[arg-type]
