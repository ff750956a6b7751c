"""Shared pytest fixtures for Portfolio Auditor tests.

Fixtures are organized by category:
- Configuration fixtures: LLM configs with and without a credential
- Payload fixtures: Wire-format analysis responses
- Model fixtures: Decoded entities for artifact prompts
- Service fixtures: Fake LiteLLM responses
"""

import copy
import json
import os
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

# Use LiteLLM's bundled model cost map instead of fetching it over the network at import.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from portfolio_auditor.models.llm_config import API_KEY_ENV_VARS, LLMConfig
from portfolio_auditor.models.portfolio import AnalysisResult, RepositoryRecord

# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_credential_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real API key out of every test."""
    for name in API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def llm_config() -> LLMConfig:
    """Return a valid LLM config with a test credential."""
    return LLMConfig(api_key="test-api-key")


@pytest.fixture
def keyless_config() -> LLMConfig:
    """Return an LLM config without a credential."""
    return LLMConfig(api_key=None)


# =============================================================================
# Payload Fixtures
# =============================================================================

_AUDIT = {
    "documentation": 4,
    "buildDevX": 3.5,
    "testing": 2,
    "ciCd": 3,
    "security": 2.5,
    "observability": 1,
    "maintainability": 4,
    "productionReadiness": 3,
    "rationale": "Solid README, thin test suite.",
    "topFixes": ["Add integration tests", "Add SECURITY.md"],
}

_ANALYSIS_PAYLOAD: dict[str, Any] = {
    "summary": {
        "executiveSummary": "A focused portfolio of developer tooling.",
        "stats": {
            "totalRepos": 2,
            "activeCount": 1,
            "archivedCount": 1,
            "languages": {"Python": 1, "TypeScript": 1},
        },
        "capabilities": ["CLI tooling", "Web frontends"],
        "spotlightProjects": [
            {
                "name": "demo",
                "description": "Demo CLI",
                "impressiveFactor": "Clean plugin architecture",
            }
        ],
    },
    "repos": [
        {
            "name": "demo",
            "url": "https://github.com/example/demo",
            "status": "Active",
            "primaryLanguage": "Python",
            "frameworks": ["Typer"],
            "audit": _AUDIT,
            "description": "Demo CLI",
        },
        {
            "name": "webapp",
            "url": "https://github.com/example/webapp",
            "status": "Archived",
            "primaryLanguage": "TypeScript",
            "frameworks": [],
            "audit": {**_AUDIT, "testing": 0, "ciCd": 5},
            "description": "Old web frontend",
        },
    ],
    "actions": [
        {
            "title": "Add CI workflow",
            "repo": "demo",
            "priority": "High",
            "impact": "Catches regressions early",
            "effort": "Small",
            "rationale": "No workflow files detected",
        }
    ],
    "claimsCheck": [],
}


@pytest.fixture
def analysis_payload() -> dict[str, Any]:
    """Return a fresh, schema-valid analysis payload."""
    return copy.deepcopy(_ANALYSIS_PAYLOAD)


@pytest.fixture
def analysis_json(analysis_payload: dict[str, Any]) -> str:
    """Return the analysis payload serialized as the service would."""
    return json.dumps(analysis_payload)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def analysis_result(analysis_payload: dict[str, Any]) -> AnalysisResult:
    """Return a decoded AnalysisResult."""
    return AnalysisResult.from_dict(analysis_payload)


@pytest.fixture
def python_repo(analysis_result: AnalysisResult) -> RepositoryRecord:
    """Return the Python repository record named "demo"."""
    return analysis_result.repos[0]


@pytest.fixture
def typescript_repo(analysis_result: AnalysisResult) -> RepositoryRecord:
    """Return the TypeScript repository record named "webapp"."""
    return analysis_result.repos[1]


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def make_litellm_response() -> Callable[[str | None], MagicMock]:
    """Factory for mock LiteLLM completion responses."""

    def _make(content: str | None) -> MagicMock:
        response = MagicMock()
        response.choices = [
            MagicMock(
                message=MagicMock(content=content),
                finish_reason="stop",
            )
        ]
        response.model = "gemini-3-flash-preview"
        response.usage = MagicMock(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        return response

    return _make
