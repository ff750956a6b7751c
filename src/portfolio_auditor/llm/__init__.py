"""LLM integration module for Portfolio Auditor.

Provides the response schema registry, prompt builder, completion gateway
(LiteLLM against Gemini) and response normalizer used by the capabilities.
"""

from portfolio_auditor.llm.client import CompletionGateway
from portfolio_auditor.llm.normalize import (
    decode_analysis,
    normalize_artifact,
    strip_code_fences,
)
from portfolio_auditor.llm.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    ARTIFACT_SPECS,
    ArtifactKind,
    ArtifactSpec,
    PromptPair,
    artifact_title,
    build_analysis_prompt,
    build_artifact_prompt,
    commit_config_filename,
    get_artifact_spec,
)
from portfolio_auditor.llm.schemas import ANALYSIS_SCHEMA, SchemaViolation

__all__ = [
    "ANALYSIS_SCHEMA",
    "ANALYSIS_SYSTEM_PROMPT",
    "ARTIFACT_SPECS",
    "ArtifactKind",
    "ArtifactSpec",
    "CompletionGateway",
    "PromptPair",
    "SchemaViolation",
    "artifact_title",
    "build_analysis_prompt",
    "build_artifact_prompt",
    "commit_config_filename",
    "decode_analysis",
    "get_artifact_spec",
    "normalize_artifact",
    "strip_code_fences",
]
