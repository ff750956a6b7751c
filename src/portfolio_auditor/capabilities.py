"""Capability functions: the only entry points the presentation layer calls.

Each capability composes prompt building, one gateway request, and response
normalization. Order per call:
1. Credential check (CompletionGateway construction)
2. Input check (analysis URLs, artifact kind and subject)
3. Prompt construction
4. One outbound request
5. Normalization / decoding

Capabilities share no mutable state and may be called concurrently.
Every failure is raised as AuditorError tagged with the capability name.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date

from portfolio_auditor.errors import AuditorError, ErrorKind
from portfolio_auditor.llm.client import CompletionGateway
from portfolio_auditor.llm.normalize import decode_analysis, normalize_artifact
from portfolio_auditor.llm.prompts import (
    ArtifactKind,
    build_analysis_prompt,
    build_artifact_prompt,
    get_artifact_spec,
)
from portfolio_auditor.llm.schemas import ANALYSIS_SCHEMA
from portfolio_auditor.models.llm_config import LLMConfig, ModelTier
from portfolio_auditor.models.portfolio import (
    AnalysisResult,
    PortfolioSummary,
    RepositoryRecord,
)

logger = logging.getLogger(__name__)

ANALYZE_CAPABILITY = "analyze portfolio"


@contextmanager
def _capability(name: str) -> Iterator[None]:
    """Tag any AuditorError raised inside the block with the capability name."""
    try:
        yield
    except AuditorError as e:
        e.capability = name
        logger.error("Capability '%s' failed (%s): %s", name, e.kind.value, e.message)
        raise


def analyze_portfolio(config: LLMConfig, urls: str, context: str = "") -> AnalysisResult:
    """Run the structured portfolio analysis.

    Args:
        config: LLM configuration (credential required)
        urls: Raw list of repository/profile URLs, any separator
        context: Optional free-text notes

    Returns:
        Validated AnalysisResult

    Raises:
        AuditorError: CONFIGURATION, INPUT, TRANSPORT, or DECODE
    """
    with _capability(ANALYZE_CAPABILITY):
        gateway = CompletionGateway(config)

        if not urls or not urls.strip():
            raise AuditorError("URLs cannot be empty.", ErrorKind.INPUT)

        prompt = build_analysis_prompt(urls, context or "")
        logger.info("Analyzing portfolio (%d URL lines)", len(urls.strip().splitlines()))

        text = gateway.complete(
            prompt.prompt,
            tier=ModelTier.PRO,
            system_prompt=prompt.system,
            response_schema=ANALYSIS_SCHEMA,
            grounding=config.grounding,
        )
        result = decode_analysis(text)

    logger.info(
        "Analysis complete: %d repos, %d actions, %d claim contradictions",
        len(result.repos),
        len(result.actions),
        len(result.claims_check),
    )
    return result


def _artifact_capability(kind: ArtifactKind | str) -> str:
    """Capability name for an artifact kind; unknown kinds keep their raw name."""
    try:
        return f"generate {get_artifact_spec(kind).label}"
    except ValueError:
        return f"generate {getattr(kind, 'value', kind)}"


def generate_artifact(
    config: LLMConfig,
    kind: ArtifactKind | str,
    subject: RepositoryRecord | PortfolioSummary,
    today: date | None = None,
) -> str:
    """Generate one free-text artifact.

    A blank response yields the artifact's fallback text rather than an error.

    Args:
        config: LLM configuration (credential required)
        kind: Artifact to generate
        subject: Repository, or PortfolioSummary for portfolio-level artifacts
        today: Date for time-dependent content (license year)

    Returns:
        Artifact text without wrapping code fences

    Raises:
        AuditorError: CONFIGURATION, INPUT (unknown kind or wrong subject type),
            or TRANSPORT
    """
    with _capability(_artifact_capability(kind)):
        gateway = CompletionGateway(config)

        try:
            spec = get_artifact_spec(kind)
        except ValueError as e:
            raise AuditorError(
                f"Unknown artifact kind: {kind!r}.", ErrorKind.INPUT, cause=e
            ) from e

        try:
            prompt = build_artifact_prompt(spec.kind, subject, today=today)
        except TypeError as e:
            raise AuditorError(f"Invalid subject: {e}.", ErrorKind.INPUT, cause=e) from e

        logger.info("Generating %s (%s tier)", spec.label, spec.tier.value)
        text = gateway.complete(prompt, tier=spec.tier, require_content=False)

    return normalize_artifact(text, spec.fallback)


def generate_readme(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Generate README.md content for a repository."""
    return generate_artifact(config, ArtifactKind.README, repo)


def generate_ci_cd(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Generate a GitHub Actions workflow for a repository."""
    return generate_artifact(config, ArtifactKind.CI_CD, repo)


def generate_doc_strategy(config: LLMConfig, summary: PortfolioSummary) -> str:
    """Generate a documentation-as-code strategy for the whole portfolio."""
    return generate_artifact(config, ArtifactKind.DOC_STRATEGY, summary)


def generate_license(config: LLMConfig, repo: RepositoryRecord, today: date | None = None) -> str:
    """Generate a LICENSE for a repository, dated the current year."""
    return generate_artifact(config, ArtifactKind.LICENSE, repo, today=today)


def generate_commit_config(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Generate a conventional-commit config suited to the primary language."""
    return generate_artifact(config, ArtifactKind.COMMIT_CONFIG, repo)


def generate_issue_templates(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Generate bug report and feature request issue templates."""
    return generate_artifact(config, ArtifactKind.ISSUE_TEMPLATES, repo)


def generate_security_policy(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Generate a SECURITY.md vulnerability disclosure policy."""
    return generate_artifact(config, ArtifactKind.SECURITY_POLICY, repo)


def generate_code_of_conduct(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Generate a CODE_OF_CONDUCT.md for a repository."""
    return generate_artifact(config, ArtifactKind.CODE_OF_CONDUCT, repo)


def generate_directory_structure(config: LLMConfig, repo: RepositoryRecord) -> str:
    """Recommend a standardized directory layout for a repository."""
    return generate_artifact(config, ArtifactKind.DIRECTORY_STRUCTURE, repo)
