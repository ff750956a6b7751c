"""LLM prompt construction for portfolio analysis and artifact generation.

Prompts are pure functions of their inputs. Task text lives in Jinja2
templates under ``portfolio_auditor/templates/prompts``; each artifact kind is
described by an ArtifactSpec entry (template, model tier, fallback text,
display title) so adding an artifact means adding data, not code.
"""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

from portfolio_auditor.models.llm_config import ModelTier
from portfolio_auditor.models.portfolio import PortfolioSummary, RepositoryRecord

# =============================================================================
# Portfolio Analysis
# =============================================================================

ANALYSIS_SYSTEM_PROMPT = """You are a Portfolio Intelligence Auditor and Engineering Signal Analyst.
Your job is to analyze the GitHub repositories provided by the user.

HARD RULES:
1. Do NOT invent stars, forks, downloads, or traffic metrics.
2. Prefer conservative, hedged language over confident claims.
3. Output STRICT JSON matching the provided response schema. Nothing else.
4. If you cannot access a URL, infer what you can from the URL structure and
   the user context; mark status as Unknown if the source is completely blocked.
5. Score each repository 0-5 on every audit dimension against typical best
   practices (README present, CI/CD configs, tests, security policy, logging).
"""


@dataclass(frozen=True)
class PromptPair:
    """System instruction plus task prompt for one completion request."""

    system: str
    prompt: str


@lru_cache(maxsize=1)
def _environment() -> Environment:
    """Jinja2 environment for prompt templates (plain text, strict variables)."""
    return Environment(
        loader=PackageLoader("portfolio_auditor", "templates/prompts"),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_template(name: str, /, **context: Any) -> str:
    """Render a prompt template by file name.

    Args:
        name: Template file name (e.g. "readme.j2")
        **context: Template variables

    Returns:
        Rendered prompt text, stripped of surrounding whitespace
    """
    return _environment().get_template(name).render(**context).strip()


def build_analysis_prompt(urls: str, context: str = "") -> PromptPair:
    """Build the structured portfolio analysis request.

    The URL list and context are interpolated verbatim.

    Args:
        urls: Raw URL list as entered by the user
        context: Free-text notes about the repositories

    Returns:
        PromptPair with the auditor system instruction
    """
    prompt = render_template("analysis.j2", urls=urls, context=context)
    return PromptPair(system=ANALYSIS_SYSTEM_PROMPT, prompt=prompt)


# =============================================================================
# Artifact Generation
# =============================================================================


class ArtifactKind(Enum):
    """Identifier of a single-artifact generation capability."""

    README = "readme"
    CI_CD = "ci_cd"
    DOC_STRATEGY = "doc_strategy"
    LICENSE = "license"
    COMMIT_CONFIG = "commit_config"
    ISSUE_TEMPLATES = "issue_templates"
    SECURITY_POLICY = "security_policy"
    CODE_OF_CONDUCT = "code_of_conduct"
    DIRECTORY_STRUCTURE = "directory_structure"


@dataclass(frozen=True)
class ArtifactSpec:
    """Declarative description of one artifact capability.

    Attributes:
        kind: Capability identifier
        label: Human name used in error notifications ("README")
        template: Prompt template file name
        tier: Model tier to request
        fallback: Text returned when the service answers with nothing
        title: Display title pattern; {name} is the repository name
        output_format: Format named in the closing raw-output instruction
        portfolio_level: True if the subject is a PortfolioSummary
    """

    kind: ArtifactKind
    label: str
    template: str
    tier: ModelTier
    fallback: str
    title: str
    output_format: str = "Markdown"
    portfolio_level: bool = False


ARTIFACT_SPECS: dict[ArtifactKind, ArtifactSpec] = {
    spec.kind: spec
    for spec in (
        ArtifactSpec(
            kind=ArtifactKind.README,
            label="README",
            template="readme.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate README.",
            title="README.md - {name}",
        ),
        ArtifactSpec(
            kind=ArtifactKind.CI_CD,
            label="CI/CD configuration",
            template="ci_cd.j2",
            tier=ModelTier.PRO,
            fallback="Failed to generate CI/CD configuration.",
            title=".github/workflows/ci.yml - {name}",
            output_format="YAML",
        ),
        ArtifactSpec(
            kind=ArtifactKind.DOC_STRATEGY,
            label="Documentation Strategy",
            template="doc_strategy.j2",
            tier=ModelTier.PRO,
            fallback="Failed to generate Documentation Strategy.",
            title="Documentation Strategy",
            portfolio_level=True,
        ),
        ArtifactSpec(
            kind=ArtifactKind.LICENSE,
            label="License",
            template="license.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate License.",
            title="LICENSE - {name}",
            output_format="text",
        ),
        ArtifactSpec(
            kind=ArtifactKind.COMMIT_CONFIG,
            label="Commit Config",
            template="commit_config.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate Commit Config.",
            title="Commit Config - {name}",
            output_format="code",
        ),
        ArtifactSpec(
            kind=ArtifactKind.ISSUE_TEMPLATES,
            label="Issue Templates",
            template="issue_templates.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate Issue Templates.",
            title="Issue Templates - {name}",
        ),
        ArtifactSpec(
            kind=ArtifactKind.SECURITY_POLICY,
            label="Security Policy",
            template="security_policy.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate Security Policy.",
            title="SECURITY.md - {name}",
        ),
        ArtifactSpec(
            kind=ArtifactKind.CODE_OF_CONDUCT,
            label="Code of Conduct",
            template="code_of_conduct.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate Code of Conduct.",
            title="CODE_OF_CONDUCT.md - {name}",
        ),
        ArtifactSpec(
            kind=ArtifactKind.DIRECTORY_STRUCTURE,
            label="Directory Structure",
            template="directory_structure.j2",
            tier=ModelTier.FLASH,
            fallback="Failed to generate Directory Structure.",
            title="Structure - {name}",
            output_format="text/Markdown",
        ),
    )
}


def get_artifact_spec(kind: ArtifactKind | str) -> ArtifactSpec:
    """Look up the spec for an artifact kind.

    Args:
        kind: ArtifactKind or its string value (e.g. "readme")

    Returns:
        Matching ArtifactSpec

    Raises:
        ValueError: If the kind is unknown
    """
    return ARTIFACT_SPECS[ArtifactKind(kind)]


# Primary languages that use the Node toolchain for commit linting
_JS_ECOSYSTEM = re.compile(r"\b(javascript|typescript|node|react|vue|angular)\b", re.IGNORECASE)

COMMITLINT_CONFIG = "commitlint.config.js"
PRE_COMMIT_CONFIG = ".pre-commit-config.yaml"


def is_js_ecosystem(language: str) -> bool:
    """Return True if the language belongs to the JavaScript/TypeScript family."""
    return bool(_JS_ECOSYSTEM.search(language or ""))


def commit_config_filename(language: str) -> str:
    """Select the conventional-commit config file for a primary language."""
    return COMMITLINT_CONFIG if is_js_ecosystem(language) else PRE_COMMIT_CONFIG


def _repository_context(repo: RepositoryRecord, today: date) -> dict[str, Any]:
    return {
        "name": repo.name,
        "url": repo.url,
        "language": repo.primary_language,
        "frameworks": list(repo.frameworks),
        "description": repo.description,
        "status": repo.status.value,
        "year": today.year,
        "holder": f"The {repo.name} Contributors",
        "commit_config_file": commit_config_filename(repo.primary_language),
        "js_ecosystem": is_js_ecosystem(repo.primary_language),
    }


def _summary_context(summary: PortfolioSummary) -> dict[str, Any]:
    return {
        "total_repos": summary.stats.total_repos,
        "languages": list(summary.stats.languages),
        "capabilities": list(summary.capabilities),
    }


def build_artifact_prompt(
    kind: ArtifactKind | str,
    subject: RepositoryRecord | PortfolioSummary,
    today: date | None = None,
) -> str:
    """Build the prompt for a single artifact.

    Args:
        kind: Artifact to generate
        subject: RepositoryRecord, or PortfolioSummary for portfolio-level kinds
        today: Date used for the copyright year (defaults to today)

    Returns:
        Prompt text ending with the raw-output instruction

    Raises:
        TypeError: If the subject does not match the artifact kind
    """
    spec = get_artifact_spec(kind)

    if spec.portfolio_level:
        if not isinstance(subject, PortfolioSummary):
            raise TypeError(f"{spec.kind.value} requires a PortfolioSummary")
        context = _summary_context(subject)
    else:
        if not isinstance(subject, RepositoryRecord):
            raise TypeError(f"{spec.kind.value} requires a RepositoryRecord")
        context = _repository_context(subject, today or date.today())

    return render_template(spec.template, output_format=spec.output_format, **context)


def artifact_title(kind: ArtifactKind | str, subject: RepositoryRecord | PortfolioSummary) -> str:
    """Display title for a generated artifact (e.g. "README.md - demo")."""
    spec = get_artifact_spec(kind)
    name = subject.name if isinstance(subject, RepositoryRecord) else ""
    return spec.title.format(name=name)
