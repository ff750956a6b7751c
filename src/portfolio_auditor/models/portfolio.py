"""Portfolio analysis entities.

This module contains the immutable value shapes decoded from a single
structured completion response:
- AuditScoreSet: Eight 0-5 quality dimensions plus rationale and top fixes
- RepositoryRecord: One audited repository
- ActionItem: Prioritized recommendation
- PortfolioSummary: Executive narrative, stats, capabilities, spotlights
- AnalysisResult: Root aggregate

Instances are built once by ``from_dict`` and never mutated. Wire keys are
camelCase to match the response schema; ``to_dict`` converts back.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

SCORE_MIN = 0.0
SCORE_MAX = 5.0


class RepoStatus(Enum):
    """Lifecycle status of a repository."""

    ACTIVE = "Active"
    DORMANT = "Dormant"
    ARCHIVED = "Archived"
    TEMPLATE = "Template"
    FORK = "Fork"
    UNKNOWN = "Unknown"


class Priority(Enum):
    """Priority of an action item."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Effort(Enum):
    """Estimated effort of an action item."""

    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


# Wire key, attribute name, display label (radar chart axis order)
AUDIT_DIMENSIONS: tuple[tuple[str, str, str], ...] = (
    ("documentation", "documentation", "Docs"),
    ("buildDevX", "build_dev_x", "DevX"),
    ("testing", "testing", "Tests"),
    ("ciCd", "ci_cd", "CI/CD"),
    ("security", "security", "Security"),
    ("observability", "observability", "Observability"),
    ("maintainability", "maintainability", "Maintainability"),
    ("productionReadiness", "production_readiness", "Production"),
)


@dataclass(frozen=True)
class AuditScoreSet:
    """Audit scores for a single repository.

    Attributes:
        documentation: README/docs quality (0-5)
        build_dev_x: Build and developer experience (0-5)
        testing: Test presence and depth (0-5)
        ci_cd: CI/CD configuration (0-5)
        security: Security posture (0-5)
        observability: Logging/metrics/tracing (0-5)
        maintainability: Code health and structure (0-5)
        production_readiness: Deployability (0-5)
        rationale: Free-text justification of the scores
        top_fixes: Recommended fixes, highest priority first
    """

    documentation: float
    build_dev_x: float
    testing: float
    ci_cd: float
    security: float
    observability: float
    maintainability: float
    production_readiness: float
    rationale: str
    top_fixes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject scores outside the closed 0-5 range."""
        for _, attr, _ in AUDIT_DIMENSIONS:
            score = getattr(self, attr)
            if not SCORE_MIN <= score <= SCORE_MAX:
                raise ValueError(f"Audit score '{attr}' out of range [0, 5]: {score}")

    @property
    def average(self) -> float:
        """Mean of the eight dimensions."""
        scores = [getattr(self, attr) for _, attr, _ in AUDIT_DIMENSIONS]
        return sum(scores) / len(scores)

    def dimensions(self) -> list[tuple[str, float]]:
        """Return (label, score) pairs in display order."""
        return [(label, getattr(self, attr)) for _, attr, label in AUDIT_DIMENSIONS]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuditScoreSet":
        """Create from a decoded ``audit`` object."""
        scores = {attr: float(data[key]) for key, attr, _ in AUDIT_DIMENSIONS}
        return cls(
            **scores,
            rationale=str(data["rationale"]),
            top_fixes=tuple(str(fix) for fix in data["topFixes"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        result: dict[str, Any] = {key: getattr(self, attr) for key, attr, _ in AUDIT_DIMENSIONS}
        result["rationale"] = self.rationale
        result["topFixes"] = list(self.top_fixes)
        return result


@dataclass(frozen=True)
class RepositoryRecord:
    """A single audited repository.

    Attributes:
        name: Repository name (non-empty)
        url: Repository URL as given or inferred
        status: Lifecycle status
        primary_language: Dominant language
        frameworks: Detected frameworks (may be empty)
        audit: Audit scores
        description: Short description
    """

    name: str
    url: str
    status: RepoStatus
    primary_language: str
    audit: AuditScoreSet
    description: str
    frameworks: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate repository name."""
        if not self.name or not self.name.strip():
            raise ValueError("Repository name cannot be empty")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RepositoryRecord":
        """Create from a decoded repository object."""
        return cls(
            name=str(data["name"]),
            url=str(data["url"]),
            status=RepoStatus(data["status"]),
            primary_language=str(data["primaryLanguage"]),
            frameworks=tuple(str(fw) for fw in data.get("frameworks", [])),
            audit=AuditScoreSet.from_dict(data["audit"]),
            description=str(data["description"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        return {
            "name": self.name,
            "url": self.url,
            "status": self.status.value,
            "primaryLanguage": self.primary_language,
            "frameworks": list(self.frameworks),
            "audit": self.audit.to_dict(),
            "description": self.description,
        }


@dataclass(frozen=True)
class ActionItem:
    """Prioritized recommendation targeting one repository.

    ``repo`` is expected to name a RepositoryRecord but is not checked.
    """

    title: str
    repo: str
    priority: Priority
    effort: Effort
    impact: str
    rationale: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActionItem":
        """Create from a decoded action object."""
        return cls(
            title=str(data["title"]),
            repo=str(data["repo"]),
            priority=Priority(data["priority"]),
            effort=Effort(data["effort"]),
            impact=str(data["impact"]),
            rationale=str(data["rationale"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        return {
            "title": self.title,
            "repo": self.repo,
            "priority": self.priority.value,
            "impact": self.impact,
            "effort": self.effort.value,
            "rationale": self.rationale,
        }


@dataclass(frozen=True)
class PortfolioStats:
    """Aggregate portfolio statistics.

    Attributes:
        total_repos: Number of repositories analyzed
        active_count: Repositories considered active
        archived_count: Repositories considered archived
        languages: Language name -> occurrence count
    """

    total_repos: int
    active_count: int
    archived_count: int
    languages: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PortfolioStats":
        """Create from a decoded ``stats`` object."""
        languages = {str(k): int(v) for k, v in data.get("languages", {}).items()}
        return cls(
            total_repos=int(data["totalRepos"]),
            active_count=int(data["activeCount"]),
            archived_count=int(data["archivedCount"]),
            languages=MappingProxyType(languages),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        return {
            "totalRepos": self.total_repos,
            "activeCount": self.active_count,
            "archivedCount": self.archived_count,
            "languages": dict(self.languages),
        }


@dataclass(frozen=True)
class SpotlightProject:
    """A project worth highlighting."""

    name: str
    description: str
    impressive_factor: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SpotlightProject":
        """Create from a decoded spotlight object."""
        return cls(
            name=str(data["name"]),
            description=str(data["description"]),
            impressive_factor=str(data["impressiveFactor"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "impressiveFactor": self.impressive_factor,
        }


@dataclass(frozen=True)
class PortfolioSummary:
    """Portfolio-level narrative and statistics."""

    executive_summary: str
    stats: PortfolioStats
    capabilities: tuple[str, ...] = ()
    spotlight_projects: tuple[SpotlightProject, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PortfolioSummary":
        """Create from a decoded ``summary`` object."""
        return cls(
            executive_summary=str(data["executiveSummary"]),
            stats=PortfolioStats.from_dict(data["stats"]),
            capabilities=tuple(str(c) for c in data["capabilities"]),
            spotlight_projects=tuple(
                SpotlightProject.from_dict(p) for p in data["spotlightProjects"]
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        return {
            "executiveSummary": self.executive_summary,
            "stats": self.stats.to_dict(),
            "capabilities": list(self.capabilities),
            "spotlightProjects": [p.to_dict() for p in self.spotlight_projects],
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Root aggregate of a portfolio analysis.

    Attributes:
        summary: Portfolio summary
        repos: Audited repositories, in response order
        actions: Action items, in response order
        claims_check: Contradictions between user claims and observed
            evidence; empty means none were found
    """

    summary: PortfolioSummary
    repos: tuple[RepositoryRecord, ...] = ()
    actions: tuple[ActionItem, ...] = ()
    claims_check: tuple[str, ...] = ()

    def find_repo(self, name: str) -> RepositoryRecord | None:
        """Look up a repository by name (e.g. the target of an ActionItem)."""
        for repo in self.repos:
            if repo.name == name:
                return repo
        return None

    def actions_for(self, repo_name: str) -> list[ActionItem]:
        """Return action items targeting the named repository."""
        return [a for a in self.actions if a.repo == repo_name]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisResult":
        """Create from the decoded root object."""
        return cls(
            summary=PortfolioSummary.from_dict(data["summary"]),
            repos=tuple(RepositoryRecord.from_dict(r) for r in data["repos"]),
            actions=tuple(ActionItem.from_dict(a) for a in data["actions"]),
            claims_check=tuple(str(c) for c in data["claimsCheck"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary."""
        return {
            "summary": self.summary.to_dict(),
            "repos": [r.to_dict() for r in self.repos],
            "actions": [a.to_dict() for a in self.actions],
            "claimsCheck": list(self.claims_check),
        }
