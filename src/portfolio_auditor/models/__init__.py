"""Portfolio Auditor data models.

This module exports all core entities used throughout the application:
- AnalysisResult: Root aggregate of a portfolio analysis
- RepositoryRecord: One audited repository with its AuditScoreSet
- ActionItem: Prioritized recommendation
- PortfolioSummary: Executive narrative and aggregate statistics
- LLMConfig: Completion service settings
"""

from portfolio_auditor.models.llm_config import LLMConfig, ModelTier
from portfolio_auditor.models.portfolio import (
    ActionItem,
    AnalysisResult,
    AuditScoreSet,
    Effort,
    PortfolioStats,
    PortfolioSummary,
    Priority,
    RepositoryRecord,
    RepoStatus,
    SpotlightProject,
)

__all__ = [
    "ActionItem",
    "AnalysisResult",
    "AuditScoreSet",
    "Effort",
    "LLMConfig",
    "ModelTier",
    "PortfolioStats",
    "PortfolioSummary",
    "Priority",
    "RepoStatus",
    "RepositoryRecord",
    "SpotlightProject",
]
