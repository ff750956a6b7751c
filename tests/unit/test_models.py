"""Unit tests for portfolio entities."""

import dataclasses
from typing import Any

import pytest

from portfolio_auditor.errors import AuditorError, ErrorKind
from portfolio_auditor.models import (
    ActionItem,
    AnalysisResult,
    AuditScoreSet,
    Effort,
    Priority,
    RepositoryRecord,
    RepoStatus,
)


class TestAuditScoreSet:
    """Tests for AuditScoreSet entity."""

    def test_from_dict(self, analysis_payload: dict[str, Any]) -> None:
        audit = AuditScoreSet.from_dict(analysis_payload["repos"][0]["audit"])

        assert audit.documentation == 4.0
        assert audit.build_dev_x == 3.5
        assert audit.observability == 1.0
        assert audit.top_fixes == ("Add integration tests", "Add SECURITY.md")

    def test_average_is_derived(self, analysis_payload: dict[str, Any]) -> None:
        audit = AuditScoreSet.from_dict(analysis_payload["repos"][0]["audit"])

        assert audit.average == pytest.approx((4 + 3.5 + 2 + 3 + 2.5 + 1 + 4 + 3) / 8)

    def test_dimensions_in_display_order(self, analysis_payload: dict[str, Any]) -> None:
        audit = AuditScoreSet.from_dict(analysis_payload["repos"][0]["audit"])

        labels = [label for label, _ in audit.dimensions()]

        assert labels == [
            "Docs",
            "DevX",
            "Tests",
            "CI/CD",
            "Security",
            "Observability",
            "Maintainability",
            "Production",
        ]

    def test_score_out_of_range_raises(self, analysis_payload: dict[str, Any]) -> None:
        data = {**analysis_payload["repos"][0]["audit"], "security": 6}

        with pytest.raises(ValueError, match="out of range"):
            AuditScoreSet.from_dict(data)

    def test_is_immutable(self, analysis_payload: dict[str, Any]) -> None:
        audit = AuditScoreSet.from_dict(analysis_payload["repos"][0]["audit"])

        with pytest.raises(dataclasses.FrozenInstanceError):
            audit.testing = 5  # type: ignore[misc]


class TestRepositoryRecord:
    """Tests for RepositoryRecord entity."""

    def test_from_dict(self, python_repo: RepositoryRecord) -> None:
        assert python_repo.name == "demo"
        assert python_repo.status is RepoStatus.ACTIVE
        assert python_repo.primary_language == "Python"
        assert python_repo.frameworks == ("Typer",)

    def test_frameworks_optional(self, analysis_payload: dict[str, Any]) -> None:
        data = analysis_payload["repos"][0]
        del data["frameworks"]

        assert RepositoryRecord.from_dict(data).frameworks == ()

    def test_unknown_status_raises(self, analysis_payload: dict[str, Any]) -> None:
        data = {**analysis_payload["repos"][0], "status": "Abandoned"}

        with pytest.raises(ValueError):
            RepositoryRecord.from_dict(data)

    def test_empty_name_raises(self, analysis_payload: dict[str, Any]) -> None:
        data = {**analysis_payload["repos"][0], "name": "  "}

        with pytest.raises(ValueError, match="name cannot be empty"):
            RepositoryRecord.from_dict(data)


class TestActionItem:
    """Tests for ActionItem entity."""

    def test_from_dict(self, analysis_payload: dict[str, Any]) -> None:
        action = ActionItem.from_dict(analysis_payload["actions"][0])

        assert action.priority is Priority.HIGH
        assert action.effort is Effort.SMALL
        assert action.repo == "demo"


class TestAnalysisResult:
    """Tests for the root aggregate."""

    def test_from_dict(self, analysis_result: AnalysisResult) -> None:
        assert len(analysis_result.repos) == 2
        assert len(analysis_result.actions) == 1
        assert analysis_result.claims_check == ()
        assert analysis_result.summary.stats.total_repos == 2
        assert analysis_result.summary.spotlight_projects[0].impressive_factor == (
            "Clean plugin architecture"
        )

    def test_languages_are_read_only(self, analysis_result: AnalysisResult) -> None:
        languages = analysis_result.summary.stats.languages

        assert dict(languages) == {"Python": 1, "TypeScript": 1}
        with pytest.raises(TypeError):
            languages["Go"] = 1  # type: ignore[index]

    def test_languages_optional(self, analysis_payload: dict[str, Any]) -> None:
        del analysis_payload["summary"]["stats"]["languages"]

        result = AnalysisResult.from_dict(analysis_payload)

        assert dict(result.summary.stats.languages) == {}

    def test_find_repo(self, analysis_result: AnalysisResult) -> None:
        assert analysis_result.find_repo("webapp") is analysis_result.repos[1]

    def test_dangling_action_repo_is_tolerated(self, analysis_payload: dict[str, Any]) -> None:
        analysis_payload["actions"][0]["repo"] = "does-not-exist"

        result = AnalysisResult.from_dict(analysis_payload)

        assert result.find_repo(result.actions[0].repo) is None
        assert result.actions_for("demo") == []

    def test_to_dict_restores_wire_format(
        self, analysis_result: AnalysisResult, analysis_payload: dict[str, Any]
    ) -> None:
        data = analysis_result.to_dict()

        assert data["repos"][0]["primaryLanguage"] == "Python"
        assert data["summary"]["stats"]["languages"] == {"Python": 1, "TypeScript": 1}
        assert data["actions"] == analysis_payload["actions"]
        assert data["claimsCheck"] == []


class TestAuditorError:
    """Tests for the classified error type."""

    def test_notification_names_capability(self) -> None:
        error = AuditorError("boom", ErrorKind.TRANSPORT, capability="generate README")

        assert error.notification() == "Failed to generate README: boom"

    def test_notification_without_capability(self) -> None:
        assert AuditorError("boom", ErrorKind.INPUT).notification() == "boom"

    def test_only_transport_is_retryable(self) -> None:
        assert AuditorError("x", ErrorKind.TRANSPORT).retryable is True
        assert AuditorError("x", ErrorKind.DECODE).retryable is False
        assert AuditorError("x", ErrorKind.CONFIGURATION).retryable is False

    def test_carries_cause(self) -> None:
        cause = RuntimeError("socket closed")
        error = AuditorError("Network failure", ErrorKind.TRANSPORT, cause=cause)

        assert error.cause is cause
        assert str(error) == "Network failure"
