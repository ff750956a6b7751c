"""Portfolio Auditor - LLM-backed engineering portfolio intelligence.

Collects repository URLs and free-text context, asks a hosted completion
service (Google Gemini via LiteLLM) for a schema-constrained audit, and hands
back an immutable, validated AnalysisResult. Secondary capabilities generate
single artifacts (README, CI/CD workflow, LICENSE, ...) for one repository.

Core guarantees:
- Every capability returns a well-typed value or raises AuditorError
- At most one outbound request per capability call, no retries
- No shared mutable state between calls
"""

__version__ = "0.1.0"
__author__ = "Portfolio Auditor Contributors"
