"""Response normalization.

- Free-text artifacts: strip a wrapping code fence; blank output becomes the
  capability's fallback text instead of an error.
- Structured analysis: decode JSON, check it against ANALYSIS_SCHEMA, and
  build the immutable AnalysisResult. Any failure is a DECODE error.
"""

import json
import logging
import re

from portfolio_auditor.errors import AuditorError, ErrorKind
from portfolio_auditor.llm.schemas import ANALYSIS_SCHEMA, SchemaViolation
from portfolio_auditor.models.portfolio import AnalysisResult

logger = logging.getLogger(__name__)

# Opening fence line, optionally language-tagged (```json, ```yaml, ...)
_OPENING_FENCE = re.compile(r"```[\w+.-]*")
_CLOSING_FENCE = "```"


def _fences_balanced(lines: list[str]) -> bool:
    """Return True if every fenced block opened in ``lines`` is also closed.

    Inside an open block only a bare ``` closes it; tagged fence lines are
    content there.
    """
    in_block = False
    for line in lines:
        candidate = line.strip()
        if not candidate.startswith(_CLOSING_FENCE):
            continue
        if not in_block:
            in_block = True
        elif candidate == _CLOSING_FENCE:
            in_block = False
    return not in_block


def _unwrap_fence(text: str) -> str | None:
    """Return the interior if one fenced block spans all of ``text``, else None."""
    lines = text.split("\n")
    if len(lines) < 2:
        return None
    if not _OPENING_FENCE.fullmatch(lines[0].strip()) or lines[-1].strip() != _CLOSING_FENCE:
        return None
    interior = lines[1:-1]
    if not _fences_balanced(interior):
        return None
    return "\n".join(interior).strip()


def strip_code_fences(text: str | None) -> str:
    """Remove a fence that wraps the entire response.

    Only a single outer fence whose interior fences are balanced is removed.
    Text that merely starts and ends with separate code blocks, and text
    whose interior is itself one wrapped block, is returned trimmed but
    otherwise untouched. Applying the function twice yields the same result
    as applying it once.

    Args:
        text: Raw response text

    Returns:
        Trimmed interior of the fence, or the trimmed text
    """
    if not text:
        return ""
    stripped = text.strip()
    interior = _unwrap_fence(stripped)
    if interior is None or _unwrap_fence(interior) is not None:
        return stripped
    return interior


def normalize_artifact(text: str | None, fallback: str) -> str:
    """Normalize a free-text artifact, substituting the fallback when blank."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        logger.warning("Blank artifact response, using fallback text")
        return fallback
    return cleaned


def decode_analysis(text: str) -> AnalysisResult:
    """Decode a structured analysis response.

    Args:
        text: Raw response text from the analysis request

    Returns:
        AnalysisResult

    Raises:
        AuditorError: DECODE if the text is not valid JSON or does not match
            the analysis schema
    """
    payload = strip_code_fences(text)

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning("Analysis response is not valid JSON: %s", e)
        raise AuditorError(
            "Failed to parse AI response. Please try again.",
            ErrorKind.DECODE,
            cause=e,
        ) from e

    try:
        ANALYSIS_SCHEMA.validate(data)
        return AnalysisResult.from_dict(data)
    except (SchemaViolation, ValueError, KeyError, TypeError) as e:
        logger.warning("Analysis response does not match the schema: %s", e)
        raise AuditorError(
            f"AI response did not match the expected shape: {e}",
            ErrorKind.DECODE,
            cause=e,
        ) from e
