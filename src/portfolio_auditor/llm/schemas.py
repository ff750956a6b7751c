"""Response schema registry for the structured portfolio analysis call.

Schemas are a small tagged tree of node types (object, array, enum, string,
number, integer, map). Each node renders itself to the OpenAPI-subset
dictionary the completion service accepts as a response schema, and can
check a decoded JSON value against itself.

Composition order: AUDIT_SCHEMA -> REPOSITORY_SCHEMA -> ACTION_SCHEMA ->
SUMMARY_SCHEMA -> ANALYSIS_SCHEMA (root).
"""

from dataclasses import dataclass, field
from typing import Any

from portfolio_auditor.models.portfolio import (
    AUDIT_DIMENSIONS,
    SCORE_MAX,
    SCORE_MIN,
    Effort,
    Priority,
    RepoStatus,
)


class SchemaViolation(ValueError):
    """Raised when a decoded value does not match its schema.

    Attributes:
        path: JSON path of the offending value (e.g. "$.repos[0].status")
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


@dataclass(frozen=True)
class SchemaNode:
    """Base class for schema nodes."""

    description: str | None = field(default=None, kw_only=True)

    type_name = ""

    def to_schema(self) -> dict[str, Any]:
        """Render as a response-schema dictionary."""
        schema: dict[str, Any] = {"type": self.type_name}
        if self.description:
            schema["description"] = self.description
        return schema

    def validate(self, value: Any, path: str = "$") -> None:
        """Check a decoded value against this node.

        Raises:
            SchemaViolation: If the value does not conform
        """
        raise NotImplementedError


@dataclass(frozen=True)
class StringNode(SchemaNode):
    type_name = "string"

    def validate(self, value: Any, path: str = "$") -> None:
        if not isinstance(value, str):
            raise SchemaViolation(path, f"expected string, got {type(value).__name__}")


@dataclass(frozen=True)
class NumberNode(SchemaNode):
    """Floating point value with optional inclusive bounds."""

    minimum: float | None = None
    maximum: float | None = None

    type_name = "number"

    def __post_init__(self) -> None:
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError(f"minimum {self.minimum} exceeds maximum {self.maximum}")

    def to_schema(self) -> dict[str, Any]:
        schema = super().to_schema()
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema

    def validate(self, value: Any, path: str = "$") -> None:
        if not _is_number(value):
            raise SchemaViolation(path, f"expected {self.type_name}, got {type(value).__name__}")
        if self.minimum is not None and value < self.minimum:
            raise SchemaViolation(path, f"{value} is below minimum {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            raise SchemaViolation(path, f"{value} is above maximum {self.maximum}")


@dataclass(frozen=True)
class IntegerNode(NumberNode):
    """Whole number; integral floats such as 3.0 are accepted."""

    type_name = "integer"

    def validate(self, value: Any, path: str = "$") -> None:
        super().validate(value, path)
        if isinstance(value, float) and not value.is_integer():
            raise SchemaViolation(path, f"expected integer, got {value}")


@dataclass(frozen=True)
class EnumNode(SchemaNode):
    """String restricted to a closed set of values."""

    values: tuple[str, ...] = ()

    type_name = "string"

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("EnumNode requires at least one value")

    def to_schema(self) -> dict[str, Any]:
        schema = super().to_schema()
        schema["enum"] = list(self.values)
        return schema

    def validate(self, value: Any, path: str = "$") -> None:
        if value not in self.values:
            raise SchemaViolation(path, f"{value!r} is not one of {list(self.values)}")


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    items: SchemaNode = field(default_factory=StringNode)

    type_name = "array"

    def to_schema(self) -> dict[str, Any]:
        schema = super().to_schema()
        schema["items"] = self.items.to_schema()
        return schema

    def validate(self, value: Any, path: str = "$") -> None:
        if not isinstance(value, list):
            raise SchemaViolation(path, f"expected array, got {type(value).__name__}")
        for index, item in enumerate(value):
            self.items.validate(item, f"{path}[{index}]")


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    """Object with named properties.

    ``required`` must be a subset of the property names; unknown keys in a
    decoded value are ignored.
    """

    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    type_name = "object"

    def __post_init__(self) -> None:
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"Required fields not declared as properties: {unknown}")

    def to_schema(self) -> dict[str, Any]:
        schema = super().to_schema()
        schema["properties"] = {
            name: node.to_schema() for name, node in self.properties.items()
        }
        if self.required:
            schema["required"] = list(self.required)
        return schema

    def validate(self, value: Any, path: str = "$") -> None:
        if not isinstance(value, dict):
            raise SchemaViolation(path, f"expected object, got {type(value).__name__}")
        for name in self.required:
            if name not in value:
                raise SchemaViolation(f"{path}.{name}", "required field is missing")
        for name, node in self.properties.items():
            if name in value:
                node.validate(value[name], f"{path}.{name}")


@dataclass(frozen=True)
class MapNode(SchemaNode):
    """Object with free-form keys and uniformly typed values.

    Rendered as a bare object; the key/value contract travels in the
    description.
    """

    values: SchemaNode = field(default_factory=StringNode)

    type_name = "object"

    def validate(self, value: Any, path: str = "$") -> None:
        if not isinstance(value, dict):
            raise SchemaViolation(path, f"expected object, got {type(value).__name__}")
        for key, item in value.items():
            self.values.validate(item, f"{path}.{key}")


def _enum_values(enum_cls: type) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)  # type: ignore[attr-defined]


# =============================================================================
# Registry
# =============================================================================

_SCORE = NumberNode(minimum=SCORE_MIN, maximum=SCORE_MAX, description="Score 0-5")

AUDIT_SCHEMA = ObjectNode(
    properties={
        **{key: _SCORE for key, _, _ in AUDIT_DIMENSIONS},
        "rationale": StringNode(),
        "topFixes": ArrayNode(items=StringNode()),
    },
    required=(*(key for key, _, _ in AUDIT_DIMENSIONS), "rationale", "topFixes"),
)

REPOSITORY_SCHEMA = ObjectNode(
    properties={
        "name": StringNode(),
        "url": StringNode(),
        "status": EnumNode(values=_enum_values(RepoStatus)),
        "primaryLanguage": StringNode(),
        "frameworks": ArrayNode(items=StringNode()),
        "audit": AUDIT_SCHEMA,
        "description": StringNode(),
    },
    required=("name", "url", "status", "primaryLanguage", "audit", "description"),
)

ACTION_SCHEMA = ObjectNode(
    properties={
        "title": StringNode(),
        "repo": StringNode(description="Name of the target repository"),
        "priority": EnumNode(values=_enum_values(Priority)),
        "impact": StringNode(),
        "effort": EnumNode(values=_enum_values(Effort)),
        "rationale": StringNode(),
    },
    required=("title", "repo", "priority", "impact", "effort", "rationale"),
)

SPOTLIGHT_SCHEMA = ObjectNode(
    properties={
        "name": StringNode(),
        "description": StringNode(),
        "impressiveFactor": StringNode(),
    },
    required=("name", "description", "impressiveFactor"),
)

STATS_SCHEMA = ObjectNode(
    properties={
        "totalRepos": IntegerNode(minimum=0),
        "activeCount": IntegerNode(minimum=0),
        "archivedCount": IntegerNode(minimum=0),
        "languages": MapNode(
            values=IntegerNode(minimum=0),
            description="Key is language name, value is count",
        ),
    },
    required=("totalRepos", "activeCount", "archivedCount"),
)

SUMMARY_SCHEMA = ObjectNode(
    properties={
        "executiveSummary": StringNode(),
        "stats": STATS_SCHEMA,
        "capabilities": ArrayNode(items=StringNode()),
        "spotlightProjects": ArrayNode(items=SPOTLIGHT_SCHEMA),
    },
    required=("executiveSummary", "stats", "capabilities", "spotlightProjects"),
)

ANALYSIS_SCHEMA = ObjectNode(
    properties={
        "summary": SUMMARY_SCHEMA,
        "repos": ArrayNode(items=REPOSITORY_SCHEMA),
        "actions": ArrayNode(items=ACTION_SCHEMA),
        "claimsCheck": ArrayNode(
            items=StringNode(),
            description="Contradictions between user claims and observed evidence",
        ),
    },
    required=("summary", "repos", "actions", "claimsCheck"),
)
