from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple


def _drop_unset(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
    return {key: value for key, value in items if value is not None}


@dataclass
class SessionMetadata:
    """Bookkeeping for a stored session (timestamps are UTC)."""

    created: datetime
    last_accessed: datetime
    size: int = 0
    version: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created.isoformat(),
            "lastAccessed": self.last_accessed.isoformat(),
            "size": self.size,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionMetadata":
        return cls(
            created=datetime.fromisoformat(data["created"]),
            last_accessed=datetime.fromisoformat(data["lastAccessed"]),
            size=int(data.get("size", 0)),
            version=int(data.get("version", 1)),
        )


@dataclass
class SessionRecord:
    """Per-key session state: a JSON-compatible payload plus metadata."""

    data: Dict[str, Any]
    metadata: SessionMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "metadata": self.metadata.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionRecord":
        return cls(
            data=data.get("data") or {},
            metadata=SessionMetadata.from_dict(data["metadata"]),
        )


@dataclass(kw_only=True)
class Draft:
    """Fields shared by every drafting document."""

    draft_number: int
    total_drafts: int
    next_step_needed: bool | None = None
    is_critique: bool | None = None
    critique_focus: str | None = None
    revision_instructions: str | None = None
    is_final_draft: bool | None = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible dict without unset optional fields."""
        return asdict(self, dict_factory=_drop_unset)


# Reasoning chain


@dataclass(kw_only=True)
class ReasoningChainDraft(Draft):
    reasoning_chain: List[str]
    step_to_review: int | None = None
    chain_id: str = "default"


# API blueprint


@dataclass
class Parameter:
    name: str
    location: str
    required: bool
    type: str
    description: str


@dataclass
class RequestBody:
    content_type: str
    schema: Dict[str, Any]
    example: str


@dataclass
class ResponseSpec:
    status_code: int
    description: str
    content_type: str
    schema: Dict[str, Any]
    example: str


@dataclass
class Endpoint:
    path: str
    method: str
    description: str
    parameters: List[Parameter] = field(default_factory=list)
    responses: List[ResponseSpec] = field(default_factory=list)
    request_body: RequestBody | None = None


@dataclass
class AuthRequirement:
    type: str
    description: str


@dataclass(kw_only=True)
class APIBlueprintDraft(Draft):
    api_id: str
    api_name: str
    api_version: str
    description: str
    endpoints: List[Endpoint]
    auth_requirements: AuthRequirement


# Architecture decision record


@dataclass
class Alternative:
    option: str
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)


@dataclass(kw_only=True)
class ArchitectureDecisionDraft(Draft):
    id: str
    title: str
    status: str
    context: str
    decision: str
    consequences: List[str]
    alternatives: List[Alternative]
    related_decisions: List[str]


# Code review


@dataclass
class CodeFile:
    path: str
    content: str
    language: str
    line_count: int


@dataclass
class ReviewFinding:
    file: str
    line_range: Tuple[int, int]
    dimension: str
    severity: str
    description: str
    suggested_fix: str | None = None
    justification: str | None = None


@dataclass(kw_only=True)
class CodeReviewDraft(Draft):
    review_id: str
    pull_request_id: str
    repository: str
    review_dimensions: List[str]
    files: List[CodeFile]
    findings: List[ReviewFinding]


# Implementation strategy


@dataclass
class Risk:
    description: str
    mitigation: str
    impact: str


@dataclass
class Phase:
    name: str
    description: str
    tasks: List[str]
    estimated_effort: float
    risks: List[Risk]
    dependencies: List[str]


@dataclass
class ImplementationApproach:
    name: str
    description: str
    phases: List[Phase]
    pros: List[str]
    cons: List[str]


@dataclass
class Dependency:
    name: str
    description: str
    type: str
    status: str


@dataclass
class Constraint:
    category: str
    description: str
    impact: str


@dataclass(kw_only=True)
class ImplementationStrategyDraft(Draft):
    strategy_id: str
    feature_name: str
    feature_description: str
    implementation_approaches: List[ImplementationApproach]
    dependencies: List[Dependency]
    constraints: List[Constraint]
    success_criteria: List[str]
    selected_approach: str | None = None
