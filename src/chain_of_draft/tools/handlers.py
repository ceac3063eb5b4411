from collections import Counter
from typing import Any, Dict

from ..models import (
    APIBlueprintDraft,
    ArchitectureDecisionDraft,
    CodeReviewDraft,
    ImplementationStrategyDraft,
    ReasoningChainDraft,
)
from ..services.session_registry import (
    API_BLUEPRINT,
    ARCHITECTURE_DECISION,
    CODE_REVIEW,
    IMPLEMENTATION_STRATEGY,
    REASONING_CHAIN,
)
from ..validators import (
    validate_api_blueprint,
    validate_architecture_decision,
    validate_code_review,
    validate_implementation_strategy,
    validate_reasoning_chain,
)
from ..validators.code_review import SEVERITIES
from .base import DraftingTool


def branch_id(document: ReasoningChainDraft) -> str:
    return f"branch_{document.draft_number}_{document.step_to_review}"


class ChainOfDraftTool(DraftingTool[ReasoningChainDraft]):
    """Reasoning chains, with per-step branches for focused critique."""

    name = "chain-of-draft"
    kind = REASONING_CHAIN
    history_key = "thought_history"
    validator = staticmethod(validate_reasoning_chain)

    def session_key(self, document: ReasoningChainDraft) -> str:
        return document.chain_id

    def record_extras(self, payload: Dict[str, Any], document: ReasoningChainDraft) -> None:
        branches = payload.setdefault("branches", {})
        if document.step_to_review is not None:
            branches.setdefault(branch_id(document), []).append(document.to_dict())

    def summarize(self, document: ReasoningChainDraft, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "chainId": document.chain_id,
            "stepToReview": document.step_to_review,
            "branches": list(payload["branches"]),
            "thoughtHistoryLength": len(payload[self.history_key]),
        }


class APIBlueprintDesignerTool(DraftingTool[APIBlueprintDraft]):
    name = "api-blueprint-designer"
    kind = API_BLUEPRINT
    history_key = "api_history"
    validator = staticmethod(validate_api_blueprint)

    def session_key(self, document: APIBlueprintDraft) -> str:
        return document.api_id

    def summarize(self, document: APIBlueprintDraft, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "apiId": document.api_id,
            "apiName": document.api_name,
            "apiVersion": document.api_version,
            "authType": document.auth_requirements.type,
            "endpointCount": len(document.endpoints),
            "apiHistoryLength": len(payload[self.history_key]),
        }


class ArchitectureDecisionRecorderTool(DraftingTool[ArchitectureDecisionDraft]):
    name = "architecture-decision-recorder"
    kind = ARCHITECTURE_DECISION
    history_key = "adr_history"
    validator = staticmethod(validate_architecture_decision)

    def session_key(self, document: ArchitectureDecisionDraft) -> str:
        return document.id

    def summarize(self, document: ArchitectureDecisionDraft, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": document.id,
            "title": document.title,
            "status": document.status,
            "alternativeCount": len(document.alternatives),
            "consequenceCount": len(document.consequences),
        }


class CodeReviewLensTool(DraftingTool[CodeReviewDraft]):
    name = "code-review-lens"
    kind = CODE_REVIEW
    history_key = "review_history"
    validator = staticmethod(validate_code_review)

    def session_key(self, document: CodeReviewDraft) -> str:
        return document.review_id

    def summarize(self, document: CodeReviewDraft, payload: Dict[str, Any]) -> Dict[str, Any]:
        severities = Counter(f.severity for f in document.findings)
        return {
            "reviewId": document.review_id,
            "pullRequestId": document.pull_request_id,
            "repository": document.repository,
            "dimensions": list(document.review_dimensions),
            "fileCount": len(document.files),
            "findingCount": len(document.findings),
            "findingsBySeverity": {level: severities.get(level, 0) for level in SEVERITIES},
            "reviewHistoryLength": len(payload[self.history_key]),
        }


class ImplementationStrategyPlannerTool(DraftingTool[ImplementationStrategyDraft]):
    name = "implementation-strategy-planner"
    kind = IMPLEMENTATION_STRATEGY
    history_key = "strategy_history"
    validator = staticmethod(validate_implementation_strategy)

    def session_key(self, document: ImplementationStrategyDraft) -> str:
        return document.strategy_id

    def summarize(self, document: ImplementationStrategyDraft, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "strategyId": document.strategy_id,
            "featureName": document.feature_name,
            "approachCount": len(document.implementation_approaches),
            "selectedApproach": document.selected_approach,
            "dependencyCount": len(document.dependencies),
            "constraintCount": len(document.constraints),
            "strategyHistoryLength": len(payload[self.history_key]),
        }


TOOL_CLASSES = (
    ChainOfDraftTool,
    APIBlueprintDesignerTool,
    ArchitectureDecisionRecorderTool,
    CodeReviewLensTool,
    ImplementationStrategyPlannerTool,
)
