"""Drafting tool handlers.

Each handler validates a document, records it in the session for its key,
and returns a summary; failures surface as ``McpError`` with an
``INVALID_PARAMS`` or ``INTERNAL_ERROR`` code.
"""

from .base import DraftingTool
from .handlers import (
    TOOL_CLASSES,
    APIBlueprintDesignerTool,
    ArchitectureDecisionRecorderTool,
    ChainOfDraftTool,
    CodeReviewLensTool,
    ImplementationStrategyPlannerTool,
)

__all__ = [
    "TOOL_CLASSES",
    "APIBlueprintDesignerTool",
    "ArchitectureDecisionRecorderTool",
    "ChainOfDraftTool",
    "CodeReviewLensTool",
    "DraftingTool",
    "ImplementationStrategyPlannerTool",
]
