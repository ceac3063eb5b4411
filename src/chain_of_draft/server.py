"""Chain of Draft MCP server: five drafting tools backed by session managers."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, AsyncIterator, Dict, List

from mcp.server.fastmcp import FastMCP
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from .services.session_registry import SessionRegistry, aclose_session_registry
from .settings import Settings, get_settings
from .tools import descriptions
from .tools.descriptions import PARAMS
from .tools.handlers import (
    APIBlueprintDesignerTool,
    ArchitectureDecisionRecorderTool,
    ChainOfDraftTool,
    CodeReviewLensTool,
    ImplementationStrategyPlannerTool,
)
from .tools.base import DraftingTool

logger = logging.getLogger(__name__)

Objects = List[Dict[str, Any]]

DraftNumber = Annotated[int, Field(description=PARAMS["draft_number"])]
TotalDrafts = Annotated[int, Field(description=PARAMS["total_drafts"])]
NextStepNeeded = Annotated[bool, Field(description=PARAMS["next_step_needed"])]
IsCritique = Annotated[bool | None, Field(description=PARAMS["is_critique"])]
CritiqueFocus = Annotated[str | None, Field(description=PARAMS["critique_focus"])]
RevisionInstructions = Annotated[str | None, Field(description=PARAMS["revision_instructions"])]
IsFinalDraft = Annotated[bool | None, Field(description=PARAMS["is_final_draft"])]


def _described(annotation: Any, name: str) -> Any:
    return Annotated[annotation, Field(description=PARAMS[name])]


def _compact(**arguments: Any) -> Dict[str, Any]:
    """Drop omitted optional arguments so validators see them as absent."""
    return {key: value for key, value in arguments.items() if value is not None}


def _result(payload: Dict[str, Any], is_error: bool = False) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(payload, indent=2))],
        structuredContent=payload,
        isError=is_error,
    )


async def _run(tool: DraftingTool, arguments: Dict[str, Any]) -> CallToolResult:
    """Run a drafting tool and wrap its summary in a tool result.

    FastMCP reports any exception from a tool as plain error text, so a fault
    is returned as an error result whose payload is ``{"code", "message"}``
    with the JSON-RPC code (``INVALID_PARAMS`` or ``INTERNAL_ERROR``).
    """
    try:
        return _result(await tool.process(arguments))
    except McpError as e:
        return _result({"code": e.error.code, "message": e.error.message}, is_error=True)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Stop session eviction loops and close storage on shutdown."""
    logger.info("Chain of Draft server starting")
    try:
        yield
    finally:
        logger.info("Shutting down...")
        await aclose_session_registry()


def create_server(settings: Settings | None = None, registry: SessionRegistry | None = None) -> FastMCP:
    """Build the MCP server and register the drafting tools.

    Tools use the process-wide session registry unless one is given.
    """
    settings = settings or get_settings()
    mcp = FastMCP(settings.server_name, lifespan=lifespan)

    chain_tool = ChainOfDraftTool(registry)
    api_tool = APIBlueprintDesignerTool(registry)
    adr_tool = ArchitectureDecisionRecorderTool(registry)
    review_tool = CodeReviewLensTool(registry)
    strategy_tool = ImplementationStrategyPlannerTool(registry)

    @mcp.tool(name=chain_tool.name, description=descriptions.CHAIN_OF_DRAFT)
    async def chain_of_draft(
        reasoning_chain: _described(List[str], "reasoning_chain"),
        next_step_needed: NextStepNeeded,
        draft_number: DraftNumber,
        total_drafts: TotalDrafts,
        is_critique: IsCritique = None,
        critique_focus: CritiqueFocus = None,
        revision_instructions: RevisionInstructions = None,
        step_to_review: _described(int | None, "step_to_review") = None,
        is_final_draft: IsFinalDraft = None,
        chain_id: _described(str | None, "chain_id") = None,
    ) -> CallToolResult:
        return await _run(
            chain_tool,
            _compact(
                reasoning_chain=reasoning_chain,
                next_step_needed=next_step_needed,
                draft_number=draft_number,
                total_drafts=total_drafts,
                is_critique=is_critique,
                critique_focus=critique_focus,
                revision_instructions=revision_instructions,
                step_to_review=step_to_review,
                is_final_draft=is_final_draft,
                chain_id=chain_id,
            ),
        )

    @mcp.tool(name=api_tool.name, description=descriptions.API_BLUEPRINT_DESIGNER)
    async def api_blueprint_designer(
        api_id: _described(str, "api_id"),
        api_name: _described(str, "api_name"),
        api_version: _described(str, "api_version"),
        description: _described(str, "description"),
        endpoints: _described(Objects, "endpoints"),
        auth_requirements: _described(Dict[str, Any], "auth_requirements"),
        next_step_needed: NextStepNeeded,
        draft_number: DraftNumber,
        total_drafts: TotalDrafts,
        is_critique: IsCritique = None,
        critique_focus: CritiqueFocus = None,
        revision_instructions: RevisionInstructions = None,
        is_final_draft: IsFinalDraft = None,
    ) -> CallToolResult:
        return await _run(
            api_tool,
            _compact(
                api_id=api_id,
                api_name=api_name,
                api_version=api_version,
                description=description,
                endpoints=endpoints,
                auth_requirements=auth_requirements,
                next_step_needed=next_step_needed,
                draft_number=draft_number,
                total_drafts=total_drafts,
                is_critique=is_critique,
                critique_focus=critique_focus,
                revision_instructions=revision_instructions,
                is_final_draft=is_final_draft,
            ),
        )

    @mcp.tool(name=adr_tool.name, description=descriptions.ARCHITECTURE_DECISION_RECORDER)
    async def architecture_decision_recorder(
        id: _described(str, "id"),
        title: _described(str, "title"),
        status: _described(str, "status"),
        context: _described(str, "context"),
        decision: _described(str, "decision"),
        consequences: _described(List[str], "consequences"),
        alternatives: _described(Objects, "alternatives"),
        related_decisions: _described(List[str], "related_decisions"),
        draft_number: DraftNumber,
        total_drafts: TotalDrafts,
        next_step_needed: _described(bool | None, "next_step_needed") = None,
        is_critique: IsCritique = None,
        critique_focus: CritiqueFocus = None,
        revision_instructions: RevisionInstructions = None,
        is_final_draft: IsFinalDraft = None,
    ) -> CallToolResult:
        return await _run(
            adr_tool,
            _compact(
                id=id,
                title=title,
                status=status,
                context=context,
                decision=decision,
                consequences=consequences,
                alternatives=alternatives,
                related_decisions=related_decisions,
                draft_number=draft_number,
                total_drafts=total_drafts,
                next_step_needed=next_step_needed,
                is_critique=is_critique,
                critique_focus=critique_focus,
                revision_instructions=revision_instructions,
                is_final_draft=is_final_draft,
            ),
        )

    @mcp.tool(name=review_tool.name, description=descriptions.CODE_REVIEW_LENS)
    async def code_review_lens(
        review_id: _described(str, "review_id"),
        pull_request_id: _described(str, "pull_request_id"),
        repository: _described(str, "repository"),
        review_dimensions: _described(List[str], "review_dimensions"),
        files: _described(Objects, "files"),
        findings: _described(Objects, "findings"),
        next_step_needed: NextStepNeeded,
        draft_number: DraftNumber,
        total_drafts: TotalDrafts,
        is_critique: IsCritique = None,
        critique_focus: CritiqueFocus = None,
        revision_instructions: RevisionInstructions = None,
        is_final_draft: IsFinalDraft = None,
    ) -> CallToolResult:
        return await _run(
            review_tool,
            _compact(
                review_id=review_id,
                pull_request_id=pull_request_id,
                repository=repository,
                review_dimensions=review_dimensions,
                files=files,
                findings=findings,
                next_step_needed=next_step_needed,
                draft_number=draft_number,
                total_drafts=total_drafts,
                is_critique=is_critique,
                critique_focus=critique_focus,
                revision_instructions=revision_instructions,
                is_final_draft=is_final_draft,
            ),
        )

    @mcp.tool(name=strategy_tool.name, description=descriptions.IMPLEMENTATION_STRATEGY_PLANNER)
    async def implementation_strategy_planner(
        strategy_id: _described(str, "strategy_id"),
        feature_name: _described(str, "feature_name"),
        feature_description: _described(str, "feature_description"),
        implementation_approaches: _described(Objects, "implementation_approaches"),
        dependencies: _described(Objects, "dependencies"),
        constraints: _described(Objects, "constraints"),
        success_criteria: _described(List[str], "success_criteria"),
        next_step_needed: NextStepNeeded,
        draft_number: DraftNumber,
        total_drafts: TotalDrafts,
        selected_approach: _described(str | None, "selected_approach") = None,
        is_critique: IsCritique = None,
        critique_focus: CritiqueFocus = None,
        revision_instructions: RevisionInstructions = None,
        is_final_draft: IsFinalDraft = None,
    ) -> CallToolResult:
        return await _run(
            strategy_tool,
            _compact(
                strategy_id=strategy_id,
                feature_name=feature_name,
                feature_description=feature_description,
                implementation_approaches=implementation_approaches,
                dependencies=dependencies,
                constraints=constraints,
                success_criteria=success_criteria,
                next_step_needed=next_step_needed,
                draft_number=draft_number,
                total_drafts=total_drafts,
                selected_approach=selected_approach,
                is_critique=is_critique,
                critique_focus=critique_focus,
                revision_instructions=revision_instructions,
                is_final_draft=is_final_draft,
            ),
        )

    logger.info("Registered drafting tools on server '%s'", settings.server_name)
    return mcp
