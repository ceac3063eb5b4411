from unittest.mock import patch

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS

from chain_of_draft.services.session_registry import SessionRegistry
from chain_of_draft.settings import Settings
from chain_of_draft.tools import (
    APIBlueprintDesignerTool,
    ArchitectureDecisionRecorderTool,
    ChainOfDraftTool,
    CodeReviewLensTool,
    ImplementationStrategyPlannerTool,
)
from chain_of_draft.tools.base import raise_total_drafts
from chain_of_draft.validators import validate_reasoning_chain


def test_raise_total_drafts() -> None:
    assert raise_total_drafts({"draft_number": 5, "total_drafts": 3})["total_drafts"] == 5
    unchanged = {"draft_number": 2, "total_drafts": 3}
    assert raise_total_drafts(unchanged) is unchanged
    assert raise_total_drafts({"draft_number": "5", "total_drafts": 3})["total_drafts"] == 3
    assert raise_total_drafts(None) is None


@pytest.mark.asyncio
async def test_reasoning_chain_branches(registry: SessionRegistry, reasoning_input) -> None:
    """Reviewing a step records the draft under its branch id."""
    tool = ChainOfDraftTool(registry=registry)

    first = await tool.process(reasoning_input)
    assert first["thoughtHistoryLength"] == 1
    assert first["branches"] == []
    assert first["chainId"] == "default"

    second_input = dict(reasoning_input, draft_number=2, step_to_review=0)
    second = await tool.process(second_input)
    assert second["thoughtHistoryLength"] == 2
    assert second["branches"] == ["branch_2_0"]
    assert second["stepToReview"] == 0

    session = await registry.reasoning_chain.get_session("default")
    assert session.data["branches"]["branch_2_0"] == [validate_reasoning_chain(second_input).to_dict()]
    assert len(session.data["thought_history"]) == 2


@pytest.mark.asyncio
async def test_reasoning_chains_are_kept_apart(registry: SessionRegistry, reasoning_input) -> None:
    tool = ChainOfDraftTool(registry=registry)
    await tool.process(dict(reasoning_input, chain_id="a"))
    await tool.process(dict(reasoning_input, chain_id="a"))
    other = await tool.process(dict(reasoning_input, chain_id="b"))
    assert other["thoughtHistoryLength"] == 1


@pytest.mark.asyncio
async def test_draft_beyond_total_is_accepted(registry: SessionRegistry, adr_input) -> None:
    """The handler raises total_drafts instead of rejecting the draft."""
    tool = ArchitectureDecisionRecorderTool(registry=registry)
    result = await tool.process(dict(adr_input, draft_number=5, total_drafts=3))
    assert result["draftNumber"] == 5
    assert result["totalDrafts"] == 5
    assert result["id"] == "adr-001"
    assert result["alternativeCount"] == 1
    assert result["isFinalDraft"] is False

    session = await registry.architecture_decision.get_session("adr-001")
    stored = session.data["adr_history"][0]
    assert (stored["draft_number"], stored["total_drafts"]) == (5, 5)


@pytest.mark.asyncio
async def test_infinite_total_is_rejected(registry: SessionRegistry, reasoning_input) -> None:
    tool = ChainOfDraftTool(registry=registry)
    with pytest.raises(McpError) as excinfo:
        await tool.process(dict(reasoning_input, total_drafts="inf"))
    assert excinfo.value.error.code == INVALID_PARAMS
    session = await registry.reasoning_chain.get_session("default")
    assert session.data == {}


@pytest.mark.asyncio
async def test_validation_error_maps_to_invalid_params(registry: SessionRegistry, code_review_input) -> None:
    tool = CodeReviewLensTool(registry=registry)
    code_review_input["findings"][0]["file"] = "x.py"
    with pytest.raises(McpError) as excinfo:
        await tool.process(code_review_input)
    assert excinfo.value.error.code == INVALID_PARAMS
    assert "'x.py'" in excinfo.value.error.message

    session = await registry.code_review.get_session("rev-1")
    assert session.data == {}


@pytest.mark.asyncio
async def test_missing_fields_map_to_invalid_params(registry: SessionRegistry) -> None:
    tool = ImplementationStrategyPlannerTool(registry=registry)
    with pytest.raises(McpError) as excinfo:
        await tool.process({"strategy_id": "s"})
    assert excinfo.value.error.code == INVALID_PARAMS
    assert excinfo.value.error.message == "Missing required fields"


@pytest.mark.asyncio
async def test_capacity_error_maps_to_internal_error(api_input) -> None:
    settings = Settings(session_max_size_bytes=64, session_cleanup_interval_seconds=0)
    registry = SessionRegistry(settings)
    tool = APIBlueprintDesignerTool(registry=registry)
    try:
        with pytest.raises(McpError) as excinfo:
            await tool.process(api_input)
        assert excinfo.value.error.code == INTERNAL_ERROR
        assert "Session size limit exceeded" in excinfo.value.error.message
    finally:
        registry.cleanup()


@pytest.mark.asyncio
async def test_unexpected_error_maps_to_internal_error(registry: SessionRegistry, code_review_input) -> None:
    tool = CodeReviewLensTool(registry=registry)
    with patch.object(registry.code_review, "update_session", side_effect=RuntimeError("disk on fire")):
        with pytest.raises(McpError) as excinfo:
            await tool.process(code_review_input)
    assert excinfo.value.error.code == INTERNAL_ERROR
    assert excinfo.value.error.message == "Internal error while processing code-review-lens"


@pytest.mark.asyncio
async def test_critiques_accumulate(registry: SessionRegistry, code_review_input) -> None:
    tool = CodeReviewLensTool(registry=registry)
    await tool.process(dict(code_review_input, is_critique=True, critique_focus="security"))
    await tool.process(dict(code_review_input, draft_number=2, is_critique=False, revision_instructions="fix it"))
    result = await tool.process(dict(code_review_input, draft_number=2, is_critique=True, critique_focus="naming"))

    assert result["activeCritiques"] == ["security", "naming"]
    assert result["reviewHistoryLength"] == 3
    assert result["historyLength"] == 3
    assert result["findingsBySeverity"] == {"info": 0, "suggestion": 1, "warning": 0, "critical": 0}
    assert result["dimensions"] == ["security", "readability"]


@pytest.mark.asyncio
async def test_sessions_are_separated_by_key(registry: SessionRegistry, api_input) -> None:
    tool = APIBlueprintDesignerTool(registry=registry)
    await tool.process(api_input)
    await tool.process(api_input)
    other = await tool.process(dict(api_input, api_id="billing-api"))

    assert other["apiHistoryLength"] == 1
    assert other["apiId"] == "billing-api"
    assert other["endpointCount"] == 1
    assert other["authType"] == "bearer"
    orders = await registry.api_blueprint.get_session("orders-api")
    assert len(orders.data["api_history"]) == 2


@pytest.mark.asyncio
async def test_strategy_response(registry: SessionRegistry, strategy_input) -> None:
    tool = ImplementationStrategyPlannerTool(registry=registry)
    result = await tool.process(dict(strategy_input, selected_approach="Batch job"))
    assert result["selectedApproach"] == "Batch job"
    assert result["approachCount"] == 1
    assert result["dependencyCount"] == 1
    assert result["constraintCount"] == 1
    assert result["strategyHistoryLength"] == 1
    assert set(result["sessionMetadata"]) >= {"created", "lastAccessed", "size", "version"}
