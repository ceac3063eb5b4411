import json
from unittest.mock import patch

import pytest
from mcp.shared.memory import create_connected_server_and_client_session
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS

from chain_of_draft import server
from chain_of_draft.settings import Settings
from chain_of_draft.tools import ChainOfDraftTool


@pytest.mark.asyncio
async def test_create_server_registers_drafting_tools(settings: Settings) -> None:
    mcp = server.create_server(settings)
    tools = {tool.name: tool for tool in await mcp.list_tools()}

    assert set(tools) == {
        "chain-of-draft",
        "api-blueprint-designer",
        "architecture-decision-recorder",
        "code-review-lens",
        "implementation-strategy-planner",
    }
    assert "Chain of Draft" in tools["chain-of-draft"].description


@pytest.mark.asyncio
async def test_tool_schemas_mark_required_arguments(settings: Settings) -> None:
    mcp = server.create_server(settings)
    tools = {tool.name: tool for tool in await mcp.list_tools()}

    chain_required = set(tools["chain-of-draft"].inputSchema["required"])
    assert {"reasoning_chain", "next_step_needed", "draft_number", "total_drafts"} <= chain_required
    assert "chain_id" not in chain_required

    adr_required = set(tools["architecture-decision-recorder"].inputSchema["required"])
    assert "next_step_needed" not in adr_required
    assert {"id", "title", "status", "alternatives"} <= adr_required


def test_compact_drops_omitted_arguments() -> None:
    assert server._compact(a=1, b=None, c=False) == {"a": 1, "c": False}


@pytest.mark.asyncio
async def test_run_returns_summary_result(registry, reasoning_input) -> None:
    result = await server._run(ChainOfDraftTool(registry=registry), reasoning_input)
    assert result.isError is False
    text = result.content[0].text
    assert text.startswith("{\n  ")
    assert json.loads(text)["thoughtHistoryLength"] == 1
    assert result.structuredContent["thoughtHistoryLength"] == 1


@pytest.mark.asyncio
async def test_run_returns_fault_with_code(registry, reasoning_input) -> None:
    result = await server._run(ChainOfDraftTool(registry=registry), dict(reasoning_input, draft_number=0))
    assert result.isError is True
    assert result.structuredContent == {"code": INVALID_PARAMS, "message": "Draft number must be positive"}
    assert json.loads(result.content[0].text) == result.structuredContent


@pytest.mark.asyncio
async def test_client_round_trip(settings: Settings, registry, reasoning_input, code_review_input) -> None:
    """Drafts and faults reach an MCP client with their error category."""
    mcp = server.create_server(settings, registry=registry)
    async with create_connected_server_and_client_session(mcp._mcp_server) as client:
        ok = await client.call_tool("chain-of-draft", dict(reasoning_input, draft_number=5, total_drafts=3))
        assert ok.isError is False
        assert json.loads(ok.content[0].text)["totalDrafts"] == 5

        invalid = await client.call_tool("chain-of-draft", dict(reasoning_input, is_critique=True))
        assert invalid.isError is True
        assert json.loads(invalid.content[0].text) == {
            "code": INVALID_PARAMS,
            "message": "Critique focus required when is_critique is true",
        }

        with patch.object(registry.code_review, "update_session", side_effect=RuntimeError("disk on fire")):
            internal = await client.call_tool("code-review-lens", code_review_input)
        assert internal.isError is True
        fault = json.loads(internal.content[0].text)
        assert fault["code"] == INTERNAL_ERROR
        assert fault["message"] == "Internal error while processing code-review-lens"


@pytest.mark.asyncio
async def test_lifespan_closes_registry(settings: Settings) -> None:
    mcp = server.create_server(settings)
    with patch.object(server, "aclose_session_registry") as aclose:
        async with server.lifespan(mcp):
            aclose.assert_not_called()
    aclose.assert_awaited_once()
