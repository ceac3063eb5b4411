import sys
from pathlib import Path
from typing import Any, Dict, Iterator

import pytest


_root = Path(__file__).resolve().parents[1]
_src = _root / "src"
if _src.exists() and str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from chain_of_draft.services.session_registry import SessionRegistry  # noqa: E402
from chain_of_draft.settings import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    """In-memory settings with the background sweep disabled."""
    return Settings(session_backend="memory", session_cleanup_interval_seconds=0)


@pytest.fixture
def registry(settings: Settings) -> Iterator[SessionRegistry]:
    reg = SessionRegistry(settings)
    yield reg
    reg.cleanup()


@pytest.fixture
def reasoning_input() -> Dict[str, Any]:
    return {
        "reasoning_chain": ["step1"],
        "draft_number": 1,
        "total_drafts": 3,
        "next_step_needed": True,
    }


@pytest.fixture
def adr_input() -> Dict[str, Any]:
    return {
        "id": "adr-001",
        "title": "Use Redis for session storage",
        "status": "proposed",
        "context": "Sessions are lost on restart.",
        "decision": "Store sessions in Redis.",
        "consequences": ["New infrastructure dependency"],
        "alternatives": [{"option": "SQLite", "pros": ["simple"], "cons": ["single host"]}],
        "related_decisions": [],
        "draft_number": 1,
        "total_drafts": 2,
    }


@pytest.fixture
def code_review_input() -> Dict[str, Any]:
    return {
        "review_id": "rev-1",
        "pull_request_id": "PR-42",
        "repository": "acme/app",
        "review_dimensions": ["security", "readability"],
        "files": [
            {"path": "app.py", "content": "print('hi')", "language": "python", "line_count": 1},
        ],
        "findings": [
            {
                "file": "app.py",
                "line_range": [1, 1],
                "dimension": "readability",
                "severity": "suggestion",
                "description": "Use logging instead of print",
            },
        ],
        "draft_number": 1,
        "total_drafts": 2,
        "next_step_needed": True,
    }


@pytest.fixture
def api_input() -> Dict[str, Any]:
    return {
        "api_id": "orders-api",
        "api_name": "Orders",
        "api_version": "v1",
        "description": "Order management",
        "endpoints": [
            {
                "path": "/orders/{order_id}",
                "method": "GET",
                "description": "Fetch an order",
                "parameters": [
                    {
                        "name": "order_id",
                        "location": "path",
                        "required": True,
                        "type": "string",
                        "description": "Order identifier",
                    },
                ],
                "responses": [
                    {
                        "status_code": 200,
                        "description": "The order",
                        "content_type": "application/json",
                        "schema": {"type": "object"},
                        "example": "{}",
                    },
                ],
            },
        ],
        "auth_requirements": {"type": "bearer", "description": "JWT"},
        "draft_number": 1,
        "total_drafts": 2,
        "next_step_needed": True,
    }


@pytest.fixture
def strategy_input() -> Dict[str, Any]:
    return {
        "strategy_id": "strat-1",
        "feature_name": "Export",
        "feature_description": "CSV export of orders",
        "implementation_approaches": [
            {
                "name": "Batch job",
                "description": "Nightly export",
                "phases": [
                    {
                        "name": "Build",
                        "description": "Write the job",
                        "tasks": ["query", "write csv"],
                        "estimated_effort": 3,
                        "risks": [{"description": "Slow query", "mitigation": "Index", "impact": "medium"}],
                        "dependencies": [],
                    },
                ],
                "pros": ["simple"],
                "cons": ["stale data"],
            },
        ],
        "dependencies": [
            {"name": "DB", "description": "Orders DB", "type": "system", "status": "completed"},
        ],
        "constraints": [
            {"category": "time", "description": "Two weeks", "impact": "high"},
        ],
        "success_criteria": ["Export under 5 minutes"],
        "draft_number": 1,
        "total_drafts": 2,
        "next_step_needed": True,
    }
