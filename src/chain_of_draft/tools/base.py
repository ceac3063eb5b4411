import logging
from typing import Any, Callable, Dict, Generic, List, Mapping, TypeVar

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData

from ..errors import SessionCapacityError, ValidationError
from ..models import Draft, SessionRecord
from ..services.session_manager import SessionManager
from ..services.session_registry import SessionRegistry, get_session_registry

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=Draft)


def raise_total_drafts(arguments: Any) -> Any:
    """Return arguments with total_drafts raised to draft_number when lower.

    Inputs that are not mappings, or whose counters are not plain numbers, are
    returned unchanged and left to the validator.
    """
    if not isinstance(arguments, Mapping):
        return arguments
    draft, total = arguments.get("draft_number"), arguments.get("total_drafts")
    numeric = (int, float)
    if (
        isinstance(draft, numeric)
        and isinstance(total, numeric)
        and not isinstance(draft, bool)
        and not isinstance(total, bool)
        and draft > total
    ):
        return {**arguments, "total_drafts": draft}
    return arguments


class DraftingTool(Generic[DocumentT]):
    """Validate a draft, append it to its session history, and summarize.

    Subclasses set the tool name, the session kind, the validator and the
    history key, and build the kind-specific part of the response.
    """

    name: str = ""
    kind: str = ""
    history_key: str = "history"
    validator: Callable[[Any], DocumentT]

    def __init__(self, registry: SessionRegistry | None = None) -> None:
        self._registry = registry

    @property
    def manager(self) -> SessionManager:
        registry = self._registry or get_session_registry()
        return registry.manager(self.kind)

    def session_key(self, document: DocumentT) -> str:
        raise NotImplementedError

    def validate(self, arguments: Any) -> DocumentT:
        return self.validator(arguments)

    def record_extras(self, payload: Dict[str, Any], document: DocumentT) -> None:
        """Hook for kind-specific session bookkeeping."""

    def summarize(self, document: DocumentT, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def process(self, arguments: Any) -> Dict[str, Any]:
        """Run one tool call; every failure surfaces as an McpError."""
        try:
            document = self.validate(raise_total_drafts(arguments))

            key = self.session_key(document)
            manager = self.manager
            session = await manager.get_session(key)
            payload = session.data
            history: List[Dict[str, Any]] = payload.setdefault(self.history_key, [])
            critiques: List[str] = payload.setdefault("active_critiques", [])

            history.append(document.to_dict())
            if document.is_critique and document.critique_focus:
                critiques.append(document.critique_focus)
            self.record_extras(payload, document)

            await manager.update_session(key, payload)
            logger.info(
                "%s: stored draft %s/%s for %s (history=%d)",
                self.name,
                document.draft_number,
                document.total_drafts,
                key,
                len(history),
            )
            return self._response(document, payload, session)
        except ValidationError as e:
            logger.info("%s: rejected input: %s", self.name, e)
            raise McpError(ErrorData(code=INVALID_PARAMS, message=str(e))) from e
        except SessionCapacityError as e:
            logger.warning("%s: %s", self.name, e)
            raise McpError(ErrorData(code=INTERNAL_ERROR, message=str(e))) from e
        except McpError:
            raise
        except Exception as e:
            logger.exception("%s: unexpected failure", self.name)
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=f"Internal error while processing {self.name}")
            ) from e

    def _response(self, document: DocumentT, payload: Dict[str, Any], session: SessionRecord) -> Dict[str, Any]:
        response = self.summarize(document, payload)
        response.update(
            {
                "draftNumber": document.draft_number,
                "totalDrafts": document.total_drafts,
                "nextStepNeeded": document.next_step_needed,
                "isCritique": document.is_critique,
                "critiqueFocus": document.critique_focus,
                "revisionInstructions": document.revision_instructions,
                "isFinalDraft": document.is_final_draft,
                "activeCritiques": list(payload["active_critiques"]),
                "historyLength": len(payload[self.history_key]),
                "sessionMetadata": session.metadata.to_dict(),
            }
        )
        return response
