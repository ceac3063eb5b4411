from typing import Any

from ..models import Alternative, ArchitectureDecisionDraft
from ._common import (
    DRAFT_REQUIRED_FIELDS,
    check_choice,
    check_critique_pairing,
    check_draft_progression,
    check_not_blank,
    read_draft_fields,
    require_fields,
    require_list,
    to_str,
    to_str_list,
)

REQUIRED_FIELDS = (
    "id",
    "title",
    "status",
    "context",
    "decision",
    "consequences",
    "alternatives",
    "related_decisions",
    *DRAFT_REQUIRED_FIELDS,
)

ADR_STATUSES = ("proposed", "accepted", "rejected", "deprecated", "superseded")


def _alternative(raw: Any) -> Alternative:
    raw = require_fields(raw, ("option", "pros", "cons"), "Each alternative must have option, pros, and cons")
    return Alternative(
        option=check_not_blank(to_str(raw["option"]), "Alternative option cannot be empty"),
        pros=to_str_list(raw["pros"], "Alternative pros must be an array"),
        cons=to_str_list(raw["cons"], "Alternative cons must be an array"),
    )


def validate_architecture_decision(data: Any) -> ArchitectureDecisionDraft:
    """Validate an architecture decision record draft.

    ``next_step_needed`` is optional here; ``is_final_draft`` defaults to False.
    """
    data = require_fields(data, REQUIRED_FIELDS)

    adr_id = check_not_blank(to_str(data["id"]), "Invalid ID")
    title = check_not_blank(to_str(data["title"]), "Invalid title")
    context = check_not_blank(to_str(data["context"]), "Invalid context")
    decision = check_not_blank(to_str(data["decision"]), "Invalid decision")
    consequences = to_str_list(data["consequences"], "Invalid consequences")
    alternatives = [_alternative(a) for a in require_list(data["alternatives"], "Invalid alternatives")]
    related = to_str_list(data["related_decisions"], "Invalid related decisions")

    fields = read_draft_fields(data)
    fields["is_final_draft"] = bool(fields["is_final_draft"])

    status = check_choice(data["status"], ADR_STATUSES, "status")

    check_draft_progression(fields)
    check_critique_pairing(fields)

    return ArchitectureDecisionDraft(
        id=adr_id,
        title=title,
        status=status,
        context=context,
        decision=decision,
        consequences=consequences,
        alternatives=alternatives,
        related_decisions=related,
        **fields,
    )
