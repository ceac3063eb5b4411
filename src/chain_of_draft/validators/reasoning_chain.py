from typing import Any

from ..errors import ValidationError
from ..models import ReasoningChainDraft
from ._common import (
    DRAFT_REQUIRED_FIELDS,
    check_critique_pairing,
    check_draft_progression,
    optional_str,
    read_draft_fields,
    require_fields,
    to_bool,
    to_number,
    to_str,
)

REQUIRED_FIELDS = ("reasoning_chain", "next_step_needed", *DRAFT_REQUIRED_FIELDS)

DEFAULT_CHAIN_ID = "default"


def validate_reasoning_chain(data: Any) -> ReasoningChainDraft:
    """Validate a chain-of-draft reasoning step and return the typed document."""
    data = require_fields(data, REQUIRED_FIELDS)

    chain = data["reasoning_chain"]
    if not isinstance(chain, list) or not chain:
        raise ValidationError("Invalid reasoning chain")
    steps = [to_str(step) for step in chain]

    fields = read_draft_fields(data)
    fields["next_step_needed"] = to_bool(data["next_step_needed"])
    fields["is_final_draft"] = bool(fields["is_final_draft"])

    step_to_review = None
    if data.get("step_to_review") is not None:
        step_to_review = to_number(data["step_to_review"], "Step to review must be a number")

    check_draft_progression(fields)
    if step_to_review is not None and (step_to_review < 0 or not isinstance(step_to_review, int)):
        raise ValidationError("Step to review must be a non-negative integer")

    check_critique_pairing(fields)

    return ReasoningChainDraft(
        reasoning_chain=steps,
        step_to_review=step_to_review,
        chain_id=optional_str(data, "chain_id") or DEFAULT_CHAIN_ID,
        **fields,
    )
