"""Coercion and rule helpers shared by the document validators.

Every helper raises ValidationError with a single descriptive message; the
validators call them in phase order so the first violated rule wins.
"""

import math
from typing import Any, Collection, Dict, Iterable, List, Mapping

from ..errors import ValidationError

DRAFT_REQUIRED_FIELDS = ("draft_number", "total_drafts")


def require_fields(data: Any, fields: Iterable[str], message: str = "Missing required fields") -> Mapping[str, Any]:
    """Check that data is a mapping holding every key in fields."""
    if not isinstance(data, Mapping) or any(name not in data for name in fields):
        raise ValidationError(message)
    return data


def require_list(value: Any, message: str) -> List[Any]:
    if not isinstance(value, list):
        raise ValidationError(message)
    return value


def to_number(value: Any, message: str) -> int | float:
    """Numeric coercion; non-numeric input, NaN and infinities are rejected."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            raise ValidationError(message) from None
    else:
        raise ValidationError(message)
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            raise ValidationError(message)
        if number.is_integer():
            return int(number)
    return number


def to_bool(value: Any) -> bool:
    return bool(value)


def to_str(value: Any) -> str:
    return str(value)


def to_str_list(value: Any, message: str) -> List[str]:
    return [to_str(item) for item in require_list(value, message)]


def optional_str(data: Mapping[str, Any], name: str) -> str | None:
    return to_str(data[name]) if name in data and data[name] is not None else None


def optional_bool(data: Mapping[str, Any], name: str) -> bool | None:
    return to_bool(data[name]) if name in data and data[name] is not None else None


def check_choice(value: Any, allowed: Collection[str], label: str) -> str:
    """Return value as a string if it is one of allowed."""
    text = to_str(value)
    if text not in allowed:
        raise ValidationError(f"Invalid {label}: {text}. Must be one of: {', '.join(allowed)}")
    return text


def check_not_blank(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value


def read_draft_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce the draft bookkeeping fields shared by every document."""
    return {
        "draft_number": to_number(data["draft_number"], "Draft number must be a number"),
        "total_drafts": to_number(data["total_drafts"], "Total drafts must be a number"),
        "next_step_needed": optional_bool(data, "next_step_needed"),
        "is_critique": optional_bool(data, "is_critique"),
        "critique_focus": optional_str(data, "critique_focus"),
        "revision_instructions": optional_str(data, "revision_instructions"),
        "is_final_draft": optional_bool(data, "is_final_draft"),
    }


def check_draft_progression(fields: Mapping[str, Any]) -> None:
    if fields["draft_number"] <= 0:
        raise ValidationError("Draft number must be positive")
    if fields["total_drafts"] <= 0:
        raise ValidationError("Total drafts must be positive")
    if fields["draft_number"] > fields["total_drafts"]:
        raise ValidationError("Draft number cannot exceed total drafts")


def check_critique_pairing(fields: Mapping[str, Any]) -> None:
    """is_critique=True needs a focus, is_critique=False needs instructions."""
    if fields["is_critique"] is True and not fields["critique_focus"]:
        raise ValidationError("Critique focus required when is_critique is true")
    if fields["is_critique"] is False and not fields["revision_instructions"]:
        raise ValidationError("Revision instructions required when is_critique is false")
