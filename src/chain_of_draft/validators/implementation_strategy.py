from typing import Any

from ..errors import ValidationError
from ..models import (
    Constraint,
    Dependency,
    ImplementationApproach,
    ImplementationStrategyDraft,
    Phase,
    Risk,
)
from ._common import (
    DRAFT_REQUIRED_FIELDS,
    check_choice,
    check_critique_pairing,
    check_draft_progression,
    optional_str,
    read_draft_fields,
    require_fields,
    require_list,
    to_bool,
    to_number,
    to_str,
    to_str_list,
)

REQUIRED_FIELDS = (
    "strategy_id",
    "feature_name",
    "feature_description",
    "implementation_approaches",
    "dependencies",
    "constraints",
    "success_criteria",
    "next_step_needed",
    *DRAFT_REQUIRED_FIELDS,
)

IMPACT_LEVELS = ("low", "medium", "high")
DEPENDENCY_TYPES = ("feature", "component", "system", "external", "other")
DEPENDENCY_STATUSES = ("not_started", "in_progress", "completed", "blocked")
CONSTRAINT_CATEGORIES = ("time", "resource", "technical", "organizational", "other")


def _risk(raw: Any) -> Risk:
    raw = require_fields(
        raw, ("description", "mitigation", "impact"), "Each risk must have description, mitigation, and impact"
    )
    return Risk(
        description=to_str(raw["description"]),
        mitigation=to_str(raw["mitigation"]),
        impact=check_choice(raw["impact"], IMPACT_LEVELS, "impact level"),
    )


def _phase(raw: Any) -> Phase:
    raw = require_fields(
        raw,
        ("name", "description", "tasks", "estimated_effort", "risks", "dependencies"),
        "Each phase must have name, description, tasks, estimated_effort, risks, and dependencies",
    )
    tasks = to_str_list(raw["tasks"], "Tasks must be an array")
    risks = [_risk(r) for r in require_list(raw["risks"], "Risks must be an array")]
    dependencies = to_str_list(raw["dependencies"], "Dependencies must be an array")
    effort = to_number(raw["estimated_effort"], "Estimated effort must be a number")
    if effort < 0:
        raise ValidationError("Estimated effort cannot be negative")
    return Phase(
        name=to_str(raw["name"]),
        description=to_str(raw["description"]),
        tasks=tasks,
        estimated_effort=effort,
        risks=risks,
        dependencies=dependencies,
    )


def _approach(raw: Any) -> ImplementationApproach:
    raw = require_fields(
        raw,
        ("name", "description", "phases", "pros", "cons"),
        "Each approach must have name, description, phases, pros, and cons",
    )
    return ImplementationApproach(
        name=to_str(raw["name"]),
        description=to_str(raw["description"]),
        phases=[_phase(p) for p in require_list(raw["phases"], "Phases must be an array")],
        pros=to_str_list(raw["pros"], "Approach pros must be an array"),
        cons=to_str_list(raw["cons"], "Approach cons must be an array"),
    )


def _dependency(raw: Any) -> Dependency:
    raw = require_fields(
        raw, ("name", "description", "type", "status"), "Each dependency must have name, description, type, and status"
    )
    return Dependency(
        name=to_str(raw["name"]),
        description=to_str(raw["description"]),
        type=check_choice(raw["type"], DEPENDENCY_TYPES, "dependency type"),
        status=check_choice(raw["status"], DEPENDENCY_STATUSES, "dependency status"),
    )


def _constraint(raw: Any) -> Constraint:
    raw = require_fields(
        raw, ("category", "description", "impact"), "Each constraint must have category, description, and impact"
    )
    return Constraint(
        category=check_choice(raw["category"], CONSTRAINT_CATEGORIES, "constraint category"),
        description=to_str(raw["description"]),
        impact=check_choice(raw["impact"], IMPACT_LEVELS, "impact level"),
    )


def validate_implementation_strategy(data: Any) -> ImplementationStrategyDraft:
    """Validate an implementation strategy draft and return the typed document."""
    data = require_fields(data, REQUIRED_FIELDS)

    approaches = [
        _approach(a)
        for a in require_list(data["implementation_approaches"], "Implementation approaches must be an array")
    ]
    dependencies = [_dependency(d) for d in require_list(data["dependencies"], "Dependencies must be an array")]
    constraints = [_constraint(c) for c in require_list(data["constraints"], "Constraints must be an array")]
    success_criteria = to_str_list(data["success_criteria"], "Success criteria must be an array")

    fields = read_draft_fields(data)
    fields["next_step_needed"] = to_bool(data["next_step_needed"])
    selected = optional_str(data, "selected_approach")

    check_draft_progression(fields)
    check_critique_pairing(fields)

    if selected and selected not in {a.name for a in approaches}:
        raise ValidationError(f"Selected approach '{selected}' not found in implementation approaches")

    return ImplementationStrategyDraft(
        strategy_id=to_str(data["strategy_id"]),
        feature_name=to_str(data["feature_name"]),
        feature_description=to_str(data["feature_description"]),
        implementation_approaches=approaches,
        dependencies=dependencies,
        constraints=constraints,
        success_criteria=success_criteria,
        selected_approach=selected,
        **fields,
    )
