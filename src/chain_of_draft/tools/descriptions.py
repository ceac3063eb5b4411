"""Caller-facing tool and parameter descriptions."""

CRITIQUE_CYCLE = (
    "Alternate critique steps (is_critique=true, with critique_focus) and revision "
    "steps (is_critique=false, with revision_instructions). draft_number starts at 1 "
    "and total_drafts is raised automatically when a later draft exceeds it. Set "
    "next_step_needed=false once the final draft is complete."
)

CHAIN_OF_DRAFT = (
    "Chain of Draft: refine a reasoning chain through iterative critique and revision.\n\n"
    "Submit the current reasoning_chain with each draft. Use step_to_review to target a "
    "single step; those drafts are also grouped in a branch named "
    "branch_<draft_number>_<step_to_review>. Use chain_id to keep separate problems apart.\n\n"
    + CRITIQUE_CYCLE
)

API_BLUEPRINT_DESIGNER = (
    "API Blueprint Designer: draft and refine an HTTP API design.\n\n"
    "Each draft lists endpoints (path, method, parameters, optional request body, "
    "responses) and the auth requirements. Path parameters must appear in the endpoint "
    "path as {name} or :name. Drafts are tracked per api_id.\n\n" + CRITIQUE_CYCLE
)

ARCHITECTURE_DECISION_RECORDER = (
    "Architecture Decision Recorder: draft and refine an architecture decision record.\n\n"
    "Each draft carries the context, the decision, its consequences, the alternatives "
    "considered with pros and cons, and related decisions. status is one of proposed, "
    "accepted, rejected, deprecated, superseded. Drafts are tracked per id.\n\n" + CRITIQUE_CYCLE
)

CODE_REVIEW_LENS = (
    "Code Review Lens: run a multi-dimensional code review in drafts.\n\n"
    "List the reviewed files and the findings; every finding must reference a file from "
    "the files list and a line range [start, end] with start >= 1. Dimensions: "
    "performance, security, maintainability, readability, testability, correctness, "
    "documentation. Severities: info, suggestion, warning, critical. Drafts are tracked "
    "per review_id.\n\n" + CRITIQUE_CYCLE
)

IMPLEMENTATION_STRATEGY_PLANNER = (
    "Implementation Strategy Planner: compare and refine ways to build a feature.\n\n"
    "Describe candidate approaches as phases with tasks, effort and risks, plus the "
    "feature's dependencies, constraints and success criteria. selected_approach must "
    "name one of the approaches. Drafts are tracked per strategy_id.\n\n" + CRITIQUE_CYCLE
)

PARAMS = {
    "draft_number": "Current draft number (>= 1).",
    "total_drafts": "Planned number of drafts (>= draft_number).",
    "next_step_needed": "True while another critique or revision cycle is needed.",
    "is_critique": "True for a critique step, false for a revision step.",
    "critique_focus": "Aspect being critiqued. Required when is_critique is true.",
    "revision_instructions": "How to revise after the critique. Required when is_critique is false.",
    "is_final_draft": "True when this is the final draft.",
    "reasoning_chain": "Current reasoning steps, one complete thought per item.",
    "step_to_review": "Zero-based index of the reasoning step under review.",
    "chain_id": "Identifier separating independent reasoning chains (default 'default').",
    "api_id": "Unique identifier of the API design.",
    "api_name": "Name of the API.",
    "api_version": "Version of the API.",
    "description": "Overall description.",
    "endpoints": "Endpoints: path, method, description, parameters, responses, optional request_body.",
    "auth_requirements": "Authentication: type (none, basic, bearer, api_key, oauth2, custom) and description.",
    "id": "Unique identifier of the decision record.",
    "title": "Decision title.",
    "status": "Decision status.",
    "context": "Forces and background that motivate the decision.",
    "decision": "The decision taken.",
    "consequences": "Resulting consequences, positive and negative.",
    "alternatives": "Alternatives considered: option, pros, cons.",
    "related_decisions": "Identifiers of related decision records.",
    "review_id": "Unique identifier of the review.",
    "pull_request_id": "Pull request or change under review.",
    "repository": "Repository containing the code.",
    "review_dimensions": "Dimensions this review covers.",
    "files": "Reviewed files: path, content, language, line_count.",
    "findings": "Findings: file, line_range, dimension, severity, description, optional suggested_fix and justification.",
    "strategy_id": "Unique identifier of the strategy.",
    "feature_name": "Feature being planned.",
    "feature_description": "What the feature does.",
    "implementation_approaches": "Approaches: name, description, phases, pros, cons.",
    "dependencies": "Dependencies: name, description, type, status.",
    "constraints": "Constraints: category, description, impact.",
    "success_criteria": "Criteria that define success.",
    "selected_approach": "Name of the chosen approach.",
}
