from typing import Any, List

from ..errors import ValidationError
from ..models import CodeFile, CodeReviewDraft, ReviewFinding
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
)

REQUIRED_FIELDS = (
    "review_id",
    "pull_request_id",
    "repository",
    "review_dimensions",
    "files",
    "findings",
    "next_step_needed",
    *DRAFT_REQUIRED_FIELDS,
)

REVIEW_DIMENSIONS = (
    "performance",
    "security",
    "maintainability",
    "readability",
    "testability",
    "correctness",
    "documentation",
)
SEVERITIES = ("info", "suggestion", "warning", "critical")


def _code_file(raw: Any) -> CodeFile:
    raw = require_fields(
        raw,
        ("path", "content", "language", "line_count"),
        "Each file must have path, content, language, and line_count",
    )
    line_count = to_number(raw["line_count"], "Line count must be a non-negative number")
    if line_count < 0:
        raise ValidationError("Line count must be a non-negative number")
    return CodeFile(
        path=to_str(raw["path"]),
        content=to_str(raw["content"]),
        language=to_str(raw["language"]),
        line_count=int(line_count),
    )


def _finding(raw: Any) -> ReviewFinding:
    raw = require_fields(
        raw,
        ("file", "line_range", "dimension", "severity", "description"),
        "Each finding must have file, line_range, dimension, severity, and description",
    )
    line_range = raw["line_range"]
    if not isinstance(line_range, (list, tuple)) or len(line_range) != 2:
        raise ValidationError("Line range must be an array of two numbers [start, end]")
    range_error = "Invalid line range: start line must be >= 1 and end line must be >= start line"
    start = to_number(line_range[0], range_error)
    end = to_number(line_range[1], range_error)
    if start < 1 or end < start:
        raise ValidationError(range_error)

    return ReviewFinding(
        file=to_str(raw["file"]),
        line_range=(int(start), int(end)),
        dimension=check_choice(raw["dimension"], REVIEW_DIMENSIONS, "finding dimension"),
        severity=check_choice(raw["severity"], SEVERITIES, "finding severity"),
        description=to_str(raw["description"]),
        suggested_fix=optional_str(raw, "suggested_fix"),
        justification=optional_str(raw, "justification"),
    )


def _check_finding_files(files: List[CodeFile], findings: List[ReviewFinding]) -> None:
    paths = {f.path for f in files}
    for finding in findings:
        if finding.file not in paths:
            raise ValidationError(
                f"Finding references file '{finding.file}' which is not in the files array"
            )


def validate_code_review(data: Any) -> CodeReviewDraft:
    """Validate a code review draft and return the typed document."""
    data = require_fields(data, REQUIRED_FIELDS)

    dimensions = [
        check_choice(dim, REVIEW_DIMENSIONS, "review dimension")
        for dim in require_list(data["review_dimensions"], "Review dimensions must be an array")
    ]
    files = [_code_file(f) for f in require_list(data["files"], "Files must be an array")]
    findings = [_finding(f) for f in require_list(data["findings"], "Findings must be an array")]

    fields = read_draft_fields(data)
    fields["next_step_needed"] = to_bool(data["next_step_needed"])

    check_draft_progression(fields)
    check_critique_pairing(fields)
    _check_finding_files(files, findings)

    return CodeReviewDraft(
        review_id=to_str(data["review_id"]),
        pull_request_id=to_str(data["pull_request_id"]),
        repository=to_str(data["repository"]),
        review_dimensions=dimensions,
        files=files,
        findings=findings,
        **fields,
    )
