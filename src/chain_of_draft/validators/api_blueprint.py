from typing import Any, Dict, List, Mapping

from ..errors import ValidationError
from ..models import (
    APIBlueprintDraft,
    AuthRequirement,
    Endpoint,
    Parameter,
    RequestBody,
    ResponseSpec,
)
from ._common import (
    DRAFT_REQUIRED_FIELDS,
    check_choice,
    check_critique_pairing,
    check_draft_progression,
    read_draft_fields,
    require_fields,
    require_list,
    to_bool,
    to_number,
    to_str,
)

REQUIRED_FIELDS = (
    "api_id",
    "api_name",
    "api_version",
    "description",
    "endpoints",
    "auth_requirements",
    "next_step_needed",
    *DRAFT_REQUIRED_FIELDS,
)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD")
PARAMETER_LOCATIONS = ("path", "query", "header", "cookie")
AUTH_TYPES = ("none", "basic", "bearer", "api_key", "oauth2", "custom")


def _schema(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _parameter(raw: Any) -> Parameter:
    raw = require_fields(
        raw,
        ("name", "location", "required", "type", "description"),
        "Each parameter must have name, location, required, type, and description",
    )
    return Parameter(
        name=to_str(raw["name"]),
        location=check_choice(raw["location"], PARAMETER_LOCATIONS, "parameter location"),
        required=to_bool(raw["required"]),
        type=to_str(raw["type"]),
        description=to_str(raw["description"]),
    )


def _request_body(raw: Any) -> RequestBody:
    raw = require_fields(
        raw,
        ("content_type", "schema", "example"),
        "Request body must have content_type, schema, and example",
    )
    return RequestBody(
        content_type=to_str(raw["content_type"]),
        schema=_schema(raw["schema"]),
        example=to_str(raw["example"]),
    )


def _response(raw: Any) -> ResponseSpec:
    raw = require_fields(
        raw,
        ("status_code", "description", "content_type", "schema", "example"),
        "Each response must have status_code, description, content_type, schema, and example",
    )
    status_code = to_number(raw["status_code"], "Status code must be a number")
    if not 100 <= status_code <= 599:
        raise ValidationError("Status code must be between 100 and 599")
    return ResponseSpec(
        status_code=int(status_code),
        description=to_str(raw["description"]),
        content_type=to_str(raw["content_type"]),
        schema=_schema(raw["schema"]),
        example=to_str(raw["example"]),
    )


def _endpoint(raw: Any) -> Endpoint:
    raw = require_fields(
        raw,
        ("path", "method", "description", "parameters", "responses"),
        "Each endpoint must have path, method, description, parameters, and responses",
    )
    method = check_choice(raw["method"], HTTP_METHODS, "method")
    parameters = [_parameter(p) for p in require_list(raw["parameters"], "Parameters must be an array")]

    request_body = _request_body(raw["request_body"]) if raw.get("request_body") else None

    responses = raw["responses"]
    if not isinstance(responses, list) or not responses:
        raise ValidationError("Responses must be a non-empty array")

    return Endpoint(
        path=to_str(raw["path"]),
        method=method,
        description=to_str(raw["description"]),
        parameters=parameters,
        responses=[_response(r) for r in responses],
        request_body=request_body,
    )


def _check_path_parameters(endpoints: List[Endpoint]) -> None:
    """Every path parameter must appear in its endpoint path as {name} or :name."""
    for endpoint in endpoints:
        for param in endpoint.parameters:
            if param.location != "path":
                continue
            if f"{{{param.name}}}" not in endpoint.path and f":{param.name}" not in endpoint.path:
                raise ValidationError(
                    f"Path parameter '{param.name}' does not appear in endpoint path "
                    f"'{endpoint.method} {endpoint.path}'"
                )


def validate_api_blueprint(data: Any) -> APIBlueprintDraft:
    """Validate an API blueprint draft and return the typed document."""
    data = require_fields(data, REQUIRED_FIELDS)

    endpoints = [_endpoint(ep) for ep in require_list(data["endpoints"], "Endpoints must be an array")]

    auth = require_fields(
        data["auth_requirements"],
        ("type", "description"),
        "Auth requirements must have type and description",
    )
    auth_requirements = AuthRequirement(
        type=check_choice(auth["type"], AUTH_TYPES, "auth type"),
        description=to_str(auth["description"]),
    )

    fields = read_draft_fields(data)
    fields["next_step_needed"] = to_bool(data["next_step_needed"])

    check_draft_progression(fields)
    check_critique_pairing(fields)
    _check_path_parameters(endpoints)

    return APIBlueprintDraft(
        api_id=to_str(data["api_id"]),
        api_name=to_str(data["api_name"]),
        api_version=to_str(data["api_version"]),
        description=to_str(data["description"]),
        endpoints=endpoints,
        auth_requirements=auth_requirements,
        **fields,
    )
