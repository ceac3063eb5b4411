"""Validators for the drafting documents.

Each validator takes an untyped value (usually the tool arguments dict) and
returns a typed document or raises ``ValidationError`` for the first rule the
input breaks.
"""

from .api_blueprint import validate_api_blueprint
from .architecture_decision import validate_architecture_decision
from .code_review import validate_code_review
from .implementation_strategy import validate_implementation_strategy
from .reasoning_chain import validate_reasoning_chain

__all__ = [
    "validate_api_blueprint",
    "validate_architecture_decision",
    "validate_code_review",
    "validate_implementation_strategy",
    "validate_reasoning_chain",
]
