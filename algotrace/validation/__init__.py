"""
Advisory invariant checks for every structure kind.
"""

from .registry import (
    Violation,
    VALIDATORS,
    register_validator,
    validate,
    kind_of,
)

__all__ = [
    "Violation",
    "VALIDATORS",
    "register_validator",
    "validate",
    "kind_of",
]
