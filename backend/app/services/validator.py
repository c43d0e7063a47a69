"""
Form validation.

Sanitises the raw POSTed values of a submission and checks them against the
validation steps declared in its SubmissionSpec.

Rules, applied to every field of the spec in declaration order:
  1. Field missing from the catalogue    -> "Unknown field: {name}."
  2. Field missing from the raw input    -> "Field not provided: {name}."
  3. Value is sanitised for its kind and stored, whatever happens next.
  4. ``not-provided`` and the value is empty -> the field's not-provided message;
     the ``invalid`` check is skipped for that field.
  5. ``invalid`` and the value fails its kind's format check
     -> the field's invalid message.

Fields never short-circuit each other: every field is processed and every
error is reported.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from app.models.submission import SubmissionSpec, ValidationStep
from app.services.sanitizer import is_valid, sanitize

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    values: Dict[str, str] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return bool(self.errors)


def validate(spec: SubmissionSpec, raw: Mapping[str, str]) -> ValidationResult:
    result = ValidationResult()

    for name, steps in spec.validation.items():
        definition = spec.lookup(name)
        if definition is None:
            result.errors.append(f"Unknown field: {name}.")
            continue

        if name not in raw:
            result.errors.append(f"Field not provided: {name}.")
            continue

        value = sanitize(raw[name], definition.kind)
        result.values[name] = value

        if ValidationStep.NOT_PROVIDED in steps and len(value) == 0:
            result.errors.append(
                definition.not_provided_message or f"Field not provided: {name}."
            )
            continue

        if ValidationStep.INVALID in steps and not is_valid(value, definition.kind):
            result.errors.append(
                definition.invalid_message or f"Field invalid: {name}."
            )

    if result.is_error:
        logger.info(
            "Validation of %r failed with %d error(s)", spec.action, len(result.errors)
        )

    return result
