"""
Pydantic models for form submissions.

Models:
  FieldKind          — value kind of a field (drives sanitisation and validation)
  ValidationStep     — the two validation steps a field can opt into
  FieldDefinition    — one entry of the field catalogue
  MailingListConfig  — MailChimp subscription settings for a form
  EmailConfig        — notification email settings for a form
  SubmissionSpec     — everything the pipeline needs to process one form
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel


class FieldKind(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    URL = "url"
    TEXTAREA = "textarea"


class ValidationStep(str, Enum):
    NOT_PROVIDED = "not-provided"
    INVALID = "invalid"


class FieldDefinition(BaseModel):
    """A known form field and its human-readable error strings."""
    model_config = {"frozen": True}

    name: str
    kind: FieldKind = FieldKind.TEXT
    not_provided_message: Optional[str] = None
    invalid_message: Optional[str] = None


class MailingListConfig(BaseModel):
    """
    MailChimp subscription settings.

    ``merge_vars`` are custom merge variables (e.g. interest groupings) that are
    merged over the ones derived from the submitted values.
    """
    model_config = {"frozen": True}

    list_id: str
    merge_vars: Dict[str, Any] = {}
    double_optin: bool = False
    update_existing: bool = True
    replace_interests: bool = False
    send_welcome: bool = False


class EmailConfig(BaseModel):
    """Static addressing for the notification email of a form."""
    model_config = {"frozen": True}

    sender: str
    recipient: str
    subject: str


class SubmissionSpec(BaseModel):
    """
    Declaration of one form type.

    ``fields`` is the field catalogue in effect for this form (the base
    catalogue with the form's own additions and overrides merged in).
    ``validation`` maps each used field name to the steps applied to it, in
    declaration order. An empty set means sanitisation only.
    """
    model_config = {"frozen": True}

    action: str
    fields: Dict[str, FieldDefinition]
    validation: Dict[str, FrozenSet[ValidationStep]]
    mailing_list: Optional[MailingListConfig] = None
    email: Optional[EmailConfig] = None

    def lookup(self, name: str) -> Optional[FieldDefinition]:
        return self.fields.get(name)


class SpecPreconditionError(Exception):
    """Raised by a spec builder when a request cannot be mapped to a spec."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
