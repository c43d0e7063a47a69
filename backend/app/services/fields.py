"""
Field catalogue.

The base catalogue holds the fields shared by every form. A form adds its own
fields, or overrides a base entry (custom message, different kind), by passing
definitions to ``FieldRegistry.extend``; the base registry itself never
changes.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from app.models.submission import FieldDefinition, FieldKind


class FieldRegistry:
    """Read-only mapping of field name to FieldDefinition."""

    def __init__(self, definitions: Iterable[FieldDefinition] = ()):
        self._fields: Mapping[str, FieldDefinition] = MappingProxyType(
            {d.name: d for d in definitions}
        )

    def lookup(self, name: str) -> Optional[FieldDefinition]:
        return self._fields.get(name)

    def extend(self, *definitions: FieldDefinition) -> "FieldRegistry":
        """Return a new registry with ``definitions`` merged over this one."""
        merged: Dict[str, FieldDefinition] = dict(self._fields)
        for definition in definitions:
            merged[definition.name] = definition
        return FieldRegistry(merged.values())

    def as_dict(self) -> Dict[str, FieldDefinition]:
        return dict(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)


BASE_FIELDS = FieldRegistry([
    FieldDefinition(
        name="email",
        kind=FieldKind.EMAIL,
        not_provided_message="Please enter your email address.",
        invalid_message="Your email address doesn't seem to be valid.",
    ),
    FieldDefinition(
        name="name",
        not_provided_message="Please enter your name.",
    ),
    FieldDefinition(
        name="first",
        not_provided_message="Please enter your first name.",
    ),
    FieldDefinition(
        name="last",
        not_provided_message="Please enter your last name.",
    ),
    FieldDefinition(
        name="org",
        not_provided_message="Please enter the name of your organisation.",
    ),
    FieldDefinition(
        name="phone",
        not_provided_message="Please enter your phone number.",
        invalid_message="Your phone number doesn't seem to be valid.",
    ),
])
