"""
Form catalogue: one spec builder per Ajax action.

A builder turns the raw request (for forms with a discriminator field) and the
settings into a SubmissionSpec. It raises SpecPreconditionError when the
request cannot be mapped to a spec at all; the pipeline never runs then.

Actions:
  enquiries   — consultation requests, emailed to the team
  consultant  — consultant applications, emailed to the team
  elink       — eLink newsletter signup (MailChimp)
  vetcommons  — VET Commons registration, ``type`` is "user" or "publisher"
"""

from types import MappingProxyType
from typing import Callable, FrozenSet, Mapping

from app.config import Settings
from app.models.submission import (
    EmailConfig,
    FieldDefinition,
    FieldKind,
    MailingListConfig,
    SpecPreconditionError,
    SubmissionSpec,
    ValidationStep,
)
from app.services.fields import BASE_FIELDS

SpecBuilder = Callable[[Mapping[str, str], Settings], SubmissionSpec]

NONE: FrozenSet[ValidationStep] = frozenset()
NP = frozenset({ValidationStep.NOT_PROVIDED})
INV = frozenset({ValidationStep.INVALID})
NP_INV = NP | INV

COMMENTS = FieldDefinition(name="comments", kind=FieldKind.TEXTAREA)
HOW = FieldDefinition(name="how")
WEBSITE = FieldDefinition(
    name="website",
    kind=FieldKind.URL,
    not_provided_message="Please enter the address of your website.",
    invalid_message="Your website address doesn't seem to be valid.",
)

REGISTRATION_TYPES = {"user": "User", "publisher": "Publisher"}


def build_enquiries(raw: Mapping[str, str], settings: Settings) -> SubmissionSpec:
    return SubmissionSpec(
        action="enquiries",
        fields=BASE_FIELDS.extend(COMMENTS, HOW).as_dict(),
        validation={
            "name": NP,
            "org": NP,
            "email": NP_INV,
            "phone": NP,
            "comments": NONE,
            "how": NONE,
        },
        email=EmailConfig(
            sender=settings.enquiries_from,
            recipient=settings.enquiries_to,
            subject=settings.enquiries_subject,
        ),
    )


def build_consultant(raw: Mapping[str, str], settings: Settings) -> SubmissionSpec:
    return SubmissionSpec(
        action="consultant",
        fields=BASE_FIELDS.extend(COMMENTS, WEBSITE).as_dict(),
        validation={
            "first": NP,
            "last": NP,
            "email": NP_INV,
            "phone": NP,
            "org": NONE,
            "website": NP_INV,
            "comments": NONE,
        },
        email=EmailConfig(
            sender=settings.consultant_from,
            recipient=settings.consultant_to,
            subject=settings.consultant_subject,
        ),
    )


def build_elink(raw: Mapping[str, str], settings: Settings) -> SubmissionSpec:
    return SubmissionSpec(
        action="elink",
        fields=BASE_FIELDS.as_dict(),
        validation={
            "email": NP_INV,
            "first": NONE,
            "last": NONE,
            "org": NONE,
        },
        mailing_list=MailingListConfig(
            list_id=settings.elink_list_id,
            double_optin=True,
        ),
    )


def build_vetcommons(raw: Mapping[str, str], settings: Settings) -> SubmissionSpec:
    reg_type = raw.get("type")
    if not reg_type:
        raise SpecPreconditionError("Registration type not provided.")
    if reg_type not in REGISTRATION_TYPES:
        raise SpecPreconditionError(f"Invalid registration type: {reg_type}.")

    mailing_list = MailingListConfig(
        list_id=settings.vetcommons_list_id,
        merge_vars={
            "GROUPINGS": [
                {"name": "Registration type", "groups": [REGISTRATION_TYPES[reg_type]]}
            ]
        },
    )

    if reg_type == "user":
        return SubmissionSpec(
            action="vetcommons",
            fields=BASE_FIELDS.as_dict(),
            validation={
                "first": NP,
                "last": NP,
                "email": NP_INV,
                "org": NONE,
            },
            mailing_list=mailing_list,
        )

    # Publisher registrations are also emailed to the team
    return SubmissionSpec(
        action="vetcommons",
        fields=BASE_FIELDS.extend(
            COMMENTS,
            WEBSITE,
            FieldDefinition(
                name="org",
                not_provided_message="Please enter the name of your publishing organisation.",
            ),
        ).as_dict(),
        validation={
            "first": NP,
            "last": NP,
            "email": NP_INV,
            "org": NP,
            "phone": NP,
            "website": NP_INV,
            "comments": NONE,
        },
        mailing_list=mailing_list,
        email=EmailConfig(
            sender=settings.vetcommons_from,
            recipient=settings.vetcommons_to,
            subject=settings.vetcommons_subject,
        ),
    )


ACTIONS: Mapping[str, SpecBuilder] = MappingProxyType({
    "enquiries": build_enquiries,
    "vetcommons": build_vetcommons,
    "elink": build_elink,
    "consultant": build_consultant,
})
