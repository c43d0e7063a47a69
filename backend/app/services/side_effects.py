"""
Post-validation side effects of a form submission.

Each step takes the sanitised values and the spec, performs one outbound call
and reports the outcome as a StepResult. Steps never raise for integration
failures and never touch the response envelope themselves; the pipeline
decides what the client sees.
"""

import html
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

from app.models.submission import FieldKind, SubmissionSpec
from app.services.mailchimp import MailingListClient, MailingListError
from app.services.mailer import MailTransport, MailTransportError, OutboundEmail

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    is_error: bool = False
    # Diagnostic payload, exposed under the step's key in debug mode only
    debug: Optional[Dict[str, Any]] = None
    # Message shown to the client in debug mode only
    message: Optional[str] = None


class SideEffectStep(Protocol):
    name: str

    def apply(self, values: Mapping[str, str], spec: SubmissionSpec) -> StepResult:
        ...


def build_merge_vars(
    values: Mapping[str, str], custom: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """
    Build MailChimp merge variables from sanitised values.

    Names are upper-cased and empty values dropped, so that a repeat
    submission with a blank optional field does not wipe what the list already
    holds. ``custom`` entries (e.g. GROUPINGS) win over derived ones.
    """
    merge_vars: Dict[str, Any] = {
        name.upper(): value for name, value in values.items() if len(value) > 0
    }
    if custom:
        merge_vars.update(custom)
    return merge_vars


def build_email_body(values: Mapping[str, str], spec: SubmissionSpec) -> str:
    body = ""
    for name, value in values.items():
        body += f"<p><strong>{html.escape(name)}</strong>: "
        definition = spec.lookup(name)
        if definition is not None and definition.kind == FieldKind.TEXTAREA:
            body += "<br>"
        body += f"{html.escape(value, quote=False)}</p>\n"
    return body


def build_email_headers(sender: str) -> Dict[str, str]:
    return {
        "From": sender,
        "Reply-To": sender,
        "MIME-Version": "1.0",
        "Content-Type": "text/html; charset=ISO-8859-1",
    }


class MailingListSubscribe:
    """Subscribe the submitted email address to the spec's MailChimp list."""

    name = "mailchimp"

    def __init__(self, client: Optional[MailingListClient]):
        self.client = client

    def apply(self, values: Mapping[str, str], spec: SubmissionSpec) -> StepResult:
        config = spec.mailing_list
        merge_vars = build_merge_vars(values, config.merge_vars)
        debug: Dict[str, Any] = {"list_id": config.list_id, "merge_vars": merge_vars}

        if self.client is None:
            logger.error("Mailing list client is not configured (action %r)", spec.action)
            return StepResult(
                is_error=True,
                debug=debug,
                message="Error while subscribing to the mailing list.",
            )

        try:
            debug["result"] = self.client.subscribe(
                list_id=config.list_id,
                email=values.get("email", ""),
                merge_vars=merge_vars,
                double_optin=config.double_optin,
                update_existing=config.update_existing,
                replace_interests=config.replace_interests,
                send_welcome=config.send_welcome,
            )
        except MailingListError as exc:
            logger.error("Mailing list subscription failed for %r: %s", spec.action, exc)
            debug["result"] = exc.result
            return StepResult(
                is_error=True,
                debug=debug,
                message="Error while subscribing to the mailing list.",
            )

        return StepResult(debug=debug)


class EmailNotify:
    """Email the sanitised submission to the spec's recipient."""

    name = "email"

    def __init__(self, transport: Optional[MailTransport]):
        self.transport = transport

    def apply(self, values: Mapping[str, str], spec: SubmissionSpec) -> StepResult:
        config = spec.email
        message = OutboundEmail(
            sender=config.sender,
            to=config.recipient,
            subject=config.subject,
            body=build_email_body(values, spec),
            headers=build_email_headers(config.sender),
        )
        debug = {
            "to": message.to,
            "subject": message.subject,
            "headers": message.header_block(),
            "body": message.body,
        }

        if self.transport is None:
            logger.error("Mail transport is not configured (action %r)", spec.action)
            return StepResult(
                is_error=True, debug=debug, message="Error while sending the email."
            )

        try:
            self.transport.send(message)
        except MailTransportError as exc:
            logger.error("Notification email failed for %r: %s", spec.action, exc)
            return StepResult(
                is_error=True, debug=debug, message="Error while sending the email."
            )

        return StepResult(debug=debug)
