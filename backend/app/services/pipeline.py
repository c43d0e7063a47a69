"""
Form submission pipeline.

    validate -> [subscribe] -> [email] -> success

Steps run in that fixed order and only when the spec configures them. The
first failure ends the request: later steps do not run, and side effects that
already happened are not undone.
"""

import logging
from typing import List, Mapping, Optional

from app.config import Settings
from app.models.ajax import AjaxResponse
from app.models.submission import SubmissionSpec
from app.services.mailchimp import MailingListClient
from app.services.mailer import MailTransport
from app.services.side_effects import EmailNotify, MailingListSubscribe, SideEffectStep
from app.services.validator import validate

logger = logging.getLogger(__name__)


def build_steps(
    spec: SubmissionSpec,
    mailing_list: Optional[MailingListClient] = None,
    mailer: Optional[MailTransport] = None,
) -> List[SideEffectStep]:
    steps: List[SideEffectStep] = []
    if spec.mailing_list is not None:
        steps.append(MailingListSubscribe(mailing_list))
    if spec.email is not None:
        steps.append(EmailNotify(mailer))
    return steps


def run_pipeline(
    spec: SubmissionSpec,
    raw: Mapping[str, str],
    settings: Settings,
    mailing_list: Optional[MailingListClient] = None,
    mailer: Optional[MailTransport] = None,
) -> AjaxResponse:
    response = AjaxResponse()

    result = validate(spec, raw)
    response.messages.extend(result.errors)
    response.is_error = result.is_error

    if settings.debug:
        response.data["values"] = dict(result.values)

    if response.is_error:
        return response

    for step in build_steps(spec, mailing_list, mailer):
        outcome = step.apply(result.values, spec)

        if settings.debug and outcome.debug is not None:
            response.data[step.name] = outcome.debug

        if outcome.is_error:
            response.is_error = True
            if settings.debug and outcome.message:
                response.messages.append(outcome.message)
            logger.warning("Step %r failed for action %r", step.name, spec.action)
            return response

    response.messages.append(settings.success_message)
    return response
