"""
Ajax request dispatcher.

Maps the ``action`` of a request to its spec builder and runs the submission
pipeline. Always returns an AjaxResponse: missing or unknown actions and spec
preconditions are reported as error envelopes.
"""

import logging
from typing import Mapping, Optional

from app.config import Settings
from app.models.ajax import AjaxResponse
from app.models.submission import SpecPreconditionError
from app.services.forms import ACTIONS, SpecBuilder
from app.services.mailchimp import MailingListClient
from app.services.mailer import MailTransport
from app.services.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def dispatch(
    action: Optional[str],
    raw: Mapping[str, str],
    settings: Settings,
    mailing_list: Optional[MailingListClient] = None,
    mailer: Optional[MailTransport] = None,
    actions: Mapping[str, SpecBuilder] = ACTIONS,
) -> AjaxResponse:
    """
    Handle one Ajax request.

    Args:
        action: Value of the ``action`` field, None when absent
        raw: Submitted form fields (untrusted)
        settings: Process settings
        mailing_list: Client used by forms that subscribe to a list
        mailer: Transport used by forms that send an email
        actions: Action table (the form catalogue by default)

    Returns:
        The response envelope for the request
    """
    if action is None:
        logger.warning("Ajax request without action")
        return AjaxResponse.error("Action not provided.")

    builder = actions.get(action)
    if builder is None:
        logger.warning("Ajax request with unknown action %r", action)
        return AjaxResponse.error(f"Invalid action: {action}.")

    try:
        spec = builder(raw, settings)
    except SpecPreconditionError as exc:
        logger.info("Action %r rejected before validation: %s", action, exc.message)
        return AjaxResponse.error(exc.message)

    response = run_pipeline(spec, raw, settings, mailing_list=mailing_list, mailer=mailer)
    logger.info(
        "Action %r processed: %s", action, "error" if response.is_error else "success"
    )
    return response
