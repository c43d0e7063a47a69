"""
Ajax endpoint for the website's forms.

Endpoints:
  POST /api/ajax  — form-encoded submission; the ``action`` field selects the form

The response is always HTTP 200 with the envelope
``{"isError": bool, "messages": [...], "data": {...}}``; the client widget
decides what to show from ``isError``.
"""

import logging
from functools import lru_cache
from typing import Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.config import get_settings
from app.models.ajax import AjaxResponse
from app.services.dispatcher import dispatch
from app.services.mailchimp import MailchimpClient
from app.services.mailer import ResendTransport

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache()
def get_mailing_list_client() -> Optional[MailchimpClient]:
    """MailChimp client, or None when MAILCHIMP_API_KEY is not configured."""
    settings = get_settings()
    if not settings.mailchimp_api_key:
        logger.warning("MAILCHIMP_API_KEY is not set; list subscriptions will fail")
        return None
    return MailchimpClient(settings.mailchimp_api_key, timeout=settings.mailchimp_timeout)


@lru_cache()
def get_mail_transport() -> Optional[ResendTransport]:
    """Resend transport, or None when RESEND_API_KEY is not configured."""
    settings = get_settings()
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY is not set; notification emails will fail")
        return None
    return ResendTransport(settings.resend_api_key, timeout=settings.mail_timeout)


def close_clients() -> None:
    """Close the cached outbound clients, if any were created."""
    for factory in (get_mailing_list_client, get_mail_transport):
        if factory.cache_info().currsize:
            client = factory()
            if client is not None:
                client.close()
        factory.cache_clear()


async def _read_form(request: Request) -> Dict[str, str]:
    form = await request.form()
    # Uploaded files are not form values
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.post("")
async def submit(request: Request):
    """Validate and process a form submission."""
    settings = get_settings()

    try:
        raw = await _read_form(request)
        response = await run_in_threadpool(
            dispatch,
            raw.get("action"),
            raw,
            settings,
            mailing_list=get_mailing_list_client(),
            mailer=get_mail_transport(),
        )
    except Exception:
        logger.exception("Unhandled error while processing an Ajax request")
        response = AjaxResponse.error(settings.error_message)

    return JSONResponse(content=response.to_wire())
