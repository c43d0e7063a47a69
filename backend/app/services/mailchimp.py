"""
MailChimp list subscription client.

Calls the ``lists/subscribe`` method of the MailChimp API. The API key has the
form ``<key>-<dc>``; the datacenter suffix selects the API host.

A response is considered an error when it is not a 2xx, or when its JSON body
carries ``"status": "error"`` or an ``error`` key. Errors are raised as
MailingListError; callers decide what the user gets to see.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

_API_URL = "https://{dc}.api.mailchimp.com/2.0/lists/subscribe.json"


class MailingListError(Exception):
    """The subscription request failed or the API reported an error."""

    def __init__(self, message: str, result: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.result = result


class MailingListClient(Protocol):
    def subscribe(
        self,
        list_id: str,
        email: str,
        merge_vars: Dict[str, Any],
        double_optin: bool,
        update_existing: bool,
        replace_interests: bool,
        send_welcome: bool,
    ) -> Dict[str, Any]:
        ...


def datacenter_from_key(api_key: str) -> str:
    """
    Return the datacenter suffix of a MailChimp API key.

    Examples:
        "0123abcd-us6" -> "us6"
        "0123abcd"     -> "us1"
    """
    _, sep, dc = api_key.rpartition("-")
    return dc if sep and dc else "us1"


class MailchimpClient:
    """Blocking MailChimp client; one call per subscription, no retries."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.url = _API_URL.format(dc=datacenter_from_key(api_key))
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def subscribe(
        self,
        list_id: str,
        email: str,
        merge_vars: Dict[str, Any],
        double_optin: bool = False,
        update_existing: bool = True,
        replace_interests: bool = False,
        send_welcome: bool = False,
    ) -> Dict[str, Any]:
        payload = {
            "apikey": self.api_key,
            "id": list_id,
            "email": {"email": email},
            "merge_vars": merge_vars,
            "double_optin": double_optin,
            "update_existing": update_existing,
            "replace_interests": replace_interests,
            "send_welcome": send_welcome,
        }

        try:
            response = self._http.post(self.url, json=payload)
        except httpx.HTTPError as exc:
            raise MailingListError(f"MailChimp request failed: {exc}") from exc

        try:
            result = response.json()
        except ValueError:
            result = {"status": "error", "error": response.text}

        if not isinstance(result, dict):
            result = {"status": "error", "error": f"Unexpected response: {result!r}"}

        if (
            response.status_code >= 300
            or result.get("status") == "error"
            or "error" in result
        ):
            raise MailingListError(
                f"MailChimp error ({response.status_code}): "
                f"{result.get('error') or result.get('name') or 'unknown'}",
                result=result,
            )

        logger.info("Subscribed an address to MailChimp list %s", list_id)
        return result
