"""
Application configuration.

Everything is read from environment variables once per process (a ``.env``
file in the working directory is loaded first) and frozen into a ``Settings``
value. Nothing mutates it after startup.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_SUCCESS_MESSAGE = "Submission successful."
DEFAULT_ERROR_MESSAGE = (
    "An unknown error occurred while processing your request. If the problem "
    'persists, please use our <a href="/contact">contact form</a>.'
)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "").strip()
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Process-wide, read-only configuration."""

    debug: bool = False
    success_message: str = DEFAULT_SUCCESS_MESSAGE
    error_message: str = DEFAULT_ERROR_MESSAGE

    # MailChimp
    mailchimp_api_key: Optional[str] = None
    mailchimp_timeout: float = 10.0

    # Resend (outbound mail)
    resend_api_key: Optional[str] = None
    mail_timeout: float = 10.0

    # Enquiries (consultation requests)
    enquiries_from: str = ""
    enquiries_to: str = ""
    enquiries_subject: str = "Contact form response"

    # Consultant applications
    consultant_from: str = ""
    consultant_to: str = ""
    consultant_subject: str = "Consultant application"

    # VET Commons registrations
    vetcommons_list_id: str = ""
    vetcommons_from: str = ""
    vetcommons_to: str = ""
    vetcommons_subject: str = "VET Commons publisher registration"

    # eLink newsletter
    elink_list_id: str = ""

    cors_origins: tuple = ()


def load_settings() -> Settings:
    """Build a Settings value from the current environment."""
    return Settings(
        debug=_env_bool("AJAX_DEBUG"),
        success_message=os.getenv("SUCCESS_MESSAGE") or DEFAULT_SUCCESS_MESSAGE,
        error_message=os.getenv("ERROR_MESSAGE") or DEFAULT_ERROR_MESSAGE,
        mailchimp_api_key=os.getenv("MAILCHIMP_API_KEY") or None,
        mailchimp_timeout=_env_float("MAILCHIMP_TIMEOUT", 10.0),
        resend_api_key=os.getenv("RESEND_API_KEY") or None,
        mail_timeout=_env_float("MAIL_TIMEOUT", 10.0),
        enquiries_from=os.getenv("ENQUIRIES_FROM", ""),
        enquiries_to=os.getenv("ENQUIRIES_TO", ""),
        enquiries_subject=os.getenv("ENQUIRIES_SUBJECT") or "Contact form response",
        consultant_from=os.getenv("CONSULTANT_FROM", ""),
        consultant_to=os.getenv("CONSULTANT_TO", ""),
        consultant_subject=os.getenv("CONSULTANT_SUBJECT") or "Consultant application",
        vetcommons_list_id=os.getenv("VETCOMMONS_LIST_ID", ""),
        vetcommons_from=os.getenv("VETCOMMONS_FROM", ""),
        vetcommons_to=os.getenv("VETCOMMONS_TO", ""),
        vetcommons_subject=(
            os.getenv("VETCOMMONS_SUBJECT") or "VET Commons publisher registration"
        ),
        elink_list_id=os.getenv("ELINK_LIST_ID", ""),
        cors_origins=tuple(_env_list("CORS_ORIGINS")),
    )


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return load_settings()
