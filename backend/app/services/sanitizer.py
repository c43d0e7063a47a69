"""
Sanitisation and format checks for submitted values.

Sanitisers only ever remove characters, so applying one to its own output
returns the same string.
"""

import re

from pydantic import AnyUrl, EmailStr, TypeAdapter, ValidationError

from app.models.submission import FieldKind

# Anything that is not allowed in an email address
_EMAIL_ILLEGAL_RE = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")

# Anything that is not allowed in a URL
_URL_ILLEGAL_RE = re.compile(r"[^A-Za-z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")

# A tag starts with "<" and a letter, "/" or "!"; an unclosed one runs to the end
_TAG_RE = re.compile(r"<[A-Za-z/!][^>]*>?")
_ANGLE_RE = re.compile(r"[<>]")
# C0 controls except tab, newline and carriage return, plus DEL
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(AnyUrl)

# Schemes that are valid without a host, e.g. mailto:jo@acme.com
_HOSTLESS_SCHEMES = {"mailto", "news", "file"}
_AUTHORITY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def sanitize_email(value: str) -> str:
    return _EMAIL_ILLEGAL_RE.sub("", value)


def sanitize_url(value: str) -> str:
    return _URL_ILLEGAL_RE.sub("", value)


def sanitize_text(value: str) -> str:
    """Strip markup and control characters."""
    value = _TAG_RE.sub("", value)
    value = _ANGLE_RE.sub("", value)
    return _CONTROL_RE.sub("", value)


def sanitize(value: str, kind: FieldKind) -> str:
    if kind == FieldKind.EMAIL:
        return sanitize_email(value)
    if kind == FieldKind.URL:
        return sanitize_url(value)
    return sanitize_text(value)


def is_valid_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_valid_url(value: str) -> bool:
    """
    Absolute URL with a host. The host must be spelled out after "//"; the
    parser would otherwise read "http:/x" as "http://x/".
    """
    try:
        url = _url_adapter.validate_python(value)
    except ValidationError:
        return False
    if url.scheme in _HOSTLESS_SCHEMES:
        return True
    return bool(url.host) and _AUTHORITY_RE.match(value) is not None


def is_valid(value: str, kind: FieldKind) -> bool:
    """
    Kind-specific format check. Kinds without a format check (text, textarea)
    are always valid.
    """
    if kind == FieldKind.EMAIL:
        return is_valid_email(value)
    if kind == FieldKind.URL:
        return is_valid_url(value)
    return True
