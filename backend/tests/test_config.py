"""
Unit tests for settings loading.
"""

import dataclasses

import pytest

from app.config import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_SUCCESS_MESSAGE,
    Settings,
    load_settings,
)

_KEYS = [
    "AJAX_DEBUG",
    "SUCCESS_MESSAGE",
    "ERROR_MESSAGE",
    "MAILCHIMP_API_KEY",
    "MAILCHIMP_TIMEOUT",
    "RESEND_API_KEY",
    "ENQUIRIES_FROM",
    "ENQUIRIES_TO",
    "ENQUIRIES_SUBJECT",
    "ELINK_LIST_ID",
    "CORS_ORIGINS",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestLoadSettings:

    def test_defaults(self, clean_env):
        settings = load_settings()

        assert settings.debug is False
        assert settings.success_message == DEFAULT_SUCCESS_MESSAGE
        assert settings.error_message == DEFAULT_ERROR_MESSAGE
        assert settings.mailchimp_api_key is None
        assert settings.enquiries_subject == "Contact form response"
        assert settings.cors_origins == ()

    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", "yes", "on"])
    def test_debug_truthy_values(self, clean_env, raw):
        clean_env.setenv("AJAX_DEBUG", raw)
        assert load_settings().debug is True

    @pytest.mark.parametrize("raw", ["0", "false", "no", "off", ""])
    def test_debug_falsy_values(self, clean_env, raw):
        clean_env.setenv("AJAX_DEBUG", raw)
        assert load_settings().debug is False

    def test_reads_form_settings(self, clean_env):
        clean_env.setenv("ENQUIRIES_FROM", "web@acme.com")
        clean_env.setenv("ENQUIRIES_TO", "team@acme.com")
        clean_env.setenv("ELINK_LIST_ID", "abc123")
        clean_env.setenv("MAILCHIMP_API_KEY", "key-us6")

        settings = load_settings()

        assert settings.enquiries_from == "web@acme.com"
        assert settings.enquiries_to == "team@acme.com"
        assert settings.elink_list_id == "abc123"
        assert settings.mailchimp_api_key == "key-us6"

    def test_cors_origins_list(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", "https://a.org, https://b.org,,")
        assert load_settings().cors_origins == ("https://a.org", "https://b.org")

    def test_bad_timeout_raises(self, clean_env):
        clean_env.setenv("MAILCHIMP_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="MAILCHIMP_TIMEOUT") as exc_info:
            load_settings()
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True

    def test_settings_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().debug = True
