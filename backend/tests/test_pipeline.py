"""
Submission pipeline tests: validation, then subscribe, then email, stopping at
the first failure. Outbound clients are mocks.
"""

from unittest.mock import Mock

import pytest

from app.config import Settings
from app.models.submission import (
    EmailConfig,
    MailingListConfig,
    SubmissionSpec,
    ValidationStep,
)
from app.services.fields import BASE_FIELDS
from app.services.mailchimp import MailingListError
from app.services.mailer import MailTransportError
from app.services.pipeline import build_steps, run_pipeline
from app.services.side_effects import EmailNotify, MailingListSubscribe

NP = frozenset({ValidationStep.NOT_PROVIDED})
NP_INV = frozenset({ValidationStep.NOT_PROVIDED, ValidationStep.INVALID})

VALID_INPUT = {"first": "Jo", "email": "jo@acme.com"}


def _make_spec(subscribe: bool = True, email: bool = True) -> SubmissionSpec:
    return SubmissionSpec(
        action="test",
        fields=BASE_FIELDS.as_dict(),
        validation={"first": NP, "email": NP_INV},
        mailing_list=MailingListConfig(list_id="list-1") if subscribe else None,
        email=(
            EmailConfig(sender="web@acme.com", recipient="team@acme.com", subject="s")
            if email
            else None
        ),
    )


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def debug_settings():
    return Settings(debug=True)


@pytest.fixture()
def mailing_list():
    client = Mock()
    client.subscribe.return_value = {"email": "jo@acme.com"}
    return client


@pytest.fixture()
def mailer():
    return Mock()


# ---------------------------------------------------------------------------
# build_steps
# ---------------------------------------------------------------------------

class TestBuildSteps:

    def test_subscribe_runs_before_email(self):
        steps = build_steps(_make_spec())
        assert [type(s) for s in steps] == [MailingListSubscribe, EmailNotify]

    def test_steps_are_skipped_when_not_configured(self):
        assert build_steps(_make_spec(subscribe=False, email=False)) == []
        assert [s.name for s in build_steps(_make_spec(subscribe=False))] == ["email"]
        assert [s.name for s in build_steps(_make_spec(email=False))] == ["mailchimp"]

    def test_steps_share_the_step_interface(self):
        for step in build_steps(_make_spec()):
            assert isinstance(step.name, str)
            assert callable(step.apply)


# ---------------------------------------------------------------------------
# run_pipeline
# ---------------------------------------------------------------------------

class TestRunPipeline:

    def test_success_runs_all_steps(self, settings, mailing_list, mailer):
        response = run_pipeline(_make_spec(), VALID_INPUT, settings, mailing_list, mailer)

        assert response.is_error is False
        assert response.messages == ["Submission successful."]
        assert response.data == {}
        mailing_list.subscribe.assert_called_once()
        mailer.send.assert_called_once()

    def test_custom_success_message(self, mailing_list, mailer):
        settings = Settings(success_message="Thanks!")
        response = run_pipeline(_make_spec(), VALID_INPUT, settings, mailing_list, mailer)

        assert response.messages == ["Thanks!"]

    def test_validation_failure_runs_no_side_effect(self, settings, mailing_list, mailer):
        response = run_pipeline(
            _make_spec(), {"first": "", "email": "jo@acme.com"}, settings, mailing_list, mailer
        )

        assert response.is_error is True
        assert response.messages == ["Please enter your first name."]
        assert mailing_list.subscribe.call_count == 0
        assert mailer.send.call_count == 0

    def test_subscribe_failure_skips_email(self, settings, mailing_list, mailer):
        mailing_list.subscribe.side_effect = MailingListError("boom")

        response = run_pipeline(_make_spec(), VALID_INPUT, settings, mailing_list, mailer)

        assert response.is_error is True
        assert mailer.send.call_count == 0

    def test_side_effect_failure_is_silent_outside_debug(self, settings, mailing_list, mailer):
        mailer.send.side_effect = MailTransportError("503")

        response = run_pipeline(_make_spec(), VALID_INPUT, settings, mailing_list, mailer)

        assert response.is_error is True
        assert response.messages == []
        assert response.data == {}

    def test_email_failure_after_subscribe_is_not_rolled_back(
        self, settings, mailing_list, mailer
    ):
        mailer.send.side_effect = MailTransportError("503")

        response = run_pipeline(_make_spec(), VALID_INPUT, settings, mailing_list, mailer)

        assert response.is_error is True
        mailing_list.subscribe.assert_called_once()

    def test_spec_without_side_effects_succeeds_after_validation(self, settings):
        response = run_pipeline(
            _make_spec(subscribe=False, email=False), VALID_INPUT, settings
        )

        assert response.is_error is False
        assert response.messages == ["Submission successful."]


class TestRunPipelineDebug:

    def test_values_are_attached(self, debug_settings, mailing_list, mailer):
        response = run_pipeline(
            _make_spec(), {"first": "<b>Jo</b>", "email": "jo@acme.com"},
            debug_settings, mailing_list, mailer,
        )

        assert response.data["values"] == {"first": "Jo", "email": "jo@acme.com"}
        assert response.data["mailchimp"]["merge_vars"] == {
            "FIRST": "Jo",
            "EMAIL": "jo@acme.com",
        }
        assert response.data["email"]["to"] == "team@acme.com"

    def test_values_attached_on_validation_failure(self, debug_settings):
        response = run_pipeline(_make_spec(), {"first": "Jo"}, debug_settings)

        assert response.is_error is True
        assert response.data == {"values": {"first": "Jo"}}

    def test_subscribe_failure_message(self, debug_settings, mailing_list, mailer):
        mailing_list.subscribe.side_effect = MailingListError("boom")

        response = run_pipeline(
            _make_spec(), VALID_INPUT, debug_settings, mailing_list, mailer
        )

        assert response.messages == ["Error while subscribing to the mailing list."]
        assert "email" not in response.data

    def test_email_failure_message(self, debug_settings, mailing_list, mailer):
        mailer.send.side_effect = MailTransportError("503")

        response = run_pipeline(
            _make_spec(), VALID_INPUT, debug_settings, mailing_list, mailer
        )

        assert response.messages == ["Error while sending the email."]
