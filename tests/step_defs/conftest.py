"""Shared BDD step definitions for all feature files.

Steps live in conftest.py so pytest-bdd can find them from every test module
in this directory. Parametric steps use parsers.parse().
"""
import pytest
from pytest_bdd import given, parsers, then, when

from eventpay.intents import GENERIC_FAILURE_MESSAGE
from tests.fixtures.payloads import make_payment_request
from tests.step_defs.common_steps import _post_payment


@pytest.fixture
def context():
    return {}


# ── Given ──────────────────────────────────────────────────────────────────────

@given(parsers.parse('the processor fails with "{message}"'))
def processor_fails(message, fake_processor):
    fake_processor.error = RuntimeError(message)


# ── When ───────────────────────────────────────────────────────────────────────

@when(parsers.parse("I request a payment intent for {amount:d} cents"))
def request_payment_intent(amount, client, context):
    context["response"] = _post_payment(client, make_payment_request(amount=amount))


# ── Then ───────────────────────────────────────────────────────────────────────

@then(parsers.parse("the response status should be {code:d}"))
def check_status_code(code, context):
    assert context["response"].status_code == code, (
        f"Expected {code}, got {context['response'].status_code}: "
        f"{context['response'].text}"
    )


@then(parsers.parse('the response error should be "{message}"'))
def check_error_message(message, context):
    assert context["response"].json() == {"error": message}


@then("the response error should be the generic failure message")
def check_generic_error(context):
    assert context["response"].json() == {"error": GENERIC_FAILURE_MESSAGE}


@then("the processor should not have been called")
def check_no_processor_call(fake_processor):
    assert fake_processor.calls == [], f"Unexpected calls: {fake_processor.calls}"


@then("the processor should have been called once")
def check_one_processor_call(fake_processor):
    assert len(fake_processor.calls) == 1, f"Calls: {fake_processor.calls}"
