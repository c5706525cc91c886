from __future__ import annotations

from datetime import date

import pytest

from negotiator.core.enums import IntegrationStatus
from negotiator.schemas.integrations import Integrations
from negotiator.services.invoice_dispatcher import EMAIL_SKIPPED_ERROR, InvoiceDispatcher
from negotiator.services.invoice_renderer import InvoiceData


@pytest.fixture
def invoice_data():
    return InvoiceData(
        user_id="user-1",
        user_name="John Doe",
        user_email="john.doe@example.com",
        phone_number="+1234567890",
        amount=150.0,
        debt_before=5000.0,
        debt_after=4850.0,
        invoice_date=date(2026, 10, 18),
        due_date=date(2026, 10, 25),
    )


def test_dispatch_success_fills_both_slots(renderer, sender, invoice_data):
    result = InvoiceDispatcher(renderer, sender).dispatch(invoice_data, Integrations.initial("SESSION-1"))

    assert result.invoice.status == IntegrationStatus.SUCCESS
    assert result.invoice.external_id == "INV-TEST-1"
    assert result.email.status == IntegrationStatus.SUCCESS
    assert result.email.external_id == "<msg-test-1@example.com>"
    assert result.email.recipient == "john.doe@example.com"
    assert result.crm.external_id == "SESSION-1"


def test_render_failure_fails_invoice_and_skips_email(renderer, sender, invoice_data):
    renderer.error = "Invoice PDF generation failed: timeout"

    result = InvoiceDispatcher(renderer, sender).dispatch(invoice_data, Integrations.initial("SESSION-1"))

    assert result.invoice.status == IntegrationStatus.FAILED
    assert result.invoice.error == "Invoice PDF generation failed: timeout"
    assert result.email.status == IntegrationStatus.FAILED
    assert result.email.error == EMAIL_SKIPPED_ERROR
    assert sender.calls == []


def test_send_failure_keeps_invoice_success(renderer, sender, invoice_data):
    sender.error = "Invoice email sending failed: relay refused"

    result = InvoiceDispatcher(renderer, sender).dispatch(invoice_data, Integrations.initial("SESSION-1"))

    assert result.invoice.status == IntegrationStatus.SUCCESS
    assert result.email.status == IntegrationStatus.FAILED
    assert result.email.error == "Invoice email sending failed: relay refused"
    assert result.email.recipient == "john.doe@example.com"


class _CrashingRenderer:
    def render(self, data):
        raise RuntimeError("layout overflow")


class _CrashingSender:
    def send_invoice(self, data, invoice):
        raise ValueError("Header values may not contain linefeed or carriage return characters")


def test_unexpected_render_error_is_recorded_not_raised(sender, invoice_data):
    result = InvoiceDispatcher(_CrashingRenderer(), sender).dispatch(invoice_data, Integrations.initial("SESSION-1"))

    assert result.invoice.status == IntegrationStatus.FAILED
    assert "layout overflow" in result.invoice.error
    assert result.email.status == IntegrationStatus.FAILED
    assert result.email.error == EMAIL_SKIPPED_ERROR
    assert sender.calls == []


def test_unexpected_send_error_is_recorded_not_raised(renderer, invoice_data):
    result = InvoiceDispatcher(renderer, _CrashingSender()).dispatch(invoice_data, Integrations.initial("SESSION-1"))

    assert result.invoice.status == IntegrationStatus.SUCCESS
    assert result.email.status == IntegrationStatus.FAILED
    assert "linefeed" in result.email.error
    assert result.email.recipient == "john.doe@example.com"
