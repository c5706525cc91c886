from __future__ import annotations

import smtplib
from dataclasses import replace
from datetime import date

import pytest

import negotiator.services.email_sender as email_module
from negotiator.core.exceptions import EmailDeliveryError
from negotiator.services.email_sender import EmailSender
from negotiator.services.invoice_renderer import InvoiceData, RenderedInvoice


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


@pytest.fixture
def invoice():
    return RenderedInvoice(invoice_id="INV-1", filename="INV-1.pdf", content_base64="JVBERi0xLjQ=")


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []
    fail_with: Exception | None = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.sent = []
        self.tls = False
        self.login_args = None
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, username, password):
        self.login_args = (username, password)

    def send_message(self, message):
        if _FakeSMTP.fail_with is not None:
            raise _FakeSMTP.fail_with
        self.sent.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    _FakeSMTP.instances = []
    _FakeSMTP.fail_with = None
    monkeypatch.setattr(email_module.smtplib, "SMTP", _FakeSMTP)
    return _FakeSMTP


def test_message_carries_pdf_attachment(test_config, invoice_data, invoice):
    message = EmailSender(test_config).build_message(invoice_data, invoice)

    assert message["To"] == "john.doe@example.com"
    assert "INV-1" in message["Subject"]
    attachments = list(message.iter_attachments())
    assert len(attachments) == 1
    assert attachments[0].get_filename() == "INV-1.pdf"
    assert attachments[0].get_content() == b"%PDF-1.4"


def test_sandbox_mode_does_not_open_connection(test_config, invoice_data, invoice, fake_smtp):
    message_id = EmailSender(test_config).send_invoice(invoice_data, invoice)
    assert message_id.startswith("<")
    assert fake_smtp.instances == []


def test_smtp_delivery(test_config, invoice_data, invoice, fake_smtp):
    config = replace(
        test_config,
        SMTP_SANDBOX_MODE=False,
        SMTP_SERVER="smtp.example.com",
        SMTP_USERNAME="mailer",
        SMTP_PASSWORD="secret",
    )
    EmailSender(config).send_invoice(invoice_data, invoice)

    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.tls
    assert server.login_args == ("mailer", "secret")
    assert len(server.sent) == 1


def test_smtp_failure_becomes_delivery_error(test_config, invoice_data, invoice, fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPRecipientsRefused({"john.doe@example.com": (550, b"rejected")})
    config = replace(test_config, SMTP_SANDBOX_MODE=False, SMTP_SERVER="smtp.example.com")

    with pytest.raises(EmailDeliveryError, match="Invoice email sending failed"):
        EmailSender(config).send_invoice(invoice_data, invoice)


def test_missing_relay_outside_sandbox_fails(test_config, invoice_data, invoice):
    config = replace(test_config, SMTP_SANDBOX_MODE=False, SMTP_SERVER=None)
    with pytest.raises(EmailDeliveryError):
        EmailSender(config).send_invoice(invoice_data, invoice)


def test_header_injection_in_recipient_becomes_delivery_error(test_config, invoice_data, invoice, fake_smtp):
    tampered = replace(invoice_data, user_email="john.doe@example.com\r\nBcc: x@y.z")

    with pytest.raises(EmailDeliveryError, match="Invoice email sending failed"):
        EmailSender(test_config).send_invoice(tampered, invoice)
    assert fake_smtp.instances == []
