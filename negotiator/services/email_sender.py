"""SMTP delivery of invoice emails."""

from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from negotiator.core.config import Config
from negotiator.core.exceptions import EmailDeliveryError
from negotiator.services.invoice_renderer import COMPANY, InvoiceData, RenderedInvoice

logger = logging.getLogger(__name__)


def build_invoice_email_html(
    user_name: str,
    amount: float,
    remaining_debt: float,
    is_full_payment: bool,
    invoice_id: str,
    due_days: int,
) -> str:
    if is_full_payment:
        payment_message = "This payment will clear your entire debt. Thank you for settling your account."
    else:
        payment_message = f"After this payment, your remaining debt will be ${remaining_debt:,.2f}."

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Payment Invoice</title>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background-color: #4CAF50; color: white; padding: 20px; text-align: center; }}
    .content {{ padding: 20px; background-color: #f9f9f9; }}
    .amount {{ font-size: 24px; font-weight: bold; color: #4CAF50; }}
    .footer {{ padding: 20px; text-align: center; font-size: 12px; color: #666; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>Payment Invoice {html.escape(invoice_id)}</h1></div>
    <div class="content">
      <p>Dear {html.escape(user_name)},</p>
      <p>Thank you for agreeing to make a payment towards your debt.</p>
      <p>Payment Amount: <span class="amount">${amount:,.2f}</span></p>
      <p>{payment_message}</p>
      <p><strong>Your invoice is attached to this email as a PDF file.</strong>
      Please complete the payment within {due_days} days using the instructions in the invoice.</p>
      <p>Best regards,<br>{COMPANY['name']}<br>Phone: {COMPANY['phone']}<br>Email: {COMPANY['email']}</p>
    </div>
    <div class="footer"><p>This is an automated email. Please do not reply directly to this message.</p></div>
  </div>
</body>
</html>
"""


class EmailSender:
    """Send invoice emails through the configured SMTP relay."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def build_message(self, data: InvoiceData, invoice: RenderedInvoice) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = f"Payment Invoice {invoice.invoice_id} - ${data.amount:,.2f}"
        message["From"] = self.config.SMTP_FROM_EMAIL
        message["To"] = data.user_email
        message["Message-ID"] = make_msgid(domain=self.config.SMTP_FROM_EMAIL.rsplit("@", 1)[-1])

        body = build_invoice_email_html(
            user_name=data.user_name,
            amount=data.amount,
            remaining_debt=data.debt_after,
            is_full_payment=data.is_full_payment,
            invoice_id=invoice.invoice_id,
            due_days=self.config.INVOICE_DUE_DAYS,
        )
        message.set_content(
            f"Dear {data.user_name},\n\nYour invoice {invoice.invoice_id} for ${data.amount:,.2f} is attached.\n"
        )
        message.add_alternative(body, subtype="html")
        message.add_attachment(
            invoice.content,
            maintype="application",
            subtype="pdf",
            filename=invoice.filename,
        )
        return message

    def send_invoice(self, data: InvoiceData, invoice: RenderedInvoice) -> str:
        """Deliver the invoice email and return its Message-ID."""
        try:
            message = self.build_message(data, invoice)
        except (ValueError, TypeError) as exc:
            logger.error(
                "email.build.failed",
                extra={"event": "email.build.failed", "user_id": data.user_id, "error": str(exc)},
            )
            raise EmailDeliveryError(f"Invoice email sending failed: {exc}") from exc
        message_id = message["Message-ID"]

        if self.config.SMTP_SANDBOX_MODE:
            logger.info(
                "email.sandbox.sent",
                extra={
                    "event": "email.sandbox.sent",
                    "to_email": data.user_email,
                    "subject": message["Subject"],
                    "message_id": message_id,
                },
            )
            return message_id

        if not self.config.SMTP_SERVER:
            raise EmailDeliveryError("Invoice email sending failed: SMTP relay is not configured")

        try:
            with smtplib.SMTP(
                self.config.SMTP_SERVER, self.config.SMTP_PORT, timeout=self.config.HTTP_TIMEOUT_SECONDS
            ) as server:
                if self.config.SMTP_USE_TLS:
                    server.starttls()
                if self.config.SMTP_USERNAME and self.config.SMTP_PASSWORD:
                    server.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception(
                "email.send.failed",
                extra={"event": "email.send.failed", "to_email": data.user_email},
            )
            raise EmailDeliveryError(f"Invoice email sending failed: {exc}") from exc

        logger.info(
            "email.sent",
            extra={"event": "email.sent", "to_email": data.user_email, "message_id": message_id},
        )
        return message_id
