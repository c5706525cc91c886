"""Post-call invoice workflow: render the PDF, then email it."""

from __future__ import annotations

import logging
from typing import Protocol

from negotiator.core.exceptions import EmailDeliveryError, InvoiceRenderError
from negotiator.schemas.integrations import Integrations
from negotiator.services.invoice_renderer import InvoiceData, RenderedInvoice
from negotiator.utils.validators import sanitize_text

logger = logging.getLogger(__name__)

EMAIL_SKIPPED_ERROR = "Invoice unavailable; email not sent"


class Renderer(Protocol):
    def render(self, data: InvoiceData) -> RenderedInvoice: ...


class Sender(Protocol):
    def send_invoice(self, data: InvoiceData, invoice: RenderedInvoice) -> str: ...


class InvoiceDispatcher:
    """Run both sub-steps, recording each outcome instead of raising."""

    def __init__(self, renderer: Renderer, sender: Sender) -> None:
        self.renderer = renderer
        self.sender = sender

    def dispatch(self, data: InvoiceData, integrations: Integrations) -> Integrations:
        try:
            invoice = self.renderer.render(data)
        except InvoiceRenderError as exc:
            logger.error(
                "dispatch.invoice.failed",
                extra={"event": "dispatch.invoice.failed", "user_id": data.user_id, "error": str(exc)},
            )
            integrations.invoice.fail(sanitize_text(str(exc)))
            integrations.email.fail(EMAIL_SKIPPED_ERROR)
            return integrations
        except Exception as exc:
            logger.exception(
                "dispatch.invoice.crashed",
                extra={"event": "dispatch.invoice.crashed", "user_id": data.user_id},
            )
            integrations.invoice.fail(sanitize_text(f"Invoice PDF generation failed: {exc}"))
            integrations.email.fail(EMAIL_SKIPPED_ERROR)
            return integrations

        integrations.invoice.succeed(invoice.invoice_id)

        try:
            message_id = self.sender.send_invoice(data, invoice)
        except EmailDeliveryError as exc:
            logger.error(
                "dispatch.email.failed",
                extra={"event": "dispatch.email.failed", "user_id": data.user_id, "error": str(exc)},
            )
            integrations.email.fail(sanitize_text(str(exc)))
            integrations.email.recipient = data.user_email
            return integrations
        except Exception as exc:
            logger.exception(
                "dispatch.email.crashed",
                extra={"event": "dispatch.email.crashed", "user_id": data.user_id},
            )
            integrations.email.fail(sanitize_text(f"Invoice email sending failed: {exc}"))
            integrations.email.recipient = data.user_email
            return integrations

        integrations.email.succeed(message_id, recipient=data.user_email)
        logger.info(
            "dispatch.completed",
            extra={
                "event": "dispatch.completed",
                "user_id": data.user_id,
                "invoice_id": invoice.invoice_id,
                "message_id": message_id,
            },
        )
        return integrations
