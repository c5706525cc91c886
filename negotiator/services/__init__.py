"""Domain services."""

from negotiator.services.call_session_service import (
    CallResultCommand,
    CallSessionRecord,
    CallSessionService,
    calculate_debt_after,
)
from negotiator.services.email_sender import EmailSender
from negotiator.services.invoice_dispatcher import InvoiceDispatcher
from negotiator.services.invoice_renderer import InvoiceData, InvoiceRenderer, RenderedInvoice
from negotiator.services.negotiation_service import NegotiationResult, negotiate, success_rate
from negotiator.services.user_service import UserService

__all__ = [
    "CallResultCommand",
    "CallSessionRecord",
    "CallSessionService",
    "EmailSender",
    "InvoiceData",
    "InvoiceDispatcher",
    "InvoiceRenderer",
    "NegotiationResult",
    "RenderedInvoice",
    "UserService",
    "calculate_debt_after",
    "negotiate",
    "success_rate",
]
