"""Dependency providers for API handlers.

Configuration and the session factory live on ``app.state`` (set by
``create_app``), so every provider below builds its component from explicit
objects rather than process-wide globals.
"""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from negotiator.core.config import Config
from negotiator.services.call_session_service import CallSessionService
from negotiator.services.email_sender import EmailSender
from negotiator.services.invoice_dispatcher import InvoiceDispatcher
from negotiator.services.invoice_renderer import InvoiceRenderer
from negotiator.services.user_service import UserService


def get_settings(request: Request) -> Config:
    """Return the configuration the application was created with."""
    return request.app.state.config


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """Yield a request-scoped SQLAlchemy session from the pool."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_user_service(db: Session = Depends(get_db_session)) -> UserService:
    return UserService(db)


def get_invoice_dispatcher(settings: Config = Depends(get_settings)) -> InvoiceDispatcher:
    return InvoiceDispatcher(renderer=InvoiceRenderer(settings), sender=EmailSender(settings))


def get_call_session_service(
    db: Session = Depends(get_db_session),
    dispatcher: InvoiceDispatcher = Depends(get_invoice_dispatcher),
    settings: Config = Depends(get_settings),
) -> CallSessionService:
    return CallSessionService(db, dispatcher=dispatcher, invoice_due_days=settings.INVOICE_DUE_DAYS)
