from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from negotiator.auth.jwt import create_service_token
from negotiator.core.config import get_config
from negotiator.core.dependencies import get_invoice_dispatcher
from negotiator.core.exceptions import EmailDeliveryError, InvoiceRenderError
from negotiator.core.security import hash_api_key
from negotiator.main import create_app
from negotiator.models import ApiCredential, Base, User
from negotiator.services.invoice_dispatcher import InvoiceDispatcher
from negotiator.services.invoice_renderer import RenderedInvoice

TEST_JWT_SECRET = "test-m2m-secret"
TEST_VAPI_SECRET = "test-vapi-secret"
ADMIN_KEY = "test_admin_key_000001"
AGENT_KEY = "test_agent_key_000002"


class FakeRenderer:
    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.calls = []

    def render(self, data):
        self.calls.append(data)
        if self.error:
            raise InvoiceRenderError(self.error)
        return RenderedInvoice(invoice_id="INV-TEST-1", filename="INV-TEST-1.pdf", content_base64="JVBERi0=")


class FakeSender:
    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.calls = []

    def send_invoice(self, data, invoice):
        self.calls.append((data, invoice))
        if self.error:
            raise EmailDeliveryError(self.error)
        return "<msg-test-1@example.com>"


@pytest.fixture
def test_config():
    return replace(
        get_config("test"),
        DATABASE_URL="sqlite://",
        DB_CONNECTIVITY_REQUIRED=False,
        JWT_M2M_SECRET=TEST_JWT_SECRET,
        VAPI_WEBHOOK_SECRET=TEST_VAPI_SECRET,
        INVOICE_RENDER_API_KEY=None,
        INVOICE_TEMPLATE_ID=None,
        SMTP_SANDBOX_MODE=True,
        CORS_ORIGINS=("*",),
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    def _make_user(phone_number="+1234567890", name="John Doe", email="john.doe@example.com", debt=5000.0):
        user = User(
            phone_number=phone_number,
            name=name,
            email=email,
            total_debt=debt,
            remaining_debt=debt,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def dispatcher(renderer, sender):
    return InvoiceDispatcher(renderer=renderer, sender=sender)


@pytest.fixture
def app(test_config, session_factory, dispatcher):
    application = create_app(test_config, session_factory)
    application.dependency_overrides[get_invoice_dispatcher] = lambda: dispatcher
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_keys(db_session):
    db_session.add_all(
        [
            ApiCredential(
                name="Test Admin",
                key_hash=hash_api_key(ADMIN_KEY, rounds=4),
                scopes=["userinfo", "negotiation", "call_result", "admin"],
            ),
            ApiCredential(
                name="Test Agent",
                key_hash=hash_api_key(AGENT_KEY, rounds=4),
                scopes=["userinfo", "negotiation", "call_result"],
            ),
        ]
    )
    db_session.commit()
    return {"admin": ADMIN_KEY, "agent": AGENT_KEY}


@pytest.fixture
def agent_headers(api_keys):
    return {"X-API-Key": api_keys["agent"]}


@pytest.fixture
def admin_headers(api_keys):
    return {"X-API-Key": api_keys["admin"]}


@pytest.fixture
def bearer_headers():
    token = create_service_token("voice-agent", secret=TEST_JWT_SECRET, ttl_hours=1)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def vapi_headers():
    return {"X-VAPI-Signature": TEST_VAPI_SECRET}


@pytest.fixture
def envelope():
    def _envelope(parameters: dict, name: str | None = None) -> dict:
        function_call = {"parameters": parameters}
        if name is not None:
            function_call["name"] = name
        return {"message": {"functionCall": function_call}}

    return _envelope
