"""
Configuration des tests : Store sur mongomock, faux vérificateur Firebase,
fausse passerelle Stripe, client HTTP ASGI.
"""
import itertools

import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from core.dependencies import get_payment_gateway, get_store, get_token_verifier
from core.exceptions import credentials_exception
from core.limiter import limiter
from database import Store
from main import app
from models.payment import CheckoutSession
from services.payment_service import PaymentGatewayError

ADMIN_EMAIL = "admin@zapshift.test"
USER_EMAIL = "user@zapshift.test"
RIDER_EMAIL = "rider@zapshift.test"

TOKENS = {
    "admin-token": ADMIN_EMAIL,
    "user-token": USER_EMAIL,
    "rider-token": RIDER_EMAIL,
}


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class FakeTokenVerifier:
    async def verify(self, id_token: str) -> dict:
        if id_token not in TOKENS:
            raise credentials_exception()
        return {"email": TOKENS[id_token], "uid": id_token}


class FakeCheckout:
    """Passerelle en mémoire : sessions créées puis marquées payées par les tests."""

    def __init__(self):
        self.sessions: dict[str, CheckoutSession] = {}
        self.created: list[dict] = []
        self._ids = itertools.count(1)

    async def create_session(self, amount_cents, currency, product_name, customer_email,
                             metadata, success_url, cancel_url) -> CheckoutSession:
        session_id = f"cs_test_{next(self._ids)}"
        self.created.append({
            "amount_cents": amount_cents,
            "currency": currency,
            "product_name": product_name,
            "customer_email": customer_email,
            "metadata": metadata,
            "success_url": success_url,
            "cancel_url": cancel_url,
        })
        session = CheckoutSession(
            id=session_id,
            url=f"https://checkout.stripe.test/{session_id}",
            amount_total=amount_cents,
            currency=currency,
            customer_email=customer_email,
            metadata=metadata,
        )
        self.sessions[session_id] = session
        return session

    def mark_paid(self, session_id: str, payment_intent: str) -> None:
        session = self.sessions[session_id]
        self.sessions[session_id] = session.model_copy(
            update={"payment_status": "paid", "payment_intent": payment_intent}
        )

    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        if session_id not in self.sessions:
            raise PaymentGatewayError("Stripe session not found", not_found=True)
        return self.sessions[session_id]


@pytest.fixture
def store():
    return Store(AsyncMongoMockClient()["zapshift_test"])


@pytest.fixture
def gateway():
    return FakeCheckout()


@pytest.fixture
async def client(store, gateway):
    limiter.enabled = False
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_token_verifier] = lambda: FakeTokenVerifier()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


@pytest.fixture
async def seeded_users(store):
    """Un admin, un utilisateur et un livreur déjà inscrits."""
    ids = {}
    for email, role in ((ADMIN_EMAIL, "admin"), (USER_EMAIL, "user"), (RIDER_EMAIL, "rider")):
        result = await store.users.insert_one({"email": email, "displayName": role.title(), "role": role})
        ids[role] = str(result.inserted_id)
    return ids


@pytest.fixture
async def rider(store):
    """Livreur approuvé et disponible."""
    result = await store.riders.insert_one({
        "name": "Rider R",
        "email": RIDER_EMAIL,
        "district": "Dhaka",
        "status": "approved",
        "workStatus": "available",
    })
    return str(result.inserted_id)


PARCEL_BODY = {
    "parcelName": "Books",
    "parcelType": "non-document",
    "parcelWeight": 2,
    "senderName": "Sender",
    "senderEmail": USER_EMAIL,
    "senderDistrict": "Dhaka",
    "receiverName": "Receiver",
    "receiverPhone": "+8801700000000",
    "receiverDistrict": "Chattogram",
    "cost": 50,
}
