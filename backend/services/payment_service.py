"""
Service paiement : intégration Stripe Checkout (sessions hébergées).
Docs : https://docs.stripe.com/api/checkout/sessions
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from pymongo.errors import DuplicateKeyError

from config import settings
from core.exceptions import not_found_exception
from core.utils import to_object_id
from database import Store
from models.common import DeliveryStatus, PaymentStatus
from models.payment import CheckoutRequest, CheckoutSession
from services.tracking_service import log_tracking

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    def __init__(self, message: str, not_found: bool = False):
        super().__init__(message)
        self.not_found = not_found


class StripeCheckout:
    """Client minimal de l'API Stripe Checkout."""

    def __init__(
        self,
        secret_key: Optional[str],
        base_url: str = settings.STRIPE_API_BASE,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict:
        if not self.secret_key:
            logger.warning("Stripe non configuré (STRIPE_SECRET absent)")
            raise PaymentGatewayError("Payment provider not configured")
        return {"Authorization": f"Bearer {self.secret_key}"}

    async def create_session(
        self,
        amount_cents: int,
        currency: str,
        product_name: str,
        customer_email: str,
        metadata: dict,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        form = {
            "mode": "payment",
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": currency,
            "line_items[0][price_data][unit_amount]": str(amount_cents),
            "line_items[0][price_data][product_data][name]": product_name,
            "customer_email": customer_email,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = value

        data = await self._request("POST", "/checkout/sessions", data=form)
        return CheckoutSession(**data)

    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        data = await self._request("GET", f"/checkout/sessions/{session_id}")
        return CheckoutSession(**data)

    async def _request(self, method: str, path: str, data: Optional[dict] = None) -> dict:
        headers = self._headers()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(method, f"{self.base_url}{path}", data=data, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Erreur réseau Stripe : {e}")
            raise PaymentGatewayError(str(e))

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if resp.status_code == 404:
            raise PaymentGatewayError("Stripe session not found", not_found=True)
        if resp.is_error:
            message = (payload.get("error") or {}).get("message", "Stripe error")
            logger.error(f"Stripe erreur {resp.status_code} : {message}")
            raise PaymentGatewayError(message)
        return payload


async def create_checkout(store: Store, gateway: StripeCheckout, data: CheckoutRequest) -> str:
    """
    Crée une session Checkout pour un colis.
    Le trackingId du colis est passé en metadata pour la confirmation.
    """
    parcel = await store.parcels.find_one({"_id": to_object_id(data.parcel_id, "parcel id")})
    if not parcel:
        raise not_found_exception("Parcel")
    tracking_id = parcel.get("trackingId", "")
    parcel_name = data.parcel_name or "parcel"

    session = await gateway.create_session(
        amount_cents=round(data.cost * 100),
        currency=settings.CHECKOUT_CURRENCY,
        product_name=f"Please pay for: {parcel_name}",
        customer_email=data.sender_email,
        metadata={
            "parcelId":   data.parcel_id,
            "parcelName": data.parcel_name or "",
            "trackingId": tracking_id,
        },
        success_url=f"{settings.SITE_DOMAIN}/dashboard/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{settings.SITE_DOMAIN}/dashboard/payment-cancelled",
    )
    logger.info(f"Session Checkout {session.id} créée pour le colis {data.parcel_id}")
    return session.url


async def confirm_payment(store: Store, gateway: StripeCheckout, session_id: str) -> dict:
    """
    Applique une session payée : colis → paid / pending-pickup, reçu de paiement,
    entrée parcel_paid. Idempotent sur transactionId (payment_intent Stripe).
    """
    session = await gateway.retrieve_session(session_id)
    transaction_id = session.payment_intent
    tracking_id = session.metadata.get("trackingId")

    if transaction_id:
        existing = await store.payments.find_one({"transactionId": transaction_id})
        if existing:
            return {
                "message":       "already exists",
                "transactionId": transaction_id,
                "trackingId":    existing.get("trackingId"),
            }

    if session.payment_status != PaymentStatus.PAID.value or not transaction_id:
        logger.info(f"Session {session_id} non payée ({session.payment_status})")
        return {"success": False}

    now = datetime.now(timezone.utc)
    parcel_id = session.metadata.get("parcelId")
    if parcel_id:
        await store.parcels.update_one(
            {"_id": to_object_id(parcel_id, "parcel id")},
            {"$set": {
                "paymentStatus":  PaymentStatus.PAID.value,
                "deliveryStatus": DeliveryStatus.PENDING_PICKUP.value,
                "updatedAt":      now,
            }},
        )

    payment = {
        "amount":        (session.amount_total or 0) / 100,
        "currency":      session.currency,
        "customerEmail": session.customer_email,
        "parcelId":      parcel_id,
        "parcelName":    session.metadata.get("parcelName"),
        "transactionId": transaction_id,
        "paymentStatus": session.payment_status,
        "paidAt":        now,
        "trackingId":    tracking_id,
    }
    try:
        result = await store.payments.insert_one(payment)
    except DuplicateKeyError:
        # Confirmation concurrente déjà enregistrée
        return {"message": "already exists", "transactionId": transaction_id, "trackingId": tracking_id}

    if tracking_id:
        await log_tracking(store, tracking_id, "parcel_paid")
    logger.info(f"Paiement confirmé {transaction_id} pour le colis {parcel_id}")

    return {
        "success":       True,
        "trackingId":    tracking_id,
        "transactionId": transaction_id,
        "paymentInfo":   {"insertedId": str(result.inserted_id)},
    }


async def list_payments(store: Store, customer_email: Optional[str] = None) -> list:
    query = {"customerEmail": customer_email} if customer_email else {}
    cursor = store.payments.find(query, sort=[("paidAt", -1)])
    return await cursor.to_list(length=None)
