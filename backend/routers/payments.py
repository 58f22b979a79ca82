"""
Router payments : session Stripe Checkout, confirmation après redirection, historique.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from config import settings
from core.dependencies import get_current_email, get_payment_gateway, get_store
from core.exceptions import bad_gateway_exception, forbidden_exception, not_found_exception
from core.limiter import limiter
from core.utils import serialize_docs
from database import Store
from models.payment import CheckoutRequest, CheckoutResponse
from services import payment_service
from services.payment_service import PaymentGatewayError, StripeCheckout

router = APIRouter()


@router.post("/payment-checkout-session", response_model=CheckoutResponse, summary="Créer une session de paiement")
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)
async def create_checkout_session(
    request: Request,
    body: CheckoutRequest,
    store: Store = Depends(get_store),
    gateway: StripeCheckout = Depends(get_payment_gateway),
):
    try:
        url = await payment_service.create_checkout(store, gateway, body)
    except PaymentGatewayError as e:
        raise bad_gateway_exception(str(e))
    return {"url": url}


@router.patch("/payment-success", summary="Confirmer un paiement (session_id Stripe)")
async def payment_success(
    session_id: str = Query(..., min_length=1),
    store: Store = Depends(get_store),
    gateway: StripeCheckout = Depends(get_payment_gateway),
):
    try:
        return await payment_service.confirm_payment(store, gateway, session_id)
    except PaymentGatewayError as e:
        if e.not_found:
            raise not_found_exception("Stripe session")
        raise bad_gateway_exception(str(e))


@router.get("/payments", summary="Historique des paiements")
async def list_payments(
    email: Optional[str] = None,
    current_email: str = Depends(get_current_email),
    store: Store = Depends(get_store),
):
    if email and email != current_email:
        raise forbidden_exception()
    payments = await payment_service.list_payments(store, email)
    return serialize_docs(payments)
