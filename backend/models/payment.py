from typing import Optional, Dict
from pydantic import BaseModel, Field
from models.common import CamelModel


class CheckoutRequest(CamelModel):
    cost:         float = Field(gt=0)
    parcel_id:    str
    parcel_name:  Optional[str] = None
    sender_email: str


class CheckoutResponse(BaseModel):
    url: str


class CheckoutSession(BaseModel):
    """Sous-ensemble d'une Checkout Session Stripe (noms Stripe, snake_case)."""
    id:             str
    url:            Optional[str] = None
    payment_intent: Optional[str] = None
    payment_status: str = "unpaid"        # "paid", "unpaid", "no_payment_required"
    amount_total:   Optional[int] = None  # en centimes
    currency:       Optional[str] = None
    customer_email: Optional[str] = None
    metadata:       Dict[str, str] = {}
