from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    USER  = "user"
    RIDER = "rider"
    ADMIN = "admin"


class DeliveryStatus(str, Enum):
    CREATED          = "created"
    PENDING_PICKUP   = "pending-pickup"    # posé par la confirmation de paiement
    DRIVER_ASSIGNED  = "driver_assigned"
    RIDER_ARRIVING   = "rider_arriving"
    PARCEL_PICKED_UP = "parcel_picked_up"
    PARCEL_DELIVERED = "parcel_delivered"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID   = "paid"


class RiderStatus(str, Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WorkStatus(str, Enum):
    PENDING     = "pending"
    AVAILABLE   = "available"
    IN_DELIVERY = "in_delivery"


class CamelModel(BaseModel):
    """Corps JSON en camelCase (format des clients), attributs Python en snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
