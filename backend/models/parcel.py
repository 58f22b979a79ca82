from typing import Optional
from pydantic import Field
from models.common import CamelModel, DeliveryStatus


class ParcelCreate(CamelModel):
    parcel_name:          str
    parcel_type:          Optional[str]   = None    # "document" | "non-document"
    parcel_weight:        Optional[float] = None    # kg
    # Expéditeur
    sender_name:          Optional[str] = None
    sender_email:         str
    sender_phone:         Optional[str] = None
    sender_region:        Optional[str] = None
    sender_district:      Optional[str] = None
    sender_address:       Optional[str] = None
    # Destinataire
    receiver_name:        Optional[str] = None
    receiver_email:       Optional[str] = None
    receiver_phone:       Optional[str] = None
    receiver_region:      Optional[str] = None
    receiver_district:    Optional[str] = None
    receiver_address:     Optional[str] = None
    # Instructions
    pickup_instruction:   Optional[str] = None
    delivery_instruction: Optional[str] = None
    cost:                 float = Field(ge=0)


class RiderAssignment(CamelModel):
    rider_id:    str
    rider_name:  Optional[str] = None
    rider_email: Optional[str] = None
    tracking_id: Optional[str] = None   # sinon repris du colis


class StatusUpdate(CamelModel):
    delivery_status: DeliveryStatus
    rider_id:        Optional[str] = None   # requis pour libérer le livreur à la livraison
    tracking_id:     Optional[str] = None


class DeliveryStat(CamelModel):
    status: Optional[str] = None
    count:  int
