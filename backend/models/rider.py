from typing import Optional
from models.common import CamelModel, RiderStatus


class RiderCreate(CamelModel):
    name:              Optional[str] = None
    email:             str
    phone:             Optional[str] = None
    age:               Optional[int] = None
    region:            Optional[str] = None
    district:          Optional[str] = None
    nid:               Optional[str] = None
    bike_registration: Optional[str] = None


class RiderReview(CamelModel):
    status: RiderStatus
    email:  Optional[str] = None   # compte utilisateur à promouvoir si approuvé
