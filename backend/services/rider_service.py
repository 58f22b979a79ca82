"""
Service livreurs : candidatures, validation admin, statistiques de livraison.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from core.exceptions import not_found_exception
from core.utils import to_object_id
from database import Store
from models.common import DeliveryStatus, RiderStatus, UserRole, WorkStatus
from models.rider import RiderCreate, RiderReview

logger = logging.getLogger(__name__)


async def create_rider(store: Store, data: RiderCreate) -> dict:
    rider_doc = data.model_dump(by_alias=True, exclude_none=True)
    rider_doc.update({
        "status":     RiderStatus.PENDING.value,
        "workStatus": WorkStatus.PENDING.value,
        "createdAt":  datetime.now(timezone.utc),
    })
    result = await store.riders.insert_one(rider_doc)
    logger.info(f"Candidature livreur {data.email} enregistrée")
    return {"insertedId": str(result.inserted_id)}


async def list_riders(
    store: Store,
    status: Optional[str] = None,
    district: Optional[str] = None,
    work_status: Optional[str] = None,
) -> list:
    query: dict = {}
    if status:
        query["status"] = status
    if district:
        query["district"] = district
    if work_status:
        query["workStatus"] = work_status
    cursor = store.riders.find(query, sort=[("createdAt", -1)])
    return await cursor.to_list(length=None)


async def review_rider(store: Store, rider_id: str, data: RiderReview) -> dict:
    """
    Décision admin sur une candidature.
    Approuvé → disponible + rôle 'rider' pour le compte utilisateur associé.
    """
    approved = data.status == RiderStatus.APPROVED
    result = await store.riders.update_one(
        {"_id": to_object_id(rider_id, "rider id")},
        {"$set": {
            "status":     data.status.value,
            "workStatus": WorkStatus.AVAILABLE.value if approved else WorkStatus.PENDING.value,
            "updatedAt":  datetime.now(timezone.utc),
        }},
    )
    if result.matched_count == 0:
        raise not_found_exception("Rider")

    if approved and data.email:
        await store.users.update_one(
            {"email": data.email},
            {"$set": {"role": UserRole.RIDER.value}},
        )
        logger.info(f"Utilisateur {data.email} promu livreur")

    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


async def deliveries_per_day(store: Store, rider_email: str) -> list:
    """Livraisons par jour d'un livreur, datées par l'entrée parcel_delivered du journal."""
    delivered = DeliveryStatus.PARCEL_DELIVERED.value
    pipeline = [
        {"$match": {"riderEmail": rider_email, "deliveryStatus": delivered}},
        {"$lookup": {
            "from":         "trackings",
            "localField":   "trackingId",
            "foreignField": "trackingId",
            "as":           "parcel_trackings",
        }},
        {"$unwind": "$parcel_trackings"},
        {"$match": {"parcel_trackings.status": delivered}},
        {"$addFields": {
            "deliveryDay": {
                "$dateToString": {"format": "%Y-%m-%d", "date": "$parcel_trackings.createdAt"},
            },
        }},
        {"$group": {"_id": "$deliveryDay", "deliveredCount": {"$sum": 1}}},
        {"$project": {"_id": 0, "date": "$_id", "deliveredCount": 1}},
        {"$sort": {"date": 1}},
    ]
    return await store.parcels.aggregate(pipeline).to_list(length=None)
