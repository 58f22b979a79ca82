"""
Service colis : création, assignation livreur, changements de statut.

Chaque opération enchaîne 2 à 3 écritures indépendantes (colis, livreur,
journal de suivi) sans transaction : une erreur entre deux écritures laisse
les collections partiellement à jour.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId

from core.exceptions import bad_request_exception, not_found_exception
from core.security import generate_tracking_id
from core.utils import to_object_id
from database import Store
from models.common import DeliveryStatus, PaymentStatus, WorkStatus
from models.parcel import ParcelCreate, RiderAssignment, StatusUpdate
from services.tracking_service import log_tracking

logger = logging.getLogger(__name__)


async def _find_parcel(store: Store, parcel_oid: ObjectId) -> dict:
    parcel = await store.parcels.find_one({"_id": parcel_oid})
    if not parcel:
        raise not_found_exception("Parcel")
    return parcel


async def create_parcel(store: Store, data: ParcelCreate) -> dict:
    """Crée un colis avec son trackingId et ouvre son journal de suivi."""
    now = datetime.now(timezone.utc)
    tracking_id = generate_tracking_id()

    parcel_doc = data.model_dump(by_alias=True, exclude_none=True)
    parcel_doc.update({
        "deliveryStatus": DeliveryStatus.CREATED.value,
        "paymentStatus":  PaymentStatus.UNPAID.value,
        "trackingId":     tracking_id,
        "createdAt":      now,
    })

    await log_tracking(store, tracking_id, "parcel_created")
    result = await store.parcels.insert_one(parcel_doc)
    logger.info(f"Colis créé {result.inserted_id} ({tracking_id})")
    return {"insertedId": str(result.inserted_id), "trackingId": tracking_id}


async def assign_rider(store: Store, parcel_id: str, data: RiderAssignment) -> dict:
    """Assigne un livreur : colis → driver_assigned, livreur → in_delivery."""
    parcel_oid = to_object_id(parcel_id, "parcel id")
    rider_oid = to_object_id(data.rider_id, "rider id")
    parcel = await _find_parcel(store, parcel_oid)

    now = datetime.now(timezone.utc)
    parcel_result = await store.parcels.update_one(
        {"_id": parcel_oid},
        {"$set": {
            "deliveryStatus": DeliveryStatus.DRIVER_ASSIGNED.value,
            "riderId":        data.rider_id,
            "riderName":      data.rider_name,
            "riderEmail":     data.rider_email,
            "updatedAt":      now,
        }},
    )

    rider_result = await store.riders.update_one(
        {"_id": rider_oid},
        {"$set": {"workStatus": WorkStatus.IN_DELIVERY.value, "updatedAt": now}},
    )
    if rider_result.matched_count == 0:
        logger.warning(f"Livreur {data.rider_id} introuvable lors de l'assignation du colis {parcel_id}")

    tracking_id = data.tracking_id or parcel.get("trackingId")
    await log_tracking(store, tracking_id, DeliveryStatus.DRIVER_ASSIGNED.value)

    return {
        "parcelModified": parcel_result.modified_count,
        "matchedCount":   rider_result.matched_count,
        "modifiedCount":  rider_result.modified_count,
    }


async def change_status(store: Store, parcel_id: str, data: StatusUpdate) -> dict:
    """
    Met à jour deliveryStatus. À la livraison, le livreur redevient disponible.
    Aucune validation de transition.
    """
    parcel_oid = to_object_id(parcel_id, "parcel id")
    parcel = await _find_parcel(store, parcel_oid)
    new_status = data.delivery_status
    now = datetime.now(timezone.utc)

    if new_status == DeliveryStatus.PARCEL_DELIVERED:
        rider_id = data.rider_id or parcel.get("riderId")
        if not rider_id:
            raise bad_request_exception("riderId is required to deliver a parcel")
        await store.riders.update_one(
            {"_id": to_object_id(rider_id, "rider id")},
            {"$set": {"workStatus": WorkStatus.AVAILABLE.value, "updatedAt": now}},
        )

    result = await store.parcels.update_one(
        {"_id": parcel_oid},
        {"$set": {"deliveryStatus": new_status.value, "updatedAt": now}},
    )

    tracking_id = data.tracking_id or parcel.get("trackingId")
    await log_tracking(store, tracking_id, new_status.value)

    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


async def list_parcels(
    store: Store,
    sender_email: Optional[str] = None,
    delivery_status: Optional[str] = None,
) -> list:
    query: dict = {}
    if sender_email:
        query["senderEmail"] = sender_email
    if delivery_status:
        query["deliveryStatus"] = delivery_status
    cursor = store.parcels.find(query, sort=[("createdAt", -1)])
    return await cursor.to_list(length=None)


async def list_rider_parcels(
    store: Store,
    rider_email: str,
    delivery_status: Optional[str] = None,
) -> list:
    """Livrés si delivery_status == parcel_delivered, sinon tous les colis en cours."""
    delivered = DeliveryStatus.PARCEL_DELIVERED.value
    query: dict = {"riderEmail": rider_email}
    if delivery_status == delivered:
        query["deliveryStatus"] = delivered
    else:
        query["deliveryStatus"] = {"$nin": [delivered]}
    cursor = store.parcels.find(query, sort=[("createdAt", -1)])
    return await cursor.to_list(length=None)


async def get_parcel(store: Store, parcel_id: str) -> dict:
    return await _find_parcel(store, to_object_id(parcel_id, "parcel id"))


async def delete_parcel(store: Store, parcel_id: str) -> dict:
    result = await store.parcels.delete_one({"_id": to_object_id(parcel_id, "parcel id")})
    if result.deleted_count == 0:
        raise not_found_exception("Parcel")
    logger.info(f"Colis supprimé {parcel_id}")
    return {"deletedCount": result.deleted_count}


async def delivery_status_stats(store: Store) -> list:
    """Nombre de colis par deliveryStatus."""
    pipeline = [
        {"$group": {"_id": "$deliveryStatus", "count": {"$sum": 1}}},
        {"$project": {"_id": 0, "status": "$_id", "count": 1}},
    ]
    return await store.parcels.aggregate(pipeline).to_list(length=None)
