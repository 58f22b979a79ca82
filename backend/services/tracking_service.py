"""
Service tracking : journal append-only des statuts d'un colis, indexé par trackingId.
"""
import logging
from datetime import datetime, timezone

from database import Store

logger = logging.getLogger(__name__)


def describe_status(status: str) -> str:
    """'driver_assigned' → 'driver assigned'"""
    return " ".join(status.split("_"))


async def log_tracking(store: Store, tracking_id: str, status: str) -> dict:
    """Ajoute une entrée au journal. Les entrées ne sont jamais modifiées."""
    log = {
        "trackingId": tracking_id,
        "status":     status,
        "details":    describe_status(status),
        "createdAt":  datetime.now(timezone.utc),
    }
    result = await store.trackings.insert_one(log)
    logger.info(f"Tracking {tracking_id} → {status}")
    log["_id"] = result.inserted_id
    return log


async def get_tracking_logs(store: Store, tracking_id: str) -> list:
    """Retourne les entrées triées chronologiquement."""
    cursor = store.trackings.find(
        {"trackingId": tracking_id},
        sort=[("createdAt", 1), ("_id", 1)],
    )
    return await cursor.to_list(length=None)
