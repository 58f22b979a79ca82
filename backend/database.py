import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import IndexModel, ASCENDING, DESCENDING

logger = logging.getLogger(__name__)


INDEXES = {
    "users": [
        IndexModel([("email", ASCENDING)], unique=True),
        IndexModel([("role", ASCENDING)]),
        IndexModel([("createdAt", DESCENDING)]),
    ],
    "parcels": [
        IndexModel([("trackingId", ASCENDING)], unique=True, sparse=True),
        IndexModel([("senderEmail", ASCENDING)]),
        IndexModel([("riderEmail", ASCENDING)]),
        IndexModel([("deliveryStatus", ASCENDING)]),
        IndexModel([("createdAt", DESCENDING)]),
    ],
    "payments": [
        IndexModel([("transactionId", ASCENDING)], unique=True),
        IndexModel([("customerEmail", ASCENDING)]),
        IndexModel([("paidAt", DESCENDING)]),
    ],
    "riders": [
        IndexModel([("email", ASCENDING)]),
        IndexModel([("status", ASCENDING), ("district", ASCENDING), ("workStatus", ASCENDING)]),
    ],
    "trackings": [
        IndexModel([("trackingId", ASCENDING), ("createdAt", ASCENDING)]),
    ],
}


class Store:
    """
    Accès aux collections MongoDB.
    Construit une seule fois au démarrage puis injecté dans les routes
    via `core.dependencies.get_store`.
    """

    def __init__(self, database, client: Optional[AsyncIOMotorClient] = None):
        self.client = client
        self.db = database
        self.users = database["users"]
        self.parcels = database["parcels"]
        self.payments = database["payments"]
        self.riders = database["riders"]
        self.trackings = database["trackings"]

    @classmethod
    def connect(cls, url: str, db_name: str) -> "Store":
        client = AsyncIOMotorClient(
            url,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=10000,
        )
        logger.info(f"Connected to MongoDB: {db_name}")
        return cls(client[db_name], client=client)

    async def create_indexes(self) -> None:
        for collection_name, index_models in INDEXES.items():
            try:
                await self.db[collection_name].create_indexes(index_models)
                logger.info(f"Indexes created for collection: {collection_name}")
            except Exception as e:
                logger.error(f"Failed to create indexes for collection {collection_name}: {e}")

        logger.info("All MongoDB indexes creation attempts completed.")

    def close(self) -> None:
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
