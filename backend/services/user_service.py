"""
Service utilisateurs : inscription, recherche, rôles.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from core.exceptions import not_found_exception
from core.utils import to_object_id
from database import Store
from models.common import UserRole
from models.user import UserCreate

logger = logging.getLogger(__name__)


async def register_user(store: Store, data: UserCreate) -> Optional[dict]:
    """Crée l'utilisateur avec le rôle 'user'. None si l'email existe déjà."""
    if await store.users.find_one({"email": data.email}):
        return None
    user_doc = data.model_dump(by_alias=True, exclude_none=True)
    user_doc.update({
        "role":      UserRole.USER.value,
        "createdAt": datetime.now(timezone.utc),
    })
    result = await store.users.insert_one(user_doc)
    logger.info(f"Utilisateur {data.email} inscrit")
    return {"insertedId": str(result.inserted_id)}


async def search_users(store: Store, search_text: Optional[str], limit: int) -> list:
    query: dict = {}
    if search_text:
        pattern = re.escape(search_text)
        query["$or"] = [
            {"displayName": {"$regex": pattern, "$options": "i"}},
            {"email": {"$regex": pattern, "$options": "i"}},
        ]
    cursor = store.users.find(query, sort=[("createdAt", -1)], limit=limit)
    return await cursor.to_list(length=None)


async def get_user(store: Store, user_id: str) -> dict:
    user = await store.users.find_one({"_id": to_object_id(user_id, "user id")})
    if not user:
        raise not_found_exception("User")
    return user


async def get_role(store: Store, email: str) -> str:
    user = await store.users.find_one({"email": email})
    return (user or {}).get("role") or UserRole.USER.value


async def update_role(store: Store, user_id: str, role: UserRole) -> dict:
    result = await store.users.update_one(
        {"_id": to_object_id(user_id, "user id")},
        {"$set": {"role": role.value}},
    )
    if result.matched_count == 0:
        raise not_found_exception("User")
    logger.info(f"Rôle de {user_id} → {role.value}")
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}
