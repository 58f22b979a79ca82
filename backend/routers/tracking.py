"""
Router tracking : journal public d'un colis (sans authentification).
"""
from fastapi import APIRouter, Depends

from core.dependencies import get_store
from core.utils import serialize_docs
from database import Store
from services.tracking_service import get_tracking_logs

router = APIRouter()


@router.get("/{tracking_id}/logs", summary="Historique de suivi d'un colis")
async def tracking_logs(tracking_id: str, store: Store = Depends(get_store)):
    return serialize_docs(await get_tracking_logs(store, tracking_id))
