"""
Router riders : candidatures livreurs, validation admin, statistiques.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from core.dependencies import get_store, require_admin
from core.utils import serialize_docs
from database import Store
from models.rider import RiderCreate, RiderReview
from services import rider_service

router = APIRouter()


@router.get("", summary="Livreurs (filtres statut / district / disponibilité)")
async def list_riders(
    status: Optional[str] = None,
    district: Optional[str] = None,
    workStatus: Optional[str] = None,
    store: Store = Depends(get_store),
):
    riders = await rider_service.list_riders(store, status, district, workStatus)
    return serialize_docs(riders)


@router.get("/delivery-per-day", summary="Livraisons par jour d'un livreur")
async def delivery_per_day(
    email: str = Query(..., min_length=1),
    store: Store = Depends(get_store),
):
    return await rider_service.deliveries_per_day(store, email)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Candidature livreur")
async def create_rider(body: RiderCreate, store: Store = Depends(get_store)):
    return await rider_service.create_rider(store, body)


@router.patch("/{rider_id}", summary="Valider / refuser une candidature (admin)")
async def review_rider(
    rider_id: str,
    body: RiderReview,
    _admin: dict = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await rider_service.review_rider(store, rider_id, body)
