"""
Router parcels : CRUD colis + assignation livreur + changements de statut.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from core.dependencies import get_store, require_rider
from core.utils import serialize_doc, serialize_docs
from database import Store
from models.common import UserRole
from models.parcel import ParcelCreate, RiderAssignment, StatusUpdate, DeliveryStat
from services import parcel_service

router = APIRouter()


@router.get("", summary="Colis (filtres expéditeur / statut)")
async def list_parcels(
    email: Optional[str] = None,
    deliveryStatus: Optional[str] = None,
    store: Store = Depends(get_store),
):
    parcels = await parcel_service.list_parcels(store, email, deliveryStatus)
    return serialize_docs(parcels)


@router.get("/rider", summary="Colis d'un livreur (en cours ou livrés)")
async def list_rider_parcels(
    riderEmail: Optional[str] = None,
    deliveryStatus: Optional[str] = None,
    current_user: dict = Depends(require_rider),
    store: Store = Depends(get_store),
):
    # Un livreur ne voit que ses colis ; l'admin peut cibler n'importe quel livreur
    if current_user.get("role") != UserRole.ADMIN.value or not riderEmail:
        riderEmail = current_user["email"]
    parcels = await parcel_service.list_rider_parcels(store, riderEmail, deliveryStatus)
    return serialize_docs(parcels)


@router.get("/delivery-status/stats", response_model=list[DeliveryStat], summary="Nombre de colis par statut")
async def delivery_status_stats(store: Store = Depends(get_store)):
    return await parcel_service.delivery_status_stats(store)


@router.get("/{parcel_id}", summary="Détail colis")
async def get_parcel(parcel_id: str, store: Store = Depends(get_store)):
    return serialize_doc(await parcel_service.get_parcel(store, parcel_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Créer un colis")
async def create_parcel(body: ParcelCreate, store: Store = Depends(get_store)):
    return await parcel_service.create_parcel(store, body)


@router.patch("/{parcel_id}", summary="Assigner un livreur")
async def assign_rider(
    parcel_id: str,
    body: RiderAssignment,
    store: Store = Depends(get_store),
):
    return await parcel_service.assign_rider(store, parcel_id, body)


@router.patch("/{parcel_id}/status", summary="Changer le statut de livraison")
async def change_status(
    parcel_id: str,
    body: StatusUpdate,
    store: Store = Depends(get_store),
):
    return await parcel_service.change_status(store, parcel_id, body)


@router.delete("/{parcel_id}", summary="Supprimer un colis")
async def delete_parcel(parcel_id: str, store: Store = Depends(get_store)):
    return await parcel_service.delete_parcel(store, parcel_id)
