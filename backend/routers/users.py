"""
Router users : inscription, recherche, rôles.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from config import settings
from core.dependencies import get_current_email, get_store, require_admin
from core.limiter import limiter
from core.utils import serialize_doc, serialize_docs
from database import Store
from models.user import UserCreate, RoleUpdate, RoleResponse
from services import user_service

router = APIRouter()


@router.get("", summary="Recherche utilisateurs (nom ou email)")
async def list_users(
    searchText: Optional[str] = None,
    limit: int = Query(settings.USERS_SEARCH_LIMIT, ge=1, le=50),
    _email: str = Depends(get_current_email),
    store: Store = Depends(get_store),
):
    users = await user_service.search_users(store, searchText, limit)
    return serialize_docs(users)


@router.get("/{user_id}", summary="Détail utilisateur")
async def get_user(user_id: str, store: Store = Depends(get_store)):
    return serialize_doc(await user_service.get_user(store, user_id))


@router.get("/{email}/role", response_model=RoleResponse, summary="Rôle d'un utilisateur")
async def get_user_role(email: str, store: Store = Depends(get_store)):
    return {"role": await user_service.get_role(store, email)}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Inscription")
@limiter.limit(settings.SIGNUP_RATE_LIMIT)
async def create_user(
    request: Request,
    response: Response,
    body: UserCreate,
    store: Store = Depends(get_store),
):
    created = await user_service.register_user(store, body)
    if created is None:
        response.status_code = status.HTTP_200_OK
        return {"message": "user exists"}
    return created


@router.patch("/{user_id}/role", summary="Changer rôle (admin)")
async def change_role(
    user_id: str,
    body: RoleUpdate,
    _admin: dict = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await user_service.update_role(store, user_id, body.role)
