from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.exceptions import credentials_exception, forbidden_exception
from core.security import FirebaseTokenVerifier
from database import Store
from models.common import UserRole
from services.payment_service import StripeCheckout

bearer_scheme = HTTPBearer(auto_error=False)


# Objets construits au démarrage (lifespan) et posés sur app.state
def get_store(request: Request) -> Store:
    return request.app.state.store


def get_token_verifier(request: Request) -> FirebaseTokenVerifier:
    return request.app.state.token_verifier


def get_payment_gateway(request: Request) -> StripeCheckout:
    return request.app.state.payment_gateway


async def get_current_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> str:
    if not credentials:
        raise credentials_exception()
    claims = await verifier.verify(credentials.credentials)
    email = claims.get("email")
    if not email:
        raise credentials_exception()
    return email


def require_role(*roles: UserRole):
    """
    Dépendance qui vérifie, dans la collection users, que l'email du token
    possède l'un des rôles donnés. Retourne le document utilisateur.
    Usage : Depends(require_role(UserRole.ADMIN))
    """
    async def _check(
        email: str = Depends(get_current_email),
        store: Store = Depends(get_store),
    ) -> dict:
        user = await store.users.find_one({"email": email})
        if not user or user.get("role") not in [r.value for r in roles]:
            raise forbidden_exception()
        return user
    return _check


# Raccourcis pratiques
require_admin = require_role(UserRole.ADMIN)
require_rider = require_role(UserRole.RIDER, UserRole.ADMIN)
