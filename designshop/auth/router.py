"""
Routes d'authentification :
- /token : connexion et obtention d'un token JWT
- /me : informations de l'utilisateur connecté
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from designshop.auth.dependencies import CurrentUser, get_auth_service
from designshop.auth.exceptions import InvalidCredentialsException
from designshop.auth.models import Token
from designshop.auth.security import create_access_token
from designshop.auth.service import AuthService
from designshop.users.models import UserRead

logger = logging.getLogger(__name__)

auth_router = APIRouter()


@auth_router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Authentifie l'utilisateur et retourne un token JWT.

    - **username**: Email de l'utilisateur
    - **password**: Mot de passe de l'utilisateur
    """
    logger.info("[Router] Tentative de login pour: %s", form_data.username)
    user = await auth_service.authenticate_user(email=form_data.username, password=form_data.password)
    if not user:
        raise InvalidCredentialsException()

    access_token = create_access_token(data={"sub": str(user.id)})
    logger.info("[Router] Token créé pour user ID: %s", user.id)
    return Token(access_token=access_token)


@auth_router.get("/me", response_model=UserRead)
async def read_users_me(current_user: CurrentUser):
    """Récupère les informations de l'utilisateur actuellement connecté."""
    return current_user
