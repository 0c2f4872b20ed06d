"""
Dépendances FastAPI pour l'authentification.

- ``get_current_user`` : principal issu du token Bearer (équivalent de ``protect``)
- ``get_current_admin_user`` : principal administrateur (équivalent de ``authorize('admin')``)
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.auth.exceptions import TokenMissingException, TokenInvalidException, PermissionDeniedException
from designshop.auth.service import AuthService
from designshop.config import settings
from designshop.database import get_db_session
from designshop.users.models import UserRead

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/token", auto_error=False)

DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_auth_service(db: DbSessionDep) -> AuthService:
    return AuthService(db=db)


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserRead:
    """
    Vérifie le token JWT et retourne l'utilisateur courant.

    Raises:
        TokenMissingException: Si le token est manquant
        TokenInvalidException: Si le token est invalide ou l'utilisateur inconnu
    """
    if token is None:
        logger.warning("Token manquant dans la requête.")
        raise TokenMissingException()

    user = await auth_service.get_user_from_token(token)
    if user is None:
        raise TokenInvalidException()

    logger.debug(f"Utilisateur authentifié: ID {user.id}")
    return user


async def get_current_admin_user(
    current_user: Annotated[UserRead, Depends(get_current_user)],
) -> UserRead:
    """Vérifie que l'utilisateur courant est un administrateur."""
    if not current_user.is_admin:
        logger.warning(f"Tentative d'accès à une ressource admin par un utilisateur non-admin: ID {current_user.id}")
        raise PermissionDeniedException()
    return current_user


CurrentUser = Annotated[UserRead, Depends(get_current_user)]
CurrentAdmin = Annotated[UserRead, Depends(get_current_admin_user)]
