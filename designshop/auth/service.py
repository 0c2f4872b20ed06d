"""
Service d'authentification : vérification des identifiants et résolution du
principal à partir d'un token JWT.
"""
import logging
from typing import Optional

from fastcrud import FastCRUD
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.auth.security import verify_password, decode_access_token
from designshop.users.models import User, UserRead

logger = logging.getLogger(__name__)


class AuthService:
    """Service pour gérer l'authentification des utilisateurs avec FastCRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_crud = FastCRUD(User)

    async def authenticate_user(self, email: str, password: str) -> Optional[UserRead]:
        """Retourne le principal si email et mot de passe correspondent, sinon None."""
        logger.debug(f"[AuthService] Tentative d'authentification pour: {email}")
        user = await self.user_crud.get(db=self.db, email=email)
        if user is None:
            logger.warning(f"[AuthService] Utilisateur non trouvé: {email}")
            return None

        if not verify_password(password, user["password_hash"]):
            logger.warning(f"[AuthService] Mot de passe incorrect pour: {email}")
            return None

        logger.info(f"[AuthService] Authentification réussie pour: {email} (ID: {user['id']})")
        return UserRead.model_validate(user)

    async def get_user_from_token(self, token: str) -> Optional[UserRead]:
        """Retourne le principal UserRead porté par le token, ou None."""
        user_id = decode_access_token(token)
        if user_id is None:
            logger.warning("[AuthService] Token invalide ou expiré")
            return None

        user = await self.user_crud.get(
            db=self.db,
            schema_to_select=UserRead,
            return_as_model=True,
            id=user_id,
        )
        if user is None:
            logger.warning(f"[AuthService] Utilisateur ID {user_id} du token non trouvé en base")
            return None

        logger.debug(f"[AuthService] Utilisateur récupéré depuis token: ID {user_id}")
        return user
