"""
Fonctions utilitaires de sécurité pour l'authentification.

Comprend le hachage/vérification de mot de passe et la création/décodage de token JWT.
"""
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
import logging

from designshop.config import settings

logger = logging.getLogger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifie un mot de passe en clair contre un hash bcrypt."""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.error(f"Hash de mot de passe invalide: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Génère le hash bcrypt d'un mot de passe."""
    hashed_bytes = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
    return hashed_bytes.decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Crée un token JWT avec les données fournies et une expiration."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Décode un token JWT et retourne l'ID utilisateur ('sub') ou None si invalide/expiré."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Erreur de décodage JWT: {e}")
        return None

    user_id_str: Optional[str] = payload.get("sub")
    if user_id_str is None:
        logger.warning("Token JWT décodé mais sans champ 'sub' (user_id).")
        return None
    try:
        return int(user_id_str)
    except ValueError:
        logger.warning(f"Le champ 'sub' dans le token n'est pas un entier valide: '{user_id_str}'")
        return None
