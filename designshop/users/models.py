# designshop/users/models.py
"""
Module définissant les modèles SQLModel pour l'entité User.

Ce module contient :
- UserBase : Classe SQLModel de base avec les champs communs.
- User : Modèle de table SQLModel (table=True) héritant de UserBase.
- UserRead : principal authentifié transmis aux services.
- UserSummary : vue réduite embarquée dans les réponses commandes.
"""
from typing import Optional
from datetime import datetime

from sqlmodel import SQLModel, Field
from pydantic import EmailStr

from designshop.core.schemas import OrmBaseModel
from designshop.core.utils import utc_now
from designshop.users.constants import ROLE_ADMIN, ROLE_USER

# =====================================================
# Schémas: Utilisateurs (SQLModel approach)
# =====================================================

class UserBase(SQLModel):
    """Modèle SQLModel de base pour un utilisateur (données communes, Pydantic)."""
    email: EmailStr = Field(unique=True, index=True, max_length=255, nullable=False)
    name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    role: str = Field(default=ROLE_USER, max_length=20, nullable=False)


# ----- Modèle de Table -----
class User(UserBase, table=True):
    """Modèle de table SQLModel pour les utilisateurs."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True, index=True)
    password_hash: str = Field(nullable=False, max_length=255)
    # Indexé : agrégation des inscriptions par jour
    created_at: datetime = Field(default_factory=utc_now, nullable=False, index=True)
    updated_at: Optional[datetime] = Field(default=None, sa_column_kwargs={"onupdate": utc_now})


# ----- Schémas API -----
class UserRead(UserBase):
    """Principal authentifié (sans le hash du mot de passe)."""
    id: int
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class UserSummary(OrmBaseModel):
    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
