from typing import Dict, List, Optional
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from designshop.core.schemas import OrmBaseModel
from designshop.core.utils import utc_now

# --- Modèle Product SQLModel ---

class ProductBase(SQLModel):
    name: str = Field(index=True, max_length=255)
    description: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None, index=True, max_length=100)
    is_active: bool = Field(default=True)


class Product(ProductBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # Grille tarifaire par palier, ex: {"base": 500, "premium": 900, "enterprise": 1500}
    price: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: Optional[datetime] = Field(default=None, sa_column_kwargs={"onupdate": utc_now})

    __tablename__ = "products"


# Vue réduite embarquée dans les commandes et les statistiques
class ProductSummary(OrmBaseModel):
    id: int
    name: str
    category: Optional[str] = None
    images: List[str] = []
