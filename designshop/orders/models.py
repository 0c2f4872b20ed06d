from typing import Any, Dict, List, Optional
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Column, Numeric
from sqlmodel import SQLModel, Field, Relationship

from designshop.core.utils import utc_now
from designshop.orders.config import STATUS_PENDING, DEFAULT_COMMUNICATION_TYPE, DEFAULT_PAYMENT_STATUS
from designshop.products.models import Product
from designshop.users.models import User

# --- OrderItem ---

class OrderItem(SQLModel, table=True):
    """Ligne de commande. Le prix est figé au moment de la commande."""
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: Optional[int] = Field(default=None, foreign_key="orders.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    package_type: str = Field(max_length=50)
    quantity: int = Field(default=1, gt=0)
    price: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    # [{"option_name": ..., "selected_value": ...}] dans l'ordre fourni par le client
    customizations: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Relations
    order: Optional["Order"] = Relationship(back_populates="items")
    product: Optional[Product] = Relationship()

    __tablename__ = "order_items"


# --- Journal de communication (append-only) ---

class OrderCommunication(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: Optional[int] = Field(default=None, foreign_key="orders.id", index=True)
    sender_id: Optional[int] = Field(default=None, foreign_key="users.id")
    content: str = Field(max_length=1000)
    type: str = Field(default=DEFAULT_COMMUNICATION_TYPE, max_length=30)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)

    order: Optional["Order"] = Relationship(back_populates="communication")
    sender: Optional[User] = Relationship()

    __tablename__ = "order_communications"


# --- Order ---

class Order(SQLModel, table=True):
    """Commande client : lignes, montants figés, adresse dénormalisée, journal."""
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(unique=True, index=True, max_length=40)
    customer_id: int = Field(foreign_key="users.id", index=True)
    status: str = Field(default=STATUS_PENDING, max_length=20, index=True)

    # Montants calculés une seule fois à la création
    subtotal: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    tax: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    total: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))

    # Copie de l'adresse au moment de la commande (indépendante du profil)
    shipping_full_name: str = Field(max_length=150)
    shipping_email: str = Field(max_length=255)
    shipping_phone: str = Field(max_length=30)
    shipping_street: Optional[str] = Field(default=None, max_length=255)
    shipping_city: Optional[str] = Field(default=None, max_length=100)
    shipping_state: Optional[str] = Field(default=None, max_length=100)
    shipping_zip_code: Optional[str] = Field(default=None, max_length=20)
    shipping_country: Optional[str] = Field(default=None, max_length=100)

    payment_method: Optional[str] = Field(default=None, max_length=50)
    manual_transaction_id: Optional[str] = Field(default=None, max_length=100)
    payment_screenshot: Optional[str] = Field(default=None, max_length=500)
    payment_status: str = Field(default=DEFAULT_PAYMENT_STATUS, max_length=30)

    actual_delivery_date: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False, sa_column_kwargs={"onupdate": utc_now})

    # Relations
    customer: Optional[User] = Relationship()
    items: List[OrderItem] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.id", "cascade": "all, delete-orphan"},
    )
    communication: List[OrderCommunication] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderCommunication.id", "cascade": "all, delete-orphan"},
    )

    __tablename__ = "orders"
