"""
Schémas API du module Orders.

- Commandes (corps de requête) : ``OrderCreate``, ``OrderStatusUpdate``, ``CommunicationCreate``
- Réponses : ``OrderResponse`` et ses sous-objets, listes paginées, statistiques
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from designshop.core.schemas import CommandModel, OrmBaseModel, SuccessResponse
from designshop.orders.config import (
    COMMUNICATION_TYPES,
    DEFAULT_COMMUNICATION_TYPE,
    MAX_MESSAGE_LENGTH,
    MAX_STATUS_NOTE_LENGTH,
)
from designshop.orders.models import Order
from designshop.products.models import ProductSummary
from designshop.users.models import UserSummary

# ======================================================
# Corps de requête
# ======================================================

class OrderItemCreate(CommandModel):
    product: int
    tier: Optional[str] = Field(default=None, max_length=50)
    # Ancien nom du palier, encore envoyé par certains clients
    package_type: Optional[str] = Field(default=None, max_length=50)
    quantity: Optional[int] = Field(default=None, ge=0)
    customization: Optional[Dict[str, Any]] = None


# Longueurs alignées sur les colonnes de ``Order``
class ShippingAddressCreate(CommandModel):
    full_name: Optional[str] = Field(default=None, max_length=150)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    pincode: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)


class OrderCreate(CommandModel):
    """Commande de création ; les règles métier sont vérifiées par OrderService."""
    items: Optional[List[OrderItemCreate]] = None
    shipping_address: ShippingAddressCreate = Field(default_factory=ShippingAddressCreate)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    manual_transaction_id: Optional[str] = Field(default=None, max_length=100)
    payment_status: Optional[str] = Field(default=None, max_length=30)
    payment_screenshot: Optional[str] = Field(default=None, max_length=500)


class OrderStatusUpdate(CommandModel):
    status: str
    message: Optional[str] = Field(default=None, max_length=MAX_STATUS_NOTE_LENGTH)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, value):
        return value.strip() if isinstance(value, str) else value


class CommunicationCreate(CommandModel):
    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)
    type: str = DEFAULT_COMMUNICATION_TYPE

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("type")
    @classmethod
    def check_type(cls, value: str) -> str:
        if value not in COMMUNICATION_TYPES:
            raise ValueError(f"Type must be one of: {', '.join(COMMUNICATION_TYPES)}")
        return value


# ======================================================
# Réponses
# ======================================================

class CustomizationRead(OrmBaseModel):
    option_name: str
    selected_value: Any = None


class OrderItemRead(OrmBaseModel):
    id: int
    product: Optional[ProductSummary] = None
    package_type: str
    quantity: int
    price: float
    customizations: List[CustomizationRead] = []


class PricingRead(OrmBaseModel):
    subtotal: float
    tax: float
    total: float


class ShippingAddressRead(OrmBaseModel):
    full_name: str
    email: str
    phone: str
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class PaymentInfoRead(OrmBaseModel):
    method: Optional[str] = None
    manual_transaction_id: Optional[str] = None
    payment_screenshot: Optional[str] = None
    payment_status: str


class SenderRead(OrmBaseModel):
    id: int
    name: Optional[str] = None
    role: str


class CommunicationRead(OrmBaseModel):
    id: int
    sender: Optional[SenderRead] = None
    content: str
    type: str
    created_at: datetime


class OrderResponse(OrmBaseModel):
    id: int
    order_number: str
    customer: Optional[UserSummary] = None
    items: List[OrderItemRead] = []
    pricing: PricingRead
    shipping_address: ShippingAddressRead
    payment_info: PaymentInfoRead
    status: str
    communication: List[CommunicationRead] = []
    actual_delivery_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        """Regroupe les colonnes à plat de l'ORM en sous-objets pricing / adresse / paiement."""
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer=UserSummary.model_validate(order.customer) if order.customer else None,
            items=[OrderItemRead.model_validate(item) for item in order.items],
            pricing=PricingRead(subtotal=order.subtotal, tax=order.tax, total=order.total),
            shipping_address=ShippingAddressRead(
                full_name=order.shipping_full_name,
                email=order.shipping_email,
                phone=order.shipping_phone,
                street=order.shipping_street,
                city=order.shipping_city,
                state=order.shipping_state,
                zip_code=order.shipping_zip_code,
                country=order.shipping_country,
            ),
            payment_info=PaymentInfoRead(
                method=order.payment_method,
                manual_transaction_id=order.manual_transaction_id,
                payment_screenshot=order.payment_screenshot,
                payment_status=order.payment_status,
            ),
            status=order.status,
            communication=[CommunicationRead.model_validate(entry) for entry in order.communication],
            actual_delivery_date=order.actual_delivery_date,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderEnvelope(SuccessResponse):
    order: OrderResponse


class PaginatedOrderResponse(SuccessResponse):
    count: int
    total: int
    page: int
    pages: int
    orders: List[OrderResponse]


# --- Statistiques ---

class StatusCount(OrmBaseModel):
    status: str
    count: int


class MonthlyOrderTrend(OrmBaseModel):
    year: int
    month: int
    count: int
    revenue: float


class OrderStats(OrmBaseModel):
    total_orders: int
    pending_orders: int
    completed_orders: int
    cancelled_orders: int
    total_revenue: float
    orders_by_status: List[StatusCount]
    order_trend: List[MonthlyOrderTrend]


class OrderStatsEnvelope(SuccessResponse):
    stats: OrderStats
