import logging
import math
import secrets
from datetime import timedelta
from typing import List, Optional, Tuple

from designshop.config import settings
from designshop.core.utils import utc_now
from designshop.orders import state_machine
from designshop.orders.config import (
    DEFAULT_COUNTRY,
    DEFAULT_PAYMENT_STATUS,
    ORDER_NUMBER_PREFIX,
    ORDER_TREND_DAYS,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
)
from designshop.orders.exceptions import (
    OrderNotFoundException,
    OrderValidationException,
    ProductNotFoundException,
)
from designshop.orders.export import build_orders_csv
from designshop.orders.interfaces.repositories import AbstractOrderRepository, OrderFilters
from designshop.orders.models import Order, OrderItem
from designshop.orders.pricing import PricedLineItem, compute_pricing, price_line_item
from designshop.orders.schemas import MonthlyOrderTrend, OrderCreate, OrderStats, StatusCount
from designshop.products.repositories import SQLAlchemyProductRepository
from designshop.users.models import UserRead

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    """Numéro lisible : ``ORD-YYYYMMDD-XXXXXX``."""
    return f"{ORDER_NUMBER_PREFIX}-{utc_now():%Y%m%d}-{secrets.token_hex(3).upper()}"


class OrderService:
    """Service applicatif : création, cycle de vie, consultation et statistiques des commandes."""

    def __init__(
        self,
        order_repository: AbstractOrderRepository,
        product_repository: SQLAlchemyProductRepository,
        tax_rate: float = settings.ORDER_TAX_RATE,
        enforce_transitions: bool = settings.ORDER_ENFORCE_TRANSITIONS,
    ):
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.tax_rate = tax_rate
        self.enforce_transitions = enforce_transitions

    # --- GET Methods ---

    async def _get_order_or_404(self, order_ref: str) -> Order:
        order = await self.order_repository.get_by_reference(str(order_ref))
        if order is None:
            raise OrderNotFoundException(order_ref)
        return order

    async def get_order(self, order_ref: str, actor: UserRead) -> Order:
        """Commande accessible par son propriétaire ou un admin (403 sinon)."""
        logger.debug(f"[OrderService] Récupération commande {order_ref} pour user {actor.id} (admin: {actor.is_admin})")
        order = await self._get_order_or_404(order_ref)
        state_machine.ensure_order_access(order, actor, action="view")
        return order

    async def list_orders(
        self,
        actor: UserRead,
        filters: OrderFilters,
        page: int,
        limit: int,
    ) -> Tuple[List[Order], int, int]:
        """Les admins voient toutes les commandes, les autres uniquement les leurs.

        Returns:
            (commandes de la page, total, nombre de pages)
        """
        if not actor.is_admin:
            filters.customer_id = actor.id
        offset = (page - 1) * limit
        orders, total = await self.order_repository.list_orders(filters, limit=limit, offset=offset)
        pages = math.ceil(total / limit) if limit else 0
        return orders, total, pages

    # --- CREATE Method ---

    @staticmethod
    def _validate_order_payload(order_data: OrderCreate) -> None:
        # Règles vérifiées dans l'ordre, la première erreur interrompt la création
        if not order_data.items:
            raise OrderValidationException("Order must contain at least one item")
        address = order_data.shipping_address
        if not address.full_name:
            raise OrderValidationException("Full name is required")
        if not address.email:
            raise OrderValidationException("Valid email is required")
        if not address.phone:
            raise OrderValidationException("Valid phone number is required")

    async def _price_items(self, order_data: OrderCreate) -> List[PricedLineItem]:
        products = await self.product_repository.get_many(item.product for item in order_data.items)
        priced_items = []
        for item_in in order_data.items:
            product = products.get(item_in.product)
            if product is None:
                logger.warning(f"[OrderService] Produit {item_in.product} introuvable.")
                raise ProductNotFoundException(item_in.product)
            priced_items.append(
                price_line_item(
                    product,
                    tier=item_in.tier,
                    package_type=item_in.package_type,
                    quantity=item_in.quantity,
                    customization=item_in.customization,
                )
            )
        return priced_items

    async def create_order(self, order_data: OrderCreate, actor: UserRead) -> Order:
        """Valide, calcule les montants puis persiste la commande en statut ``pending``."""
        logger.info(f"[OrderService] Tentative création commande pour user ID: {actor.id}")
        self._validate_order_payload(order_data)
        priced_items = await self._price_items(order_data)
        pricing = compute_pricing(priced_items, self.tax_rate)

        address = order_data.shipping_address
        order = Order(
            order_number=generate_order_number(),
            customer_id=actor.id,
            status=STATUS_PENDING,
            subtotal=pricing.subtotal,
            tax=pricing.tax,
            total=pricing.total,
            shipping_full_name=address.full_name,
            shipping_email=address.email,
            shipping_phone=address.phone,
            shipping_street=address.address,
            shipping_city=address.city,
            shipping_state=address.state,
            shipping_zip_code=address.pincode,
            shipping_country=address.country or DEFAULT_COUNTRY,
            payment_method=order_data.payment_method,
            manual_transaction_id=order_data.manual_transaction_id or None,
            payment_screenshot=order_data.payment_screenshot or None,
            payment_status=order_data.payment_status or DEFAULT_PAYMENT_STATUS,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    package_type=item.package_type,
                    quantity=item.quantity,
                    price=item.price,
                    customizations=item.customizations,
                )
                for item in priced_items
            ],
        )

        created_order = await self.order_repository.add(order)
        logger.info(
            f"[OrderService] Commande {created_order.order_number} (ID {created_order.id}) créée "
            f"pour user {actor.id}, total {created_order.total}."
        )
        return created_order

    # --- Cycle de vie ---

    async def set_status(
        self,
        order_ref: str,
        new_status: str,
        actor: UserRead,
        note: Optional[str] = None,
    ) -> Order:
        """Changement de statut par un admin ; le statut est validé avant la recherche."""
        state_machine.validate_status(new_status)
        order = await self._get_order_or_404(order_ref)

        old_status = state_machine.apply_status_change(
            order,
            new_status,
            actor=actor,
            note=note,
            enforce_transitions=self.enforce_transitions,
        )
        updated_order = await self.order_repository.save(order)
        logger.info(f"[OrderService] Statut commande {order.order_number}: {old_status} -> {new_status} par admin {actor.id}.")
        return updated_order

    async def cancel_order(self, order_ref: str, actor: UserRead) -> Order:
        order = await self._get_order_or_404(order_ref)
        state_machine.ensure_order_access(order, actor, action="cancel")
        state_machine.apply_cancel(order, actor)
        cancelled_order = await self.order_repository.save(order)
        logger.info(f"[OrderService] Commande {order.order_number} annulée par user {actor.id}.")
        return cancelled_order

    async def add_message(self, order_ref: str, content: str, message_type: str, actor: UserRead) -> Order:
        order = await self._get_order_or_404(order_ref)
        state_machine.ensure_order_access(order, actor, action="communicate on")
        state_machine.append_communication(order, content=content, sender_id=actor.id, type=message_type)
        return await self.order_repository.save(order)

    # --- Statistiques & export ---

    async def get_stats(self) -> OrderStats:
        since = utc_now() - timedelta(days=ORDER_TREND_DAYS)
        total_orders = await self.order_repository.count()
        by_status = await self.order_repository.count_by_status()
        trend = await self.order_repository.monthly_trend(since)

        return OrderStats(
            total_orders=total_orders,
            pending_orders=await self.order_repository.count(STATUS_PENDING),
            completed_orders=await self.order_repository.count(STATUS_COMPLETED),
            cancelled_orders=await self.order_repository.count(STATUS_CANCELLED),
            total_revenue=await self.order_repository.sum_revenue(STATUS_COMPLETED),
            orders_by_status=[StatusCount(status=status, count=count) for status, count in by_status],
            order_trend=[
                MonthlyOrderTrend(year=year, month=month, count=count, revenue=revenue)
                for year, month, count, revenue in trend
            ],
        )

    async def export_csv(self) -> str:
        orders = await self.order_repository.list_all()
        logger.info(f"[OrderService] Export CSV de {len(orders)} commandes.")
        return build_orders_csv(orders)
