import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query, Response, status

from designshop.auth.dependencies import CurrentAdmin, CurrentUser
from designshop.config import settings
from designshop.core.schemas import SuccessResponse
from designshop.core.utils import to_naive_utc, utc_now
from designshop.orders.config import CSV_EXPORT_FILENAME
from designshop.orders.dependencies import OrderCreateDep, OrderServiceDep
from designshop.orders.interfaces.repositories import OrderFilters
from designshop.orders.schemas import (
    CommunicationCreate,
    OrderEnvelope,
    OrderResponse,
    OrderStatsEnvelope,
    OrderStatusUpdate,
    PaginatedOrderResponse,
)

logger = logging.getLogger(__name__)

order_router = APIRouter()

# Les routes fixes (/admin/stats, /export/csv) doivent précéder /{order_ref}

# ======================================================
# Endpoints Admin
# ======================================================

@order_router.get("/admin/stats", response_model=OrderStatsEnvelope)
async def get_order_stats_endpoint(service: OrderServiceDep, current_admin: CurrentAdmin):
    """Statistiques globales des commandes (admin)."""
    stats = await service.get_stats()
    return OrderStatsEnvelope(stats=stats)


@order_router.get("/export/csv")
async def export_orders_csv_endpoint(service: OrderServiceDep, current_admin: CurrentAdmin):
    """Export CSV de toutes les commandes (admin)."""
    content = await service.export_csv()
    filename = CSV_EXPORT_FILENAME.format(date=utc_now().strftime("%Y-%m-%d"))
    logger.info(f"Export CSV demandé par admin {current_admin.id}.")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

# ======================================================
# Endpoints Utilisateur
# ======================================================

@order_router.get("", response_model=PaginatedOrderResponse)
async def list_orders_endpoint(
    service: OrderServiceDep,
    current_user: CurrentUser,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    search: Optional[str] = Query(default=None),
):
    """Liste paginée : tout pour un admin, ses propres commandes sinon."""
    filters = OrderFilters(
        status=status_filter or None,
        start_date=to_naive_utc(start_date),
        end_date=to_naive_utc(end_date),
        search=search or None,
    )
    orders, total, pages = await service.list_orders(current_user, filters, page=page, limit=limit)
    return PaginatedOrderResponse(
        count=len(orders),
        total=total,
        page=page,
        pages=pages,
        orders=[OrderResponse.from_order(order) for order in orders],
    )


@order_router.post("", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def create_order_endpoint(
    service: OrderServiceDep,
    current_user: CurrentUser,
    order_data: OrderCreateDep,
):
    """Crée une commande pour l'utilisateur authentifié (JSON ou formulaire avec champ ``data``)."""
    order = await service.create_order(order_data, actor=current_user)
    logger.info(f"Commande {order.order_number} créée avec succès pour l'utilisateur {current_user.id}.")
    return OrderEnvelope(message="Order created successfully", order=OrderResponse.from_order(order))


@order_router.get("/{order_ref}", response_model=OrderEnvelope)
async def get_order_endpoint(order_ref: str, service: OrderServiceDep, current_user: CurrentUser):
    """Détail d'une commande par ID ou numéro de commande."""
    order = await service.get_order(order_ref, actor=current_user)
    return OrderEnvelope(order=OrderResponse.from_order(order))


@order_router.put("/{order_ref}/status", response_model=OrderEnvelope)
async def update_order_status_endpoint(
    order_ref: str,
    status_update: OrderStatusUpdate,
    service: OrderServiceDep,
    current_admin: CurrentAdmin,
):
    """
    Change le statut d'une commande (admin) et journalise le changement.

    Par défaut seules les transitions de la table ``ORDER_STATUS_TRANSITIONS`` sont
    acceptées (ex. ``completed`` -> ``pending`` est refusé avec un 400).
    Avec ``ORDER_ENFORCE_TRANSITIONS=false``, tout statut connu est accepté.
    """
    order = await service.set_status(
        order_ref,
        status_update.status,
        actor=current_admin,
        note=status_update.message or None,
    )
    return OrderEnvelope(message="Order status updated successfully", order=OrderResponse.from_order(order))


@order_router.post(
    "/{order_ref}/communication",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def add_communication_endpoint(
    order_ref: str,
    communication: CommunicationCreate,
    service: OrderServiceDep,
    current_user: CurrentUser,
):
    order = await service.add_message(
        order_ref,
        content=communication.message,
        message_type=communication.type,
        actor=current_user,
    )
    return OrderEnvelope(message="Message added successfully", order=OrderResponse.from_order(order))


@order_router.put("/{order_ref}/cancel", response_model=SuccessResponse)
async def cancel_order_endpoint(order_ref: str, service: OrderServiceDep, current_user: CurrentUser):
    await service.cancel_order(order_ref, actor=current_user)
    return SuccessResponse(message="Order cancelled successfully")
