import json
import logging
from typing import Annotated

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.core.errors import format_validation_errors
from designshop.database import get_db_session
from designshop.orders.exceptions import OrderValidationException
from designshop.orders.interfaces.repositories import AbstractOrderRepository
from designshop.orders.repositories import SQLAlchemyOrderRepository
from designshop.orders.schemas import OrderCreate
from designshop.orders.service import OrderService
from designshop.products.repositories import SQLAlchemyProductRepository

logger = logging.getLogger(__name__)

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

# --- Repository Dependencies ---

def get_order_repository(session: SessionDep) -> AbstractOrderRepository:
    """Fournit une instance du repository de commandes."""
    return SQLAlchemyOrderRepository(db_session=session)


def get_product_repository(session: SessionDep) -> SQLAlchemyProductRepository:
    return SQLAlchemyProductRepository(db_session=session)


OrderRepositoryDep = Annotated[AbstractOrderRepository, Depends(get_order_repository)]
ProductRepositoryDep = Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)]

# --- Service Dependency ---

def get_order_service(
    order_repository: OrderRepositoryDep,
    product_repository: ProductRepositoryDep,
) -> OrderService:
    logger.debug("Fourniture de OrderService")
    return OrderService(order_repository=order_repository, product_repository=product_repository)


OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]

# --- Corps de création ---

async def parse_order_create(request: Request) -> OrderCreate:
    """
    Lit le corps de ``POST /orders``.

    Accepte du JSON, ou un formulaire multipart dont le champ ``data`` contient
    la commande sérialisée en JSON (envoi conjoint d'une capture de paiement).
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
            form = await request.form()
            raw_data = form.get("data")
            payload = json.loads(raw_data) if isinstance(raw_data, str) and raw_data else {}
        else:
            body = await request.body()
            payload = json.loads(body) if body else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Corps de commande illisible: {e}")
        raise OrderValidationException("Invalid order data")

    if not isinstance(payload, dict):
        raise OrderValidationException("Invalid order data")

    try:
        return OrderCreate.model_validate(payload)
    except ValidationError as e:
        raise OrderValidationException("Validation failed", errors=format_validation_errors(e.errors()))


OrderCreateDep = Annotated[OrderCreate, Depends(parse_order_create)]
