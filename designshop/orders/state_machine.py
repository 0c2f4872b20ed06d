"""
Cycle de vie d'une commande.

Les fonctions ``apply_*`` modifient l'objet Order chargé en mémoire (statut,
journal, date de livraison) ; la persistance se fait ensuite en un seul commit
par le repository.

Chaque changement de statut, chaque annulation et chaque message ajoute
exactement une entrée au journal de communication.
"""
import logging
from datetime import datetime
from typing import Optional

from designshop.core.utils import utc_now
from designshop.orders.config import (
    ALLOWED_ORDER_STATUS,
    DEFAULT_COMMUNICATION_TYPE,
    ORDER_STATUS_TRANSITIONS,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    TERMINAL_ORDER_STATUS,
)
from designshop.orders.exceptions import (
    InvalidOrderStatusException,
    InvalidStatusTransitionException,
    OrderAccessForbiddenException,
    OrderCancellationException,
)
from designshop.orders.models import Order, OrderCommunication
from designshop.users.models import UserRead

logger = logging.getLogger(__name__)


def validate_status(status: str) -> None:
    if status not in ALLOWED_ORDER_STATUS:
        raise InvalidOrderStatusException(status, ALLOWED_ORDER_STATUS)


def is_terminal(status: str) -> bool:
    return status in TERMINAL_ORDER_STATUS


def can_transition(current: str, new_status: str) -> bool:
    """Re-confirmer le statut courant est toujours permis (annotation du journal)."""
    if current == new_status:
        return True
    return new_status in ORDER_STATUS_TRANSITIONS.get(current, frozenset())


def ensure_order_access(order: Order, actor: UserRead, action: str = "view") -> None:
    """Propriétaire de la commande ou administrateur."""
    if actor.is_admin or order.customer_id == actor.id:
        return
    logger.warning(f"Accès refusé ({action}) commande {order.id} pour user {actor.id}.")
    raise OrderAccessForbiddenException(action)


def append_communication(
    order: Order,
    content: str,
    sender_id: Optional[int],
    type: str = DEFAULT_COMMUNICATION_TYPE,
    now: Optional[datetime] = None,
) -> OrderCommunication:
    """Ajoute une entrée au journal. ``created_at`` ne recule jamais par rapport à la dernière entrée."""
    created_at = now or utc_now()
    if order.communication:
        last_created_at = order.communication[-1].created_at
        if last_created_at and created_at < last_created_at:
            created_at = last_created_at

    entry = OrderCommunication(
        sender_id=sender_id,
        content=content,
        type=type,
        created_at=created_at,
    )
    order.communication.append(entry)
    # Un ajout au journal seul ne rend pas la ligne ``orders`` modifiée
    order.updated_at = created_at
    return entry


def apply_status_change(
    order: Order,
    new_status: str,
    actor: UserRead,
    note: Optional[str] = None,
    enforce_transitions: bool = True,
    now: Optional[datetime] = None,
) -> str:
    """
    Change le statut, journalise, et date la livraison au premier passage à ``completed``.

    Returns:
        L'ancien statut.
    """
    validate_status(new_status)
    old_status = order.status

    if not can_transition(old_status, new_status):
        if enforce_transitions:
            raise InvalidStatusTransitionException(old_status, new_status)
        logger.warning(
            f"Transition hors table {old_status} -> {new_status} acceptée pour commande {order.id} "
            f"(ORDER_ENFORCE_TRANSITIONS désactivé)."
        )

    timestamp = now or utc_now()
    order.status = new_status
    append_communication(
        order,
        content=note or f"Order status changed from {old_status} to {new_status}",
        sender_id=actor.id,
        now=timestamp,
    )

    if new_status == STATUS_COMPLETED and order.actual_delivery_date is None:
        order.actual_delivery_date = timestamp

    return old_status


def apply_cancel(order: Order, actor: UserRead, now: Optional[datetime] = None) -> None:
    """Annule une commande non terminée ; l'entrée du journal indique qui a annulé."""
    if is_terminal(order.status):
        raise OrderCancellationException(order.status)

    order.status = STATUS_CANCELLED
    cancelled_by = "admin" if actor.is_admin else "customer"
    append_communication(
        order,
        content=f"Order cancelled by {cancelled_by}",
        sender_id=actor.id,
        now=now,
    )
