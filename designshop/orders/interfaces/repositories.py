from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from designshop.orders.models import Order


@dataclass
class OrderFilters:
    """Critères de listage ; ``customer_id`` restreint aux commandes d'un client."""
    customer_id: Optional[int] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None


class AbstractOrderRepository(ABC):
    """Interface abstraite pour le repository des commandes."""

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """Commande avec client, lignes (et produits) et journal chargés."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_reference(self, order_ref: str) -> Optional[Order]:
        """Recherche par ID système, puis par numéro de commande."""
        raise NotImplementedError

    @abstractmethod
    async def list_orders(self, filters: OrderFilters, limit: int, offset: int) -> Tuple[List[Order], int]:
        """Page de commandes (plus récentes d'abord) et nombre total correspondant aux filtres."""
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[Order]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Persiste une nouvelle commande et ses lignes en une transaction."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, order: Order) -> Order:
        """Persiste les modifications d'une commande existante en un seul commit."""
        raise NotImplementedError

    # --- Statistiques ---

    @abstractmethod
    async def count(self, status: Optional[str] = None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def sum_revenue(self, status: Optional[str] = None) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    async def count_by_status(self) -> List[Tuple[str, int]]:
        """``(status, count)`` triés par nombre décroissant."""
        raise NotImplementedError

    @abstractmethod
    async def monthly_trend(self, since: datetime) -> List[Tuple[int, int, int, Decimal]]:
        """``(year, month, count, revenue)`` pour les commandes créées depuis ``since``."""
        raise NotImplementedError
