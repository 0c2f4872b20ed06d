"""
Calcul des prix des lignes de commande.

Fonctions pures : aucune écriture, aucune requête. Le produit est fourni déjà
chargé par l'appelant.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from designshop.orders.config import DEFAULT_QUANTITY, DEFAULT_TIER
from designshop.orders.exceptions import InvalidTierException
from designshop.products.models import Product

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass
class PricedLineItem:
    """Ligne de commande normalisée, prix copié depuis le catalogue."""
    product_id: int
    package_type: str
    quantity: int
    price: Decimal
    customizations: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderPricing:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def to_decimal(value: Any) -> Decimal:
    """Convertit un prix JSON (int, float, str) sans artefact binaire."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def resolve_tier(tier: Optional[str], package_type: Optional[str] = None) -> str:
    return tier or package_type or DEFAULT_TIER


def flatten_customizations(customization: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """``{"color": "red"}`` -> ``[{"option_name": "color", "selected_value": "red"}]``, ordre conservé."""
    if not customization:
        return []
    return [
        {"option_name": key, "selected_value": value}
        for key, value in customization.items()
    ]


def price_line_item(
    product: Product,
    tier: Optional[str] = None,
    quantity: Optional[int] = None,
    customization: Optional[Mapping[str, Any]] = None,
    package_type: Optional[str] = None,
) -> PricedLineItem:
    """
    Résout le prix unitaire du palier demandé et construit la ligne normalisée.

    Raises:
        InvalidTierException: palier absent de la grille ou sans prix
    """
    resolved_tier = resolve_tier(tier, package_type)
    tier_price = (product.price or {}).get(resolved_tier)
    if not tier_price:
        logger.warning(f"Palier '{resolved_tier}' absent pour le produit {product.id}")
        raise InvalidTierException(resolved_tier, product_id=product.id)

    return PricedLineItem(
        product_id=product.id,
        package_type=resolved_tier,
        quantity=quantity or DEFAULT_QUANTITY,
        price=to_decimal(tier_price),
        customizations=flatten_customizations(customization),
    )


def compute_pricing(line_items: Iterable[PricedLineItem], tax_rate: Any) -> OrderPricing:
    """subtotal = somme(prix * quantité), tax = subtotal * taux (arrondi au centime), total = subtotal + tax."""
    subtotal = sum((item.line_total for item in line_items), Decimal("0"))
    tax = (subtotal * to_decimal(tax_rate)).quantize(CENT, rounding=ROUND_HALF_UP)
    return OrderPricing(subtotal=subtotal, tax=tax, total=subtotal + tax)
