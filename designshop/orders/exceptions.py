"""Exceptions spécifiques au domaine Order."""
from typing import Iterable, Optional

from designshop.core.exceptions import (
    ForbiddenException,
    IllegalStateException,
    NotFoundException,
    ValidationException,
)


class OrderNotFoundException(NotFoundException):
    """Levée lorsqu'une commande n'est trouvée ni par ID ni par numéro."""
    def __init__(self, order_ref: Optional[str] = None):
        super().__init__("Order not found")
        self.order_ref = order_ref


class OrderAccessForbiddenException(ForbiddenException):
    """Levée quand l'utilisateur n'est ni propriétaire de la commande ni admin."""
    def __init__(self, action: str = "view"):
        super().__init__(f"Access denied. You can only {action} your own orders.")
        self.action = action


class OrderValidationException(ValidationException):
    """Données de commande invalides (articles, adresse, corps de requête)."""
    pass


class ProductNotFoundException(ValidationException):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class InvalidTierException(ValidationException):
    """Palier tarifaire absent de la grille du produit ou sans prix."""
    def __init__(self, tier: str, product_id=None):
        super().__init__(f"Pricing tier '{tier}' not found")
        self.tier = tier
        self.product_id = product_id


class InvalidOrderStatusException(ValidationException):
    """Levée lorsque le statut fourni ne fait pas partie des statuts connus."""
    def __init__(self, status: str, allowed: Iterable[str]):
        allowed_list = list(allowed)
        super().__init__(
            "Invalid status",
            errors=[{"field": "status", "message": f"Status must be one of: {', '.join(allowed_list)}"}],
        )
        self.status = status
        self.allowed = allowed_list


class InvalidStatusTransitionException(ValidationException):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change order status from {current} to {requested}")
        self.current = current
        self.requested = requested


class OrderCancellationException(IllegalStateException):
    """Annulation impossible : la commande est déjà terminée ou annulée."""
    def __init__(self, status: str):
        super().__init__("Order cannot be cancelled in its current status")
        self.status = status
