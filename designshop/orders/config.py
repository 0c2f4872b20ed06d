"""
Configuration spécifique au module Orders.
Contient les constantes du cycle de vie des commandes, de la tarification et de l'export.
"""

from typing import Dict, FrozenSet, List

# --- Statuts ---
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_IN_PROGRESS = "in-progress"
STATUS_REVIEW = "review"
STATUS_REVISION = "revision"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

# Ordre d'avancement nominal d'une commande
ALLOWED_ORDER_STATUS: List[str] = [
    STATUS_PENDING,
    STATUS_CONFIRMED,
    STATUS_IN_PROGRESS,
    STATUS_REVIEW,
    STATUS_REVISION,
    STATUS_COMPLETED,
    STATUS_CANCELLED,
]

TERMINAL_ORDER_STATUS: FrozenSet[str] = frozenset({STATUS_COMPLETED, STATUS_CANCELLED})

# Transitions autorisées (en plus de la re-confirmation du statut courant).
# Avancement uniquement vers l'avant, boucle de révision, annulation depuis tout statut non terminal.
ORDER_STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    STATUS_PENDING: frozenset({
        STATUS_CONFIRMED, STATUS_IN_PROGRESS, STATUS_REVIEW, STATUS_REVISION,
        STATUS_COMPLETED, STATUS_CANCELLED,
    }),
    STATUS_CONFIRMED: frozenset({
        STATUS_IN_PROGRESS, STATUS_REVIEW, STATUS_REVISION, STATUS_COMPLETED, STATUS_CANCELLED,
    }),
    STATUS_IN_PROGRESS: frozenset({
        STATUS_REVIEW, STATUS_REVISION, STATUS_COMPLETED, STATUS_CANCELLED,
    }),
    STATUS_REVIEW: frozenset({STATUS_REVISION, STATUS_COMPLETED, STATUS_CANCELLED}),
    STATUS_REVISION: frozenset({
        STATUS_IN_PROGRESS, STATUS_REVIEW, STATUS_COMPLETED, STATUS_CANCELLED,
    }),
    STATUS_COMPLETED: frozenset(),
    STATUS_CANCELLED: frozenset(),
}

# --- Journal de communication ---
COMMUNICATION_TYPES: List[str] = ["message", "file_upload", "revision_request", "status_update"]
DEFAULT_COMMUNICATION_TYPE = "message"
MAX_STATUS_NOTE_LENGTH = 500
MAX_MESSAGE_LENGTH = 1000

# --- Tarification ---
DEFAULT_TIER = "base"
DEFAULT_QUANTITY = 1

# --- Valeurs par défaut à la création ---
DEFAULT_COUNTRY = "India"
DEFAULT_PAYMENT_STATUS = "pending"
ORDER_NUMBER_PREFIX = "ORD"
# Plus grand ID stockable dans la colonne INTEGER
MAX_ORDER_ID = 2**31 - 1

# --- Statistiques ---
ORDER_TREND_DAYS = 365

# --- Export CSV ---
CSV_EXPORT_HEADERS: List[str] = [
    "Order Number",
    "Customer Name",
    "Customer Email",
    "Status",
    "Total Amount",
    "Items Count",
    "Products",
    "Created Date",
    "Updated Date",
    "Shipping Address",
    "Phone",
]
CSV_EXPORT_FILENAME = "orders_export_{date}.csv"
