"""Exceptions de base partagées par tous les domaines."""
from typing import Any, Dict, List, Optional

from fastapi import status


class DomainException(Exception):
    """Classe de base : porte le message public et le code HTTP associé."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message
        self.errors = errors
        super().__init__(self.message)


class ValidationException(DomainException):
    """Entrée invalide ou manquante."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenException(DomainException):
    """Utilisateur authentifié mais non autorisé."""
    status_code = status.HTTP_403_FORBIDDEN


class IllegalStateException(DomainException):
    """Opération refusée dans l'état courant de l'entité."""
    status_code = status.HTTP_400_BAD_REQUEST


class DatabaseUnavailableException(DomainException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self):
        super().__init__("Database connection unavailable. Please try again later.")
