"""
Erreurs HTTP du module d'authentification (401 / 403).

Elles passent par le handler HTTP de l'application et sortent donc sous la
forme ``{success: false, message}``.
"""
from fastapi import HTTPException, status

from designshop.auth.constants import (
    ERROR_CREDENTIALS_INVALID,
    ERROR_TOKEN_INVALID,
    ERROR_TOKEN_MISSING,
    ERROR_PERMISSION_DENIED,
    HEADER_WWW_AUTHENTICATE,
    HEADER_WWW_AUTHENTICATE_VALUE,
)


class NotAuthenticatedException(HTTPException):
    """401 avec l'en-tête ``WWW-Authenticate: Bearer``."""
    detail_message = ERROR_TOKEN_INVALID

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=self.detail_message,
            headers={HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE},
        )


class InvalidCredentialsException(NotAuthenticatedException):
    detail_message = ERROR_CREDENTIALS_INVALID


class TokenInvalidException(NotAuthenticatedException):
    """Token illisible, expiré, ou utilisateur disparu."""
    detail_message = ERROR_TOKEN_INVALID


class TokenMissingException(NotAuthenticatedException):
    detail_message = ERROR_TOKEN_MISSING


class PermissionDeniedException(HTTPException):
    """Utilisateur authentifié sans le rôle admin."""
    def __init__(self):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=ERROR_PERMISSION_DENIED)
