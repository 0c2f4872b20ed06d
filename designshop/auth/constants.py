"""
Constantes pour le module d'authentification.
"""

# --- Messages d'erreur ---
ERROR_CREDENTIALS_INVALID = "Invalid email or password"
ERROR_TOKEN_INVALID = "Not authorized, token failed"
ERROR_TOKEN_MISSING = "Not authorized, no token"
ERROR_PERMISSION_DENIED = "Access denied. Admin privileges required."

# --- En-têtes HTTP ---
HEADER_WWW_AUTHENTICATE = "WWW-Authenticate"
HEADER_WWW_AUTHENTICATE_VALUE = "Bearer"
