"""Rôles utilisateurs reconnus par l'autorisation."""

ROLE_USER = "user"
ROLE_ADMIN = "admin"
