from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# ======================================================
# Configuration Commune Pydantic
# ======================================================

class OrmBaseModel(BaseModel):
    """Schéma API lisible depuis les objets ORM, exposé en camelCase."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CommandModel(BaseModel):
    """Corps de requête : accepte camelCase ou snake_case, ignore les champs inconnus."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ======================================================
# Enveloppes de réponse
# ======================================================

class SuccessResponse(OrmBaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[List[Dict[str, Any]]] = None
    error: Optional[str] = None
