"""
Corps de requête du panier (pydantic).
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CART_MESSAGES = {
    "productId": "productId is required",
    "quantity": "Invalid quantity",
    "selectedVariants": "selectedVariants must be an object",
}

class CartLineSelection(BaseModel):
    """Sélection de variantes d'une ligne ({} équivaut à aucune sélection)."""
    model_config = ConfigDict(populate_by_name=True)

    selected_variants: Optional[Dict[str, str]] = Field(default=None, alias="selectedVariants")

    @field_validator("selected_variants", mode="before")
    @classmethod
    def variants_as_strings(cls, v: Any) -> Optional[Dict[str, str]]:
        if v is None or v == {}:
            return None
        if not isinstance(v, dict):
            raise ValueError("selectedVariants must be an object")
        return {str(k): str(val) for k, val in v.items()}

class AddCartItemRequest(CartLineSelection):
    product_id: str = Field(alias="productId")
    quantity: int = Field(default=1, ge=1, strict=True)

    @field_validator("product_id", mode="before")
    @classmethod
    def product_id_not_blank(cls, v: Any) -> str:
        value = str(v).strip() if isinstance(v, (str, int)) and not isinstance(v, bool) else ""
        if not value:
            raise ValueError("productId is required")
        return value

class UpdateCartItemRequest(CartLineSelection):
    # < 1 supprime la ligne
    quantity: int = Field(strict=True)
