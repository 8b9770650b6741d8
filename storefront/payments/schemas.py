"""
Corps de requête du checkout (pydantic).
Les messages renvoyés au client pour chaque champ sont dans CREATE_INTENT_MESSAGES.
"""
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.config import DEFAULT_CURRENCY

_CURRENCY_RE = re.compile(r"^[a-z]{3}$")

CREATE_INTENT_MESSAGES = {
    "amount": "Invalid amount",
    "customerEmail": "A valid customerEmail is required",
    "cartItems": "Missing required order information",
    "cartItems[]": "Invalid cart item",
    "currency": "Invalid currency",
}

class CartItemPayload(BaseModel):
    """Ligne de panier embarquée dans la demande; les champs autres que id sont conservés tels quels."""
    model_config = ConfigDict(extra="allow")

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def id_not_blank(cls, v: Any) -> str:
        if isinstance(v, bool) or not isinstance(v, (str, int)) or not str(v).strip():
            raise ValueError("id is required")
        return str(v).strip()

class CreatePaymentIntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(gt=0, allow_inf_nan=False, strict=True)
    customer_email: str = Field(alias="customerEmail")
    cart_items: List[CartItemPayload] = Field(alias="cartItems", min_length=1)
    currency: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("customer_email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("invalid email")
        return v

    @field_validator("currency")
    @classmethod
    def known_currency_format(cls, v: Optional[str]) -> str:
        v = (v or DEFAULT_CURRENCY).strip().lower()
        if not _CURRENCY_RE.match(v):
            raise ValueError("invalid currency")
        return v
