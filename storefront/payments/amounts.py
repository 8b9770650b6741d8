"""
Conversion montants <-> unités mineures Stripe.
"""
from typing import Any

# Devises sans décimales chez Stripe (montant transmis tel quel)
ZERO_DECIMAL_CURRENCIES = {
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
}

# Plafond Stripe d'un PaymentIntent, en unités mineures
STRIPE_MAX_AMOUNT = 99_999_999

def format_amount_for_stripe(amount: float, currency: str) -> int:
    """12.5 usd -> 1250; 1200 jpy -> 1200."""
    if (currency or "").lower() in ZERO_DECIMAL_CURRENCIES:
        return int(round(amount))
    return int(round(amount * 100))

def format_amount_from_stripe(amount: Any, currency: str) -> float:
    """2599 usd -> 25.99."""
    value = int(amount or 0)
    if (currency or "").lower() in ZERO_DECIMAL_CURRENCIES:
        return float(value)
    return value / 100
