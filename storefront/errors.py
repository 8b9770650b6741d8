"""
Erreurs métier de la boutique.
- ValidationError: champs de requête absents/invalides (corrigeables par l'utilisateur).
- PaymentNotSucceededError: Stripe ne rapporte pas le PaymentIntent en "succeeded".
- MissingOrderDataError: metadata de commande absente sur un PaymentIntent réussi.
- InternalError: Stripe ou Supabase injoignable / en échec (message générique côté client).
Chaque erreur porte son status_code HTTP; le rendu JSON est fait par
storefront.app_setup.exception_handlers.
"""


class StorefrontError(Exception):
    """Base des erreurs métier."""
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    status_code = 400


class ProductNotFoundError(StorefrontError):
    status_code = 404

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class PaymentNotSucceededError(StorefrontError):
    status_code = 400

    def __init__(self, status: str):
        self.status = status
        super().__init__("Payment not successful")


class MissingOrderDataError(StorefrontError):
    status_code = 400

    def __init__(self, message: str = "Missing order information in payment intent"):
        super().__init__(message)


class InternalError(StorefrontError):
    status_code = 500
