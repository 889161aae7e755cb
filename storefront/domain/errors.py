# storefront/domain/errors.py
"""
Bledy domenowe. Serwisy rzucaja je, routery tlumacza na kody HTTP:
ValidationError -> 400, NotFoundError -> 404, ConflictError -> 409,
DownstreamUnavailable -> 503.
"""


class CartError(Exception):
    pass


class ValidationError(CartError):
    """Niepoprawne dane wejsciowe, nie ponawiamy."""


class InvalidOwnerError(ValidationError):
    def __init__(self, message: str = "Wymagany userId albo sessionId"):
        super().__init__(message)


class NotFoundError(CartError):
    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is not None:
            super().__init__(f"{entity} {entity_id} nie istnieje")
        else:
            super().__init__(f"{entity} nie istnieje")


class ConflictError(CartError):
    pass


class DownstreamUnavailable(CartError):
    """Baza albo inny zasob niedostepny."""
