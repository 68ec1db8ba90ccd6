"""Error taxonomy for cart and checkout operations.

Every error carries a human-readable message plus optional details that are
rendered alongside it (stock conflicts carry ``available``). The HTTP layer
maps each class to its status code; nothing inside the engine retries them
except ``StaleCartError``.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = {key: value for key, value in details.items() if value is not None}

    def to_dict(self):
        return {"message": self.message, **self.details}


class NotFound(StorefrontError):
    """A referenced product, cart line, address or order does not exist."""

    status_code = 404


class InvalidInput(StorefrontError):
    """A field is malformed, missing, or names an option the product does not offer."""

    status_code = 400


class InvalidState(StorefrontError):
    """The cart or order is in a state the operation cannot proceed from."""

    status_code = 400


class Conflict(StorefrontError):
    """Live catalog state no longer supports the request (stock, variant, activity)."""

    status_code = 409

    def __init__(self, message, available=None, **details):
        super().__init__(message, available=available, **details)
        self.available = available


class StaleCartError(Conflict):
    """The cart changed underneath a write; the caller may re-run the whole command."""


class Unauthorized(StorefrontError):
    status_code = 401
