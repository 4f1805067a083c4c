"""Exceptions raised by the rental engines and the persistence layer."""


class RentalShopError(Exception):
    """Base exception for rental shop errors."""
    pass


class ValidationError(RentalShopError):
    """Raised when caller input is malformed (empty line items, bad quantity, missing fields)."""
    pass


class InvalidStateError(RentalShopError):
    """Raised when a rental is in the wrong lifecycle state for an operation."""
    pass


class ReferencedError(RentalShopError):
    """Raised when a delete is refused because a rental still references the record."""
    pass


class BackingStoreUnavailable(RentalShopError):
    """Raised when the database is not configured or cannot be reached."""
    pass


class NotFoundError(RentalShopError):
    """Raised when a record does not exist."""
    pass
