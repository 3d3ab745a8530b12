"""Exceptions raised at the boundary of the duplicate-content engine."""


class DuplicateContentError(Exception):
    """Base class for all engine errors."""


class InvalidInput(DuplicateContentError, ValueError):
    """The caller passed a malformed product list or product record."""


class ProductNotFound(DuplicateContentError, LookupError):
    """The requested product id is not part of the catalog."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id
