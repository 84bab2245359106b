"""Errors raised by the order engine that are not field validation failures."""


class ProductNotFound(LookupError):
    """An order line references a product the catalogue does not know."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class OrderNumberExhausted(Exception):
    """Every generated order-number candidate collided with an existing order."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique order number after {attempts} attempts")
