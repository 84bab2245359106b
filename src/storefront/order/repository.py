"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.order.order import Order

PAGE_SIZE = 100


@storefront.repository(part_of=Order)
class OrderRepository:
    """Order lookups beyond get-by-id.

    ``order_number_exists`` is the uniqueness check consulted while
    allocating a new order number. The ``find_*`` methods return every
    match, fetched page by page.
    """

    def order_number_exists(self, order_number: str) -> bool:
        return bool(self._dao.query.filter(order_number=order_number).limit(1).all().items)

    def get_by_order_number(self, order_number: str) -> Order | None:
        results = self._dao.query.filter(order_number=order_number).limit(1).all().items
        return results[0] if results else None

    def find_by_phone(self, customer_phone: str) -> list[Order]:
        return self._fetch_all(self._dao.query.filter(customer_phone=customer_phone))

    def find_by_status(self, status: str) -> list[Order]:
        return self._fetch_all(self._dao.query.filter(status=status))

    def find_all(self) -> list[Order]:
        return self._fetch_all(self._dao.query)

    def _fetch_all(self, query) -> list[Order]:
        query = query.order_by("id")
        orders: list[Order] = []
        offset = 0
        while True:
            page = query.offset(offset).limit(PAGE_SIZE).all().items
            orders.extend(page)
            if len(page) < PAGE_SIZE:
                return orders
            offset += PAGE_SIZE
