"""In-memory catalogue adapter — seeded by tests and local development."""

from storefront.catalogue.port import ProductCatalogue, ProductInfo, VariantGroup, VariantValue


class InMemoryCatalogue(ProductCatalogue):
    def __init__(self):
        self.products: dict[str, ProductInfo] = {}

    def add_product(
        self,
        product_id: str,
        name: str,
        price: float,
        slug: str | None = None,
        images=(),
        status: str = "Active",
        variant_groups: dict | None = None,
    ) -> ProductInfo:
        """Register a product.

        ``variant_groups`` maps a group name to its labels; a label prefixed
        with ``!`` is registered as disabled (``{"Size": ["S", "!M"]}``).
        """
        groups = tuple(
            VariantGroup(
                name=group_name,
                values=tuple(
                    VariantValue(label=label.lstrip("!"), enabled=not label.startswith("!")) for label in labels
                ),
            )
            for group_name, labels in (variant_groups or {}).items()
        )
        product = ProductInfo(
            product_id=product_id,
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            price=price,
            images=tuple(images),
            status=status,
            variant_groups=groups,
        )
        self.products[product_id] = product
        return product

    def remove_product(self, product_id: str) -> None:
        self.products.pop(product_id, None)

    def get_product(self, product_id: str) -> ProductInfo | None:
        return self.products.get(product_id)
