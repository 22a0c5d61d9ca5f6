"""In-memory implementation of ProductRepository.

Products are reloaded with the catalog at the start of every session, so
they are never written to disk.
"""

from __future__ import annotations

from boxoffice.domain.model.product import Product
from boxoffice.domain.repository.product_repository import ProductRepository


class InMemoryProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[int, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: int) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product
