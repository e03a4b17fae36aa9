"""Product service layer (Use Cases).

Orchestrates business logic for the Product catalog, delegating
persistence to the injected repositories.

Business rules enforced here:
- Enterprise must exist.
- Name must be unique within the enterprise.
- Price greater than zero, at most ``MAX_PRICE``, two decimal places.
- Initial stock between zero and ``MAX_STOCK``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.enterprises.exceptions import EnterpriseNotFound
from modules.products.constants import MAX_PRICE, MAX_STOCK, PRICE_DECIMAL_PLACES
from modules.products.exceptions import (
    InvalidProductData,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.enterprises.repositories.interfaces import IEnterpriseRepository
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives its repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        enterprise_repository: IEnterpriseRepository,
    ) -> None:
        self._repo = repository
        self._enterprise_repo = enterprise_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing catalog rules.

        Raises:
            InvalidProductData: price or stock out of range.
            EnterpriseNotFound: the owning enterprise does not exist.
            ProductAlreadyExists: the name is taken within the enterprise.
        """
        log = logger.bind(enterprise_id=str(dto.enterprise_id), name=dto.name)

        _validate_price(dto.price)
        _validate_stock(dto.stock)
        self._require_enterprise(dto.enterprise_id)
        self._ensure_unique_name(dto.enterprise_id, dto.name)

        product = Product(
            enterprise_id=dto.enterprise_id,
            name=dto.name,
            description=dto.description.strip(),
            price=dto.price,
            stock=dto.stock,
        )
        product = self._save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update name, description or price of an existing product.

        Raises:
            ProductNotFound: the product does not exist.
            InvalidProductData: price out of range.
            ProductAlreadyExists: the new name is taken within the enterprise.
        """
        product = self.get_product(id)
        log = logger.bind(product_id=str(product.id))

        if dto.price is not None:
            _validate_price(dto.price)
            product.price = dto.price
        if dto.name is not None and dto.name != product.name:
            self._ensure_unique_name(product.enterprise_id, dto.name, exclude=product.id)
            product.name = dto.name
        if dto.description is not None:
            product.description = dto.description.strip()

        product = self._save(product)
        log.info("product.updated")
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(str(id))
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """Return a list of products, optionally filtered."""
        return self._repo.list(filters)

    def list_products_by_enterprise(self, enterprise_id: UUID) -> List[Product]:
        """Return the catalog of one enterprise.

        Raises:
            EnterpriseNotFound: if the enterprise does not exist.
        """
        self._require_enterprise(enterprise_id)
        return self._repo.list({"enterprise_id": enterprise_id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_enterprise(self, enterprise_id: UUID) -> None:
        if not self._enterprise_repo.get_by_id(str(enterprise_id)):
            raise EnterpriseNotFound(f"Enterprise {enterprise_id} not found.")

    def _save(self, product: Product) -> Product:
        """Persist *product*; a unique-name index race becomes a domain error."""
        try:
            return self._repo.save(product)
        except IntegrityError:
            existing = self._repo.get_by_name(product.enterprise_id, product.name)
            if existing and existing.id != product.id:
                raise ProductAlreadyExists(
                    f"Enterprise {product.enterprise_id} already has a product "
                    f"named '{product.name}'."
                )
            raise

    def _ensure_unique_name(
        self, enterprise_id: UUID, name: str, exclude: Optional[UUID] = None
    ) -> None:
        existing = self._repo.get_by_name(enterprise_id, name)
        if existing and existing.id != exclude:
            logger.warning("product.duplicate_name", enterprise_id=str(enterprise_id))
            raise ProductAlreadyExists(
                f"Enterprise {enterprise_id} already has a product named '{name}'."
            )


def _validate_price(price: Decimal) -> None:
    if price <= 0:
        raise InvalidProductData("Price must be greater than zero.")
    if price > MAX_PRICE:
        raise InvalidProductData(f"Price cannot exceed {MAX_PRICE}.")
    if -price.normalize().as_tuple().exponent > PRICE_DECIMAL_PLACES:
        raise InvalidProductData(
            f"Price must have at most {PRICE_DECIMAL_PLACES} decimal places."
        )


def _validate_stock(stock: int) -> None:
    if stock < 0:
        raise InvalidProductData("Stock cannot be negative.")
    if stock > MAX_STOCK:
        raise InvalidProductData(f"Stock cannot exceed {MAX_STOCK} units.")
