# storefront/services/product_service.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductCreate, ProductFilters, ProductOut, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Katalog produktow.
    query: lista (tylko aktywne), szczegoly, kategorie
    commands (admin): create, update, soft delete
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    #query
    def list_products(self, filters: ProductFilters) -> tuple[list[ProductOut], int]:
        products, total = self.repo.list_active(
            search=filters.search,
            category=filters.category,
            min_price=filters.min_price,
            max_price=filters.max_price,
            page=filters.page,
            page_size=filters.page_size,
        )
        return [ProductOut.model_validate(p) for p in products], total

    def get_product(self, product_id: int) -> ProductOut:
        return ProductOut.model_validate(self._get_or_404(product_id))

    def list_categories(self) -> list[str]:
        return self.repo.list_categories()

    #commands
    def create_product(self, payload: ProductCreate) -> ProductOut:
        product = ProductModel(**payload.model_dump(), is_active=True)
        self.repo.add_product(product)
        self.db.commit()

        logger.info(f"Created product {product.id} ({product.name})")
        return ProductOut.model_validate(product)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductOut:
        product = self._get_or_404(product_id)

        # tylko pola przeslane przez klienta
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(product, field, value)

        self.db.commit()

        logger.info(f"Updated product {product.id}")
        return ProductOut.model_validate(product)

    def delete_product(self, product_id: int) -> None:
        product = self._get_or_404(product_id)

        # soft delete, wiersz zostaje dla historycznych zamowien
        product.is_active = False
        self.db.commit()

        logger.info(f"Deactivated product {product.id}")

    def _get_or_404(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product
