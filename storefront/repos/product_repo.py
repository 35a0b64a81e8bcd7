# storefront/repos/product_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(
        self,
        category: str | None = None,
        featured: bool | None = None,
        limit: int | None = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel)
        if category:
            stmt = stmt.where(ProductModel.category == category)
        if featured is not None:
            stmt = stmt.where(ProductModel.featured.is_(featured))
        stmt = stmt.order_by(ProductModel.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def add_products(self, products: List[ProductModel]) -> None:
        self.db.add_all(products)
        self.db.commit()
