# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.repos.errors import RowConflict, RowNotFound


class CartRepo:
    """Operacje na pojedynczych wierszach cart_items, kazda w osobnej transakcji."""

    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: str) -> List[CartItemModel]:
        stmt = select(CartItemModel).where(CartItemModel.user_id == user_id)
        return list(self.db.execute(stmt).unique().scalars().all())

    def get_cart_item(self, item_id: str) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        if self.db.get(ProductModel, item.product_id) is None:
            raise RowNotFound(f"Product {item.product_id} not found")

        self.db.add(item)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise RowConflict(
                f"Cart of user {item.user_id} already holds product {item.product_id}"
            )
        self.db.refresh(item)
        return item

    def update_quantity(self, item_id: str, quantity: int) -> CartItemModel:
        item = self.get_cart_item(item_id)
        if not item:
            raise RowNotFound(f"Cart item {item_id} not found")

        item.quantity = quantity
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_cart_item(self, item_id: str) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.id == item_id))
        self.db.commit()
        return res.rowcount

    def delete_cart_items(self, user_id: str) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        self.db.commit()
        return res.rowcount
