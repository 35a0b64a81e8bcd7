# storefront/api/routers/cart_items.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.schemas import CartItemIn, CartItemOut, QuantityIn
from storefront.repos.cart_repo import CartRepo
from storefront.repos.errors import RowConflict, RowNotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cart_items", tags=["cart"])


@router.get("", response_model=List[CartItemOut])
def list_cart_items(user_id: str = Query(...), db: Session = Depends(get_db)):
    return CartRepo(db).get_cart_items(user_id)


@router.post("", response_model=CartItemOut, status_code=201)
def add_cart_item(payload: CartItemIn, db: Session = Depends(get_db)):
    repo = CartRepo(db)
    try:
        item = repo.add_cart_item(
            CartItemModel(
                user_id=payload.user_id,
                product_id=payload.product_id,
                quantity=payload.quantity,
            )
        )
    except RowNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RowConflict as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Cart item {item.id} created for user {payload.user_id}")
    return item


@router.patch("/{item_id}", response_model=CartItemOut)
def update_cart_item(item_id: str, payload: QuantityIn, db: Session = Depends(get_db)):
    try:
        return CartRepo(db).update_quantity(item_id, payload.quantity)
    except RowNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{item_id}", status_code=204)
def delete_cart_item(item_id: str, db: Session = Depends(get_db)):
    CartRepo(db).delete_cart_item(item_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
def clear_cart_items(user_id: str = Query(...), db: Session = Depends(get_db)):
    deleted = CartRepo(db).delete_cart_items(user_id)
    logger.info(f"Removed {deleted} cart items of user {user_id}")
    return Response(status_code=204)
