# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.schemas import (
    OrderCreate,
    OrderDetailOut,
    OrderItemCreate,
    OrderItemOut,
    OrderOut,
)
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["orders"])


@router.post("/orders", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    """
    Zapisuje sam naglowek zamowienia. Pozycje przychodza osobnym
    wywolaniem /order_items.
    """
    order = OrderRepo(db).create_order(
        OrderModel(
            user_id=payload.user_id,
            total=payload.total,
            shipping_address=payload.shipping_address,
            status=payload.status.value,
        )
    )
    logger.info(f"Order {order.id} created for user {payload.user_id}, total {payload.total}")
    return order


@router.get("/orders", response_model=List[OrderOut])
def list_orders(user_id: str = Query(...), db: Session = Depends(get_db)):
    return OrderRepo(db).get_orders_by_user(user_id)


@router.get("/orders/{order_id}", response_model=OrderDetailOut)
def get_order(order_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    order = OrderRepo(db).get_order(order_id)

    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    if order.user_id != user_id:
        raise HTTPException(status_code=403, detail="Access to order denied")

    return order


@router.post("/order_items", response_model=List[OrderItemOut], status_code=201)
def create_order_items(payload: List[OrderItemCreate], db: Session = Depends(get_db)):
    if not payload:
        raise HTTPException(status_code=400, detail="No order items given")

    items = OrderRepo(db).create_order_items(
        [
            OrderItemModel(
                order_id=i.order_id,
                product_id=i.product_id,
                quantity=i.quantity,
                price=i.price,
            )
            for i in payload
        ]
    )
    logger.info(f"Stored {len(items)} items for order {payload[0].order_id}")
    return items
