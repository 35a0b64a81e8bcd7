# storefront/services/order_assembler.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from storefront.domain.schemas import (
    CartItemOut,
    OrderItemOut,
    OrderOut,
    OrderStatus,
    ShippingAddress,
    ShippingValidationError,
)
from storefront.services.cart_store import CartContext, CartStore
from storefront.services.navigation import AUTH_PATH, ORDERS_PATH, PRODUCTS_PATH, Redirect
from storefront.services.notification_service import (
    ORDER_FAILED,
    ORDER_PLACED,
    NotificationService,
)
from storefront.services.store_client import StoreError
from storefront.utils.settings import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def ensure_can_checkout(cart: CartStore) -> CartContext:
    """Bez uzytkownika -> logowanie, pusty koszyk -> katalog."""
    if cart.context is None:
        raise Redirect(AUTH_PATH)
    if cart.is_empty():
        raise Redirect(PRODUCTS_PATH)
    return cart.context


def shipping_cost(subtotal: Decimal) -> Decimal:
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return Decimal("0.00")
    return SHIPPING_FEE.quantize(CENT)


@dataclass(frozen=True)
class ReviewSummary:
    address: ShippingAddress
    items: Tuple[CartItemOut, ...]
    subtotal: Decimal
    shipping: Decimal
    total: Decimal


@dataclass(frozen=True)
class PlacedOrder:
    order: OrderOut
    items: List[OrderItemOut]
    cart_cleared: bool
    redirect_to: str = ORDERS_PATH


class OrderAssembler:
    """
    Zamienia koszyk w zamowienie: naglowek, pozycje, czyszczenie koszyka.

    Trzy niezalezne zapisy bez transakcji. Jesli pozycje sie nie zapisza,
    naglowek zostaje osierocony (bez kompensacji). Nieudane czyszczenie
    koszyka nie cofa zamowienia.
    """

    def __init__(self, cart: CartStore):
        self.cart = cart

    async def place_order(self, address: ShippingAddress) -> PlacedOrder:
        ctx = ensure_can_checkout(self.cart)

        # snapshot koszyka z chwili skladania zamowienia
        items = self.cart.snapshot()
        total = self.cart.total_price.quantize(CENT)

        res = await ctx.store.insert_order(
            ctx.user_id, total, address.as_payload(), OrderStatus.CONFIRMED.value
        )
        if not res.ok:
            raise res.error
        order = self._parse(OrderOut, res.data)

        logger.info(f"Order {order.id} created for user {ctx.user_id}, total {total}")

        rows: List[Dict[str, Any]] = [
            {
                "order_id": order.id,
                "product_id": i.product_id,
                "quantity": i.quantity,
                "price": i.unit_price,
            }
            for i in items
        ]
        res = await ctx.store.insert_order_items(rows)
        if not res.ok:
            logger.error(f"Order {order.id} left without items: {res.error}")
            raise res.error
        order_items = [self._parse(OrderItemOut, r) for r in res.data or []]

        cleared = await self.cart.clear_cart()
        if not cleared:
            logger.warning(f"Order {order.id} placed but cart of user {ctx.user_id} was not cleared")

        return PlacedOrder(order=order, items=order_items, cart_cleared=cleared)

    @staticmethod
    def _parse(model, data):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise StoreError(f"Malformed store response: {e}")


class CheckoutStep(str, Enum):
    SHIPPING = "shipping"
    REVIEW = "review"


class CheckoutFlow:
    """Dwa kroki: adres (Shipping) -> przeglad i zlozenie zamowienia (Review)."""

    def __init__(self, cart: CartStore, notifier: NotificationService):
        self.cart = cart
        self.notifier = notifier
        self.assembler = OrderAssembler(cart)

        self.step = CheckoutStep.SHIPPING
        self.address: ShippingAddress | None = None
        self.errors: Dict[str, str] = {}
        self.placing = False
        self.placed: PlacedOrder | None = None

    @classmethod
    def open(cls, cart: CartStore, notifier: NotificationService) -> "CheckoutFlow":
        ensure_can_checkout(cart)
        return cls(cart, notifier)

    def submit_shipping(self, data: Dict[str, Any]) -> Dict[str, str]:
        self.errors = {}
        try:
            address = ShippingAddress.parse(data)
        except ShippingValidationError as e:
            self.errors = e.errors
            return self.errors

        self.address = address
        self.step = CheckoutStep.REVIEW
        return self.errors

    def back(self) -> None:
        if self.step == CheckoutStep.REVIEW:
            self.step = CheckoutStep.SHIPPING

    def review(self) -> ReviewSummary:
        if self.step != CheckoutStep.REVIEW or self.address is None:
            raise ValueError("Shipping address has not been confirmed")

        subtotal = self.cart.total_price.quantize(CENT)
        shipping = shipping_cost(subtotal)
        return ReviewSummary(
            address=self.address,
            items=self.cart.snapshot(),
            subtotal=subtotal,
            shipping=shipping,
            total=subtotal + shipping,
        )

    async def place_order(self) -> PlacedOrder | None:
        if self.step != CheckoutStep.REVIEW or self.address is None:
            raise ValueError("Shipping address has not been confirmed")

        if self.placing:
            logger.info("Order placement already in progress")
            return None

        self.placing = True
        try:
            placed = await self.assembler.place_order(self.address)
        except StoreError as e:
            logger.error(f"Error placing order: {e}")
            self.notifier.error(ORDER_FAILED)
            return None
        finally:
            self.placing = False

        self.placed = placed
        self.notifier.success(ORDER_PLACED)
        return placed
