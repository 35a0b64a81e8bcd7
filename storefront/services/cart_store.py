# storefront/services/cart_store.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Tuple

from pydantic import ValidationError

from storefront.domain.schemas import CartItemOut
from storefront.services.notification_service import (
    ADD_FAILED,
    ADDED_TO_CART,
    REMOVE_FAILED,
    REMOVED_FROM_CART,
    SIGN_IN_REQUIRED,
    UPDATE_FAILED,
    NotificationService,
)
from storefront.services.store_client import RemoteStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartContext:
    """Zalogowany uzytkownik + uchwyt do magazynu. Zyje od sign_in do sign_out."""

    user_id: str
    store: RemoteStore


class CartStore:
    """
    Lokalny widok koszyka jednego uzytkownika.

    Kazda zmiana idzie najpierw do magazynu, stan lokalny jest poprawiany
    dopiero po odpowiedzi. Bledy magazynu nie wychodza poza metody: stan
    zostaje bez zmian, uzytkownik dostaje komunikat.

    Kolejnosc odpowiedzi:
    - kazda mutacja pozycji dostaje rosnacy numer (stamp); odpowiedz jest
      nakladana lokalnie tylko jesli w miedzyczasie nie wyslano nowszej
      mutacji tej samej pozycji
    - gdy ostatnia mutacja pozycji sie skonczy, a najnowsza z nich nie
      przeszla, pozycja dostaje ostatnia ilosc potwierdzona przez magazyn
    - pelny odczyt pamieta numer z chwili wyslania; pozycje zmienione
      pozniej zostaja w wersji lokalnej (albo usuniete), a odczyt starszy
      od kolejnego odczytu jest odrzucany
    - odpowiedzi po wylogowaniu albo zmianie uzytkownika sa odrzucane
    """

    def __init__(self, notifier: NotificationService, context: CartContext | None = None):
        self.notifier = notifier
        self.context = context
        self.items: List[CartItemOut] = []
        self.loading = False

        self._clock = 0
        self._touched: Dict[str, int] = {}
        self._targets: Dict[str, int] = {}
        self._pending: Dict[str, int] = {}
        self._acked: Dict[str, Tuple[int, int]] = {}
        self._last_read = 0

    # lifecycle
    async def sign_in(self, context: CartContext) -> None:
        self.context = context
        self._reset()
        await self.fetch_cart()

    def sign_out(self) -> None:
        self.context = None
        self._reset()

    def _reset(self) -> None:
        self.items = []
        self.loading = False
        self._touched.clear()
        self._targets.clear()
        self._pending.clear()
        self._acked.clear()
        self._last_read = self._tick()

    # query
    @property
    def user_id(self) -> str | None:
        return self.context.user_id if self.context else None

    @property
    def total_items(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((i.line_total for i in self.items), Decimal("0.00"))

    def is_empty(self) -> bool:
        return not self.items

    def snapshot(self) -> Tuple[CartItemOut, ...]:
        return tuple(self.items)

    def get_item(self, item_id: str) -> CartItemOut | None:
        return next((i for i in self.items if i.id == item_id), None)

    def find_by_product(self, product_id: str) -> CartItemOut | None:
        return next((i for i in self.items if i.product_id == product_id), None)

    # sekwencjonowanie
    def _tick(self) -> int:
        self._clock += 1
        return self._clock

    def _stamp(self, item_id: str) -> int:
        stamp = self._tick()
        self._touched[item_id] = stamp
        return stamp

    def _begin(self, item_id: str) -> int:
        self._pending[item_id] = self._pending.get(item_id, 0) + 1
        return self._stamp(item_id)

    def _ack(self, item_id: str, stamp: int, quantity: int) -> None:
        acked = self._acked.get(item_id)
        if acked is None or acked[0] < stamp:
            self._acked[item_id] = (stamp, quantity)

    def _settle(self, item_id: str) -> None:
        left = self._pending.get(item_id, 1) - 1
        if left > 0:
            self._pending[item_id] = left
            return

        self._pending.pop(item_id, None)
        acked = self._acked.pop(item_id, None)
        if acked is not None:
            # najnowsza mutacja nie przeszla albo przyszla wczesniej, wygrywa ostatnia potwierdzona
            self._set_quantity(item_id, acked[1])

        if self.get_item(item_id) is None and not self.loading:
            self._touched.pop(item_id, None)

    def _prune(self, upto: int) -> None:
        for item_id, stamp in list(self._touched.items()):
            if stamp <= upto and item_id not in self._pending:
                del self._touched[item_id]

    def _set_quantity(self, item_id: str, quantity: int) -> None:
        self.items = [
            i.model_copy(update={"quantity": quantity}) if i.id == item_id else i
            for i in self.items
        ]

    # commands
    async def fetch_cart(self) -> None:
        ctx = self.context
        if ctx is None:
            self.items = []
            return

        issued = self._tick()
        self._last_read = issued
        self.loading = True

        result = await ctx.store.select_cart_items(ctx.user_id)

        if self.context is not ctx or self._last_read != issued:
            logger.info(f"Dropping outdated cart read for user {ctx.user_id}")
            return

        self.loading = False

        if not result.ok:
            logger.error(f"Error fetching cart of user {ctx.user_id}: {result.error}")
            return

        try:
            rows = [CartItemOut.model_validate(r) for r in result.data or []]
        except ValidationError as e:
            logger.error(f"Malformed cart rows for user {ctx.user_id}: {e}")
            return

        self.items = self._merge(rows, issued)
        # starsze numery nie sa juz potrzebne zadnemu odczytowi
        self._prune(issued)

    def _merge(self, rows: List[CartItemOut], issued: int) -> List[CartItemOut]:
        local = {i.id: i for i in self.items}
        merged = []
        for row in rows:
            if self._touched.get(row.id, 0) > issued:
                # mutacja wyslana po odczycie wygrywa
                if row.id in local:
                    merged.append(local[row.id])
                continue
            merged.append(row)
        return merged

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> None:
        ctx = self.context
        if ctx is None:
            self.notifier.error(SIGN_IN_REQUIRED)
            return

        existing = self.find_by_product(product_id)
        if existing:
            # suma z iloscia juz wyslana do magazynu, nigdy nadpisanie
            current = self._targets.get(existing.id, existing.quantity)
            logger.info(
                f"Product {product_id} already in cart, quantity {current} -> {current + quantity}"
            )
            await self.update_quantity(existing.id, current + quantity)
            return

        result = await ctx.store.insert_cart_item(ctx.user_id, product_id, quantity)

        if self.context is not ctx:
            return

        if not result.ok and result.error.status_code == 409:
            await self._add_to_stored_row(ctx, product_id, quantity)
            return

        if not result.ok:
            logger.error(f"Error adding product {product_id} to cart: {result.error}")
            self.notifier.error(ADD_FAILED)
            return

        self.notifier.success(ADDED_TO_CART)
        await self.fetch_cart()

    async def _add_to_stored_row(self, ctx: CartContext, product_id: str, quantity: int) -> None:
        """Wiersz dla produktu powstal rownolegle (druga karta, podwojne klikniecie)."""
        logger.info(f"Product {product_id} already stored for user {ctx.user_id}, adding {quantity}")
        await self.fetch_cart()

        if self.context is not ctx:
            return

        existing = self.find_by_product(product_id)
        if existing is None:
            logger.error(f"Cart row of product {product_id} not found after conflict")
            self.notifier.error(ADD_FAILED)
            return

        current = self._targets.get(existing.id, existing.quantity)
        if await self.update_quantity(existing.id, current + quantity):
            self.notifier.success(ADDED_TO_CART)

    async def update_quantity(self, item_id: str, quantity: int) -> bool:
        if quantity <= 0:
            await self.remove_from_cart(item_id)
            return False

        ctx = self.context
        if ctx is None:
            return False

        stamp = self._begin(item_id)
        self._targets[item_id] = quantity

        result = await ctx.store.update_cart_item(item_id, quantity)

        if self.context is not ctx:
            return False

        latest = self._touched.get(item_id) == stamp
        if latest:
            self._targets.pop(item_id, None)

        if not result.ok:
            logger.error(f"Error updating cart item {item_id}: {result.error}")
            self.notifier.error(UPDATE_FAILED)
        elif latest:
            self._set_quantity(item_id, quantity)
        else:
            logger.info(f"Outdated quantity response for cart item {item_id}, kept as fallback")

        if result.ok:
            self._ack(item_id, stamp, quantity)
        self._settle(item_id)
        return result.ok

    async def remove_from_cart(self, item_id: str) -> None:
        ctx = self.context
        if ctx is None:
            return

        self._begin(item_id)

        result = await ctx.store.delete_cart_item(item_id)

        if self.context is not ctx:
            return

        if not result.ok:
            logger.error(f"Error removing cart item {item_id}: {result.error}")
            self.notifier.error(REMOVE_FAILED)
            self._settle(item_id)
            return

        # usuniety wiersz nie wraca, starsze odpowiedzi dla niego sa niewazne
        self._stamp(item_id)
        self._targets.pop(item_id, None)
        self._acked.pop(item_id, None)
        self.items = [i for i in self.items if i.id != item_id]
        self._settle(item_id)
        self.notifier.success(REMOVED_FROM_CART)

    async def clear_cart(self) -> bool:
        ctx = self.context
        if ctx is None:
            return False

        result = await ctx.store.delete_cart_items(ctx.user_id)

        if self.context is not ctx:
            return False

        if not result.ok:
            logger.error(f"Error clearing cart of user {ctx.user_id}: {result.error}")
            return False

        stamp = self._tick()
        for item in self.items:
            self._touched[item.id] = stamp
        self._targets.clear()
        self._acked.clear()
        # odczyty wyslane przed czyszczeniem nie moga przywrocic pozycji
        self._last_read = stamp
        self.loading = False
        self.items = []
        self._prune(stamp)
        logger.info(f"Cart of user {ctx.user_id} cleared")
        return True
