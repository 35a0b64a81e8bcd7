# storefront/services/session_service.py
from typing import List

from storefront.domain.schemas import OrderOut
from storefront.services.cart_store import CartContext, CartStore
from storefront.services.notification_service import NotificationService
from storefront.services.order_assembler import CheckoutFlow
from storefront.services.order_service import OrderService
from storefront.services.store_client import RemoteStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StorefrontSession:
    """
    Sesja zalogowanego uzytkownika po stronie klienta.
    sign_in tworzy kontekst koszyka i laduje koszyk, sign_out go zamyka.
    Wiersze koszyka w magazynie zostaja po wylogowaniu.
    """

    def __init__(self, store: RemoteStore, notifier: NotificationService | None = None):
        self.store = store
        self.notifier = notifier or NotificationService()
        self.cart = CartStore(self.notifier)
        self.orders = OrderService(store)

    @property
    def user_id(self) -> str | None:
        return self.cart.user_id

    async def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id is required")
        logger.info(f"User {user_id} signed in")
        await self.cart.sign_in(CartContext(user_id=user_id, store=self.store))

    def sign_out(self) -> None:
        if self.user_id:
            logger.info(f"User {self.user_id} signed out")
        self.cart.sign_out()

    def checkout(self) -> CheckoutFlow:
        return CheckoutFlow.open(self.cart, self.notifier)

    async def order_history(self) -> List[OrderOut]:
        return await self.orders.list_orders(self.user_id)
