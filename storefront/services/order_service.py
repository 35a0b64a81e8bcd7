# storefront/services/order_service.py
from typing import List

from storefront.domain.schemas import OrderDetailOut, OrderOut
from storefront.services.navigation import AUTH_PATH, Redirect
from storefront.services.store_client import RemoteStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Historia zamowien (tylko odczyt).
    Zapis zamowien robi OrderAssembler.
    """

    def __init__(self, store: RemoteStore):
        self.store = store

    async def list_orders(self, user_id: str | None) -> List[OrderOut]:
        """Zamowienia uzytkownika, najnowsze pierwsze."""
        if not user_id:
            raise Redirect(AUTH_PATH)

        res = await self.store.select_orders(user_id)
        if not res.ok:
            logger.error(f"Error fetching orders of user {user_id}: {res.error}")
            raise res.error

        return [OrderOut.model_validate(o) for o in res.data or []]

    async def get_order(self, order_id: str, user_id: str | None) -> OrderDetailOut | None:
        if not user_id:
            raise Redirect(AUTH_PATH)

        res = await self.store.select_order(order_id, user_id)
        if not res.ok:
            if res.error.status_code == 404:
                return None
            logger.error(f"Error fetching order {order_id}: {res.error}")
            raise res.error

        return OrderDetailOut.model_validate(res.data)
