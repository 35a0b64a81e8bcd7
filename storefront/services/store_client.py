# storefront/services/store_client.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Protocol

import httpx

from storefront.utils.settings import STORE_URL, STORE_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class StoreResult:
    """Wynik wywolania magazynu: albo data, albo error, nigdy wyjatek."""

    data: Any = None
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RemoteStore(Protocol):
    async def select_cart_items(self, user_id: str) -> StoreResult: ...

    async def insert_cart_item(self, user_id: str, product_id: str, quantity: int) -> StoreResult: ...

    async def update_cart_item(self, item_id: str, quantity: int) -> StoreResult: ...

    async def delete_cart_item(self, item_id: str) -> StoreResult: ...

    async def delete_cart_items(self, user_id: str) -> StoreResult: ...

    async def insert_order(
        self, user_id: str, total: Decimal, shipping_address: Dict[str, Any], status: str
    ) -> StoreResult: ...

    async def insert_order_items(self, rows: List[Dict[str, Any]]) -> StoreResult: ...

    async def select_orders(self, user_id: str) -> StoreResult: ...

    async def select_order(self, order_id: str, user_id: str) -> StoreResult: ...


class StoreClient:
    """
    Cienka warstwa zapytan do magazynu danych (REST nad wierszami).
    Bez ponawiania i domyslnie bez timeoutu.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = STORE_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or STORE_URL).rstrip("/")
        self.http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _call(self, method: str, url: str, **kwargs) -> StoreResult:
        logger.debug(f"StoreClient {method} {url}")
        try:
            resp = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"StoreClient {method} {url} failed: {e}")
            return StoreResult(error=StoreError(str(e) or e.__class__.__name__))

        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("detail", resp.text) if isinstance(body, dict) else resp.text
            logger.error(f"StoreClient {method} {url} -> {resp.status_code}: {detail}")
            return StoreResult(error=StoreError(str(detail), status_code=resp.status_code))

        if resp.status_code == 204 or not resp.content:
            return StoreResult(data=None)
        return StoreResult(data=resp.json())

    async def select_cart_items(self, user_id: str) -> StoreResult:
        return await self._call("GET", "/cart_items", params={"user_id": user_id})

    async def insert_cart_item(self, user_id: str, product_id: str, quantity: int) -> StoreResult:
        return await self._call(
            "POST",
            "/cart_items",
            json={"user_id": user_id, "product_id": product_id, "quantity": quantity},
        )

    async def update_cart_item(self, item_id: str, quantity: int) -> StoreResult:
        return await self._call("PATCH", f"/cart_items/{item_id}", json={"quantity": quantity})

    async def delete_cart_item(self, item_id: str) -> StoreResult:
        return await self._call("DELETE", f"/cart_items/{item_id}")

    async def delete_cart_items(self, user_id: str) -> StoreResult:
        return await self._call("DELETE", "/cart_items", params={"user_id": user_id})

    async def insert_order(
        self, user_id: str, total: Decimal, shipping_address: Dict[str, Any], status: str
    ) -> StoreResult:
        return await self._call(
            "POST",
            "/orders",
            json={
                "user_id": user_id,
                "total": str(total),
                "shipping_address": shipping_address,
                "status": status,
            },
        )

    async def insert_order_items(self, rows: List[Dict[str, Any]]) -> StoreResult:
        payload = [{**r, "price": str(r["price"])} for r in rows]
        return await self._call("POST", "/order_items", json=payload)

    async def select_orders(self, user_id: str) -> StoreResult:
        return await self._call("GET", "/orders", params={"user_id": user_id})

    async def select_order(self, order_id: str, user_id: str) -> StoreResult:
        return await self._call("GET", f"/orders/{order_id}", params={"user_id": user_id})
