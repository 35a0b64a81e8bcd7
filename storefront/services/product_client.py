# storefront/services/product_client.py
from typing import List

import httpx

from storefront.domain.schemas import ProductOut
from storefront.utils.retry import http_retry
from storefront.utils.settings import CATALOG_TIMEOUT_SECONDS, FEATURED_PRODUCTS_LIMIT, STORE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """Katalog produktow. Odczyty sa idempotentne, wiec bledy transportu sa ponawiane."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = CATALOG_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or STORE_URL).rstrip("/")
        self.http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self.http.aclose()

    @http_retry()
    async def list_products(
        self,
        category: str | None = None,
        featured: bool = False,
        limit: int | None = None,
    ) -> List[ProductOut]:
        """Najnowsze pierwsze; featured=True to 'New Arrivals'."""
        params = {}
        if category:
            params["category"] = category
        if featured:
            params["featured"] = "true"
        if limit:
            params["limit"] = limit

        logger.info(f"ProductClient GET {self.base_url}/products {params}")
        resp = await self.http.get("/products", params=params)
        resp.raise_for_status()
        return [ProductOut.model_validate(p) for p in resp.json()]

    async def featured_products(self, limit: int = FEATURED_PRODUCTS_LIMIT) -> List[ProductOut]:
        return await self.list_products(featured=True, limit=limit)

    @http_retry()
    async def fetch_product(self, product_id: str) -> ProductOut | None:
        url = f"/products/{product_id}"
        logger.info(f"ProductClient GET {self.base_url}{url}")

        resp = await self.http.get(url)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return ProductOut.model_validate(resp.json())
