# storefront/services/catalog_client.py

"""JSON client for the storefront catalog REST API."""

import logging
import time
from typing import Any

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.catalog")


class CatalogClient:
    """Reads products and delivery settings from the storefront API.

    Failed requests are retried ``MAX_RETRIES`` times with a linear
    backoff. Exhausted retries surface as ``None`` so callers can skip
    work that needs authoritative catalog data.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """GET ``base_url + path`` and return the decoded body.

        A 404 returns ``None`` immediately; other failures are retried.
        """
        url = f"{self.base_url}{path}"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    params=params,
                    headers=self.settings.DEFAULT_HEADERS,
                    timeout=self._request_timeout,
                )
                if resp.status_code == 404:
                    logger.info("Not found: %s", url)
                    return None
                if resp.status_code == 200:
                    data: Any = resp.json()
                    if isinstance(data, dict) and data.get("success", True):
                        return data
                    logger.warning(
                        "Unsuccessful response from %s: %s",
                        url,
                        data.get("message") if isinstance(data, dict) else data,
                    )
                    return None
                logger.warning(
                    "HTTP %d from %s on attempt %d",
                    resp.status_code,
                    url,
                    attempt + 1,
                )
            except Exception as exc:
                logger.warning(
                    "Request error for %s on attempt %d: %s",
                    url,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
            time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))
        logger.error(
            "Giving up on %s after %d attempts",
            url,
            self.settings.MAX_RETRIES,
        )
        return None

    @staticmethod
    def _parse_products(records: Any) -> list[Product]:
        products: list[Product] = []
        if not isinstance(records, list):
            return products
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                products.append(Product.from_api(record))
            except ValueError as exc:
                logger.debug("Skipping catalog record: %s", exc)
        return products

    def fetch_products(self) -> list[Product] | None:
        """Return every visible product, walking all result pages."""
        products: list[Product] = []
        page = 1
        while True:
            data = self._get_json(
                "/products",
                params={"page": page, "limit": self.settings.CATALOG_PAGE_SIZE},
            )
            if data is None:
                return None
            products.extend(self._parse_products(data.get("data")))
            try:
                total_pages = int(data.get("totalPages") or 1)
            except (TypeError, ValueError):
                total_pages = 1
            if page >= total_pages:
                break
            page += 1
        logger.info("Fetched %d products over %d pages", len(products), page)
        return products

    def fetch_product_ids(self) -> set[str] | None:
        """Return the authoritative set of live product ids."""
        products = self.fetch_products()
        if products is None:
            return None
        return {p.id for p in products}

    def get_product(self, product_id: str) -> Product | None:
        """Fetch one product; ``None`` when missing or unreachable."""
        data = self._get_json(f"/products/{product_id}")
        if data is None or not isinstance(data.get("data"), dict):
            return None
        try:
            return Product.from_api(data["data"])
        except ValueError as exc:
            logger.warning("Bad product record for %s: %s", product_id, exc)
            return None

    def fetch_delivery_price(self) -> float:
        """Default delivery price; 0.0 when it cannot be read."""
        data = self._get_json("/settings/delivery-price")
        if data is None:
            return 0.0
        try:
            return float(data.get("defaultDeliveryPrice") or 0.0)
        except (TypeError, ValueError):
            return 0.0
