# app/services/product_client.py
import requests

from app.domain.schemas import ProductOut
from app.utils.retry import http_retry
from app.utils.settings import PRODUCT_SERVICE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """Katalog produktow przez HTTP (zewnetrzny product-service)."""

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def find_by_id(self, product_id: int) -> ProductOut | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return ProductOut.model_validate(resp.json())
