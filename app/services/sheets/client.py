"""Client for the spreadsheet-backed script endpoint."""
import json
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class SheetsAPIError(Exception):
    """Raised when the remote endpoint cannot be reached or answers garbage."""


class SheetsClient:
    """Thin async wrapper around the remote script's `action` protocol.

    Reads are GET requests with an `action` query parameter. Writes are POST
    requests whose JSON body carries the `action`, sent as `text/plain`.
    Responses are always JSON objects.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        )

    async def _get(self, action: str, **params: Any) -> Dict[str, Any]:
        query = {"action": action}
        query.update({key: value for key, value in params.items() if value})
        return await self._request("GET", params=query, action=action)

    async def _post(self, action: str, **fields: Any) -> Dict[str, Any]:
        body = json.dumps({"action": action, **fields}, ensure_ascii=False)
        return await self._request(
            "POST",
            content=body.encode("utf-8"),
            headers={"Content-Type": "text/plain;charset=utf-8"},
            action=action,
        )

    async def _request(self, method: str, action: str, **kwargs: Any) -> Dict[str, Any]:
        if not self.is_configured:
            raise SheetsAPIError("Remote order endpoint is not configured")

        logger.debug(f"[SHEETS] {method} action={action}")
        try:
            async with self._client() as client:
                response = await client.request(method, self.base_url, **kwargs)
        except httpx.HTTPError as e:
            raise SheetsAPIError(f"Request for '{action}' failed: {e}") from e

        if response.is_error:
            raise SheetsAPIError(
                f"Server responded with {response.status_code}: {response.text}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SheetsAPIError(f"Invalid JSON in '{action}' response") from e
        if not isinstance(data, dict):
            raise SheetsAPIError(f"Unexpected '{action}' response shape")
        return data

    async def get_menu(self) -> Dict[str, Any]:
        """Fetch menu, addons, option lists and the quiet-hours flag."""
        return await self._get("getMenu")

    async def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """Submit an order. `order_data["items"]` must already be a JSON string."""
        return await self._post("createOrder", orderData=order_data)

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._get("getOrder", orderId=order_id)

    async def search_orders(
        self,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._get(
            "searchOrders",
            name=name,
            phone=phone,
            startDate=start_date,
            endDate=end_date,
        )

    async def get_all_orders(self) -> Dict[str, Any]:
        return await self._get("getAllOrders")

    async def get_sales_statistics(self, start_date: str, end_date: str) -> Dict[str, Any]:
        return await self._get("getSalesStatistics", startDate=start_date, endDate=end_date)

    async def update_order_status(self, order_id: str, status: str) -> Dict[str, Any]:
        return await self._post("updateOrderStatus", orderId=order_id, status=status)

    async def update_availability(self, availability: Dict[str, Any]) -> Dict[str, Any]:
        # The script expects the availability map as a nested JSON string
        return await self._post(
            "updateAvailability",
            availability=json.dumps(availability, ensure_ascii=False),
        )

    async def update_quiet_hours_status(self, is_quiet_hours: bool) -> Dict[str, Any]:
        return await self._post("updateQuietHoursStatus", isQuietHours=is_quiet_hours)
