"""Order lookup API endpoints."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import ConfigDict, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_cart_session, get_sheets_client
from app.db.database import get_db
from app.services.menu.base import CamelModel
from app.services.orders.models import Order, OrderSummary
from app.services.persistence.orders import OrderPersistenceService
from app.services.sheets.client import SheetsAPIError, SheetsClient

router = APIRouter()
logger = logging.getLogger(__name__)


class RecentOrder(CamelModel):
    """Order submitted from the caller's cart session."""

    order_id: str
    customer_name: str
    order_type: str
    total_price: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def require_success(data: Dict[str, Any], status_code: int, fallback_message: str) -> Dict[str, Any]:
    """Turn a remote `success: false` answer into an HTTP error."""
    if not data.get("success"):
        raise HTTPException(status_code=status_code, detail=data.get("message") or fallback_message)
    return data


async def call_remote(request: Request, tag: str, coro) -> Dict[str, Any]:
    """Await a remote endpoint call, mapping transport failures to 502."""
    try:
        return await coro
    except SheetsAPIError as e:
        logger.error(
            f"[{tag}] Remote call failed - "
            f"Client: {request.client.host if request.client else 'unknown'}, Error: {e}",
            exc_info=True,
        )
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/api/orders/search", response_model=List[OrderSummary], response_model_by_alias=True)
async def search_orders(
    request: Request,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    client: SheetsClient = Depends(get_sheets_client),
):
    """Search orders by customer name, phone and date range."""
    logger.info(
        f"[ORDERS SEARCH] name: {name}, phone: {phone}, "
        f"start_date: {start_date}, end_date: {end_date}"
    )
    data = await call_remote(
        request,
        "ORDERS SEARCH",
        client.search_orders(name=name, phone=phone, start_date=start_date, end_date=end_date),
    )
    require_success(data, 502, "搜尋失敗")

    try:
        orders = [OrderSummary.model_validate(row) for row in data.get("orders") or []]
    except ValidationError as e:
        logger.error(f"[ORDERS SEARCH] Malformed search results: {e}")
        raise HTTPException(status_code=502, detail="Malformed search results")

    logger.info(f"[ORDERS SEARCH] Found {len(orders)} orders")
    return orders


@router.get("/api/orders/recent", response_model=List[RecentOrder], response_model_by_alias=True)
async def get_recent_orders(
    limit: int = 20,
    session_id: str = Depends(get_cart_session),
    db: AsyncSession = Depends(get_db),
):
    """Orders submitted from this cart session, newest first."""
    records = await OrderPersistenceService(db).list_recent(session_id, limit=limit)
    logger.debug(f"[ORDERS RECENT] {len(records)} orders for session")
    return [RecentOrder.model_validate(record) for record in records]


@router.get("/api/orders/{order_id}", response_model=Order, response_model_by_alias=True)
async def get_order(
    order_id: str,
    request: Request,
    client: SheetsClient = Depends(get_sheets_client),
):
    """Look up one order by its id."""
    logger.info(f"[ORDERS GET] order_id: {order_id}")
    data = await call_remote(request, "ORDERS GET", client.get_order(order_id.strip()))
    require_success(data, 404, "找不到此訂單")

    try:
        return Order.model_validate(data.get("order"))
    except ValidationError as e:
        logger.error(f"[ORDERS GET] Malformed order {order_id}: {e}")
        raise HTTPException(status_code=502, detail="Malformed order data")
