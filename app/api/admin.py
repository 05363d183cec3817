"""Admin dashboard API endpoints."""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import ValidationError

from app.api.auth import require_auth
from app.api.orders import call_remote, require_success
from app.core.config import settings
from app.core.dependencies import get_menu_repository, get_sheets_client
from app.services.menu.base import CamelModel
from app.services.menu.repository import MenuRepository
from app.services.orders.board import build_order_board, newest_first
from app.services.orders.models import Order, OrderStatus, SalesStatistics
from app.services.orders.ticket import format_ticket
from app.services.sheets.client import SheetsClient

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_auth)])
logger = logging.getLogger(__name__)

STATISTICS_DEFAULT_DAYS = 7


class StatusUpdate(CamelModel):
    status: OrderStatus


class AvailabilityUpdate(CamelModel):
    """Availability flags as saved by the store management panel."""

    menu: Dict[str, bool] = {}
    addons: Dict[str, bool] = {}
    options: Dict[str, Dict[str, bool]] = {}


class QuietHoursUpdate(CamelModel):
    is_quiet_hours: bool


class TicketResponse(CamelModel):
    order_id: str
    ticket: str


def _parse_orders(rows: List[dict]) -> List[Order]:
    try:
        return [Order.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"[ADMIN] Malformed orders from remote: {e}")
        raise HTTPException(status_code=502, detail="Malformed order data")


def default_statistics_range(today: Optional[date] = None) -> tuple[str, str]:
    """The last seven days including today, as ISO dates."""
    today = today or date.today()
    start = today - timedelta(days=STATISTICS_DEFAULT_DAYS - 1)
    return start.isoformat(), today.isoformat()


@router.get("/orders", response_model=List[Order], response_model_by_alias=True)
async def list_orders(request: Request, client: SheetsClient = Depends(get_sheets_client)):
    """All orders, newest first."""
    data = await call_remote(request, "ADMIN ORDERS", client.get_all_orders())
    require_success(data, 502, "無法取得訂單")
    orders = newest_first(_parse_orders(data.get("orders") or []))
    logger.info(f"[ADMIN ORDERS] {len(orders)} orders")
    return orders


@router.get(
    "/orders/board",
    response_model=Dict[str, List[Order]],
    response_model_by_alias=True,
)
async def get_order_board(request: Request, client: SheetsClient = Depends(get_sheets_client)):
    """Active orders grouped by status column."""
    data = await call_remote(request, "ADMIN BOARD", client.get_all_orders())
    require_success(data, 502, "無法取得訂單")
    board = build_order_board(_parse_orders(data.get("orders") or []))
    return {status.value: orders for status, orders in board.items()}


@router.patch("/orders/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: StatusUpdate,
    request: Request,
    client: SheetsClient = Depends(get_sheets_client),
):
    """Move an order to another workflow status."""
    logger.info(f"[ADMIN STATUS] order_id: {order_id}, status: {body.status.value}")
    data = await call_remote(
        request, "ADMIN STATUS", client.update_order_status(order_id, body.status.value)
    )
    require_success(data, 502, "更新狀態失敗")
    return {"success": True, "orderId": order_id, "status": body.status.value}


@router.get(
    "/orders/{order_id}/ticket",
    response_model=TicketResponse,
    response_model_by_alias=True,
)
async def get_order_ticket(
    order_id: str,
    request: Request,
    client: SheetsClient = Depends(get_sheets_client),
):
    """Reprint the kitchen ticket of a stored order."""
    data = await call_remote(request, "ADMIN TICKET", client.get_order(order_id))
    require_success(data, 404, "找不到此訂單")
    order = _parse_orders([data.get("order")])[0]
    return TicketResponse(
        order_id=order.id,
        ticket=format_ticket(order, restaurant_name=settings.restaurant_name),
    )


@router.get("/statistics", response_model=SalesStatistics, response_model_by_alias=True)
async def get_statistics(
    request: Request,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    client: SheetsClient = Depends(get_sheets_client),
):
    """Sales statistics; defaults to the last seven days."""
    default_start, default_end = default_statistics_range()
    start_date = start_date or default_start
    end_date = end_date or default_end
    logger.info(f"[ADMIN STATS] {start_date} .. {end_date}")

    data = await call_remote(
        request, "ADMIN STATS", client.get_sales_statistics(start_date, end_date)
    )
    require_success(data, 502, "無法取得統計資料")
    try:
        return SalesStatistics.model_validate(data.get("stats"))
    except ValidationError as e:
        logger.error(f"[ADMIN STATS] Malformed statistics: {e}")
        raise HTTPException(status_code=502, detail="Malformed statistics data")


@router.get("/availability")
async def get_availability(
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Current availability flags of items, addons and option entries."""
    return await menu_repository.get_availability()


@router.put("/availability")
async def update_availability(
    body: AvailabilityUpdate,
    request: Request,
    client: SheetsClient = Depends(get_sheets_client),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Save availability flags and drop the cached catalog."""
    logger.info(
        f"[ADMIN AVAILABILITY] {len(body.menu)} items, {len(body.addons)} addons, "
        f"{len(body.options)} option lists"
    )
    data = await call_remote(
        request, "ADMIN AVAILABILITY", client.update_availability(body.model_dump(by_alias=True))
    )
    require_success(data, 502, "更新失敗")
    menu_repository.provider.invalidate()
    return {"success": True, "message": data.get("message")}


@router.put("/quiet-hours")
async def update_quiet_hours(
    body: QuietHoursUpdate,
    request: Request,
    client: SheetsClient = Depends(get_sheets_client),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Switch quiet hours on or off."""
    logger.info(f"[ADMIN QUIET HOURS] is_quiet_hours: {body.is_quiet_hours}")
    data = await call_remote(
        request, "ADMIN QUIET HOURS", client.update_quiet_hours_status(body.is_quiet_hours)
    )
    require_success(data, 502, "更新失敗")
    menu_repository.provider.invalidate()
    return {"success": True, "isQuietHours": body.is_quiet_hours}
