"""Order models."""
import json
from enum import Enum
from typing import Any, List, Optional
from pydantic import field_validator

from app.services.cart.models import CartLine
from app.services.menu.base import CamelModel


class OrderType(str, Enum):
    """Dine-in or take-out."""

    DINE_IN = "內用"
    TAKE_OUT = "外帶"


class OrderStatus(str, Enum):
    """Kitchen workflow status of a submitted order."""

    AWAITING_CONFIRMATION = "待店長確認"
    PENDING = "待處理"
    PREPARING = "製作中"
    READY = "可以取餐"
    COMPLETED = "已完成"
    ERROR = "錯誤"


# Statuses shown on the admin board, in workflow order
BOARD_STATUSES = [
    OrderStatus.AWAITING_CONFIRMATION,
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.READY,
]
INACTIVE_STATUSES = {OrderStatus.COMPLETED, OrderStatus.ERROR}


def _stringify(value: Any) -> Any:
    return str(value) if isinstance(value, int) else value


class CustomerInfo(CamelModel):
    """Customer contact details entered at checkout."""

    name: str = ""
    phone: str = ""
    table_number: str = ""

    @field_validator("phone", "table_number", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        # Sheet cells holding digits come back as numbers
        return _stringify(value)


class OrderData(CamelModel):
    """Finalized cart as submitted to the backend."""

    items: List[CartLine]
    total_price: int
    customer_info: CustomerInfo
    order_type: OrderType

    def to_payload(self) -> dict:
        """Wire payload; the backend stores `items` as a JSON string."""
        payload = self.model_dump(mode="json", by_alias=True)
        payload["items"] = json.dumps(payload["items"], ensure_ascii=False)
        return payload


class Order(CamelModel):
    """Order as returned by the backend."""

    id: str
    status: OrderStatus
    order_type: OrderType
    items: List[CartLine] = []
    customer_info: CustomerInfo = CustomerInfo()
    total_price: int
    created_at: str = ""

    @field_validator("items", mode="before")
    @classmethod
    def _decode_items(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return _stringify(value)


class OrderSummary(CamelModel):
    """Search result row."""

    id: str
    customer_name: str
    total_amount: int
    timestamp: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return _stringify(value)


class PopularItem(CamelModel):
    name: str
    quantity: int
    revenue: int


class SalesTrendData(CamelModel):
    date: str
    revenue: int


class SalesStatistics(CamelModel):
    """Sales figures for a date range."""

    total_revenue: int
    order_count: int
    popular_items: List[PopularItem] = []
    sales_trend: List[SalesTrendData] = []


class SubmitResult(CamelModel):
    """Backend answer to an order submission."""

    success: bool
    order_id: Optional[str] = None
    message: Optional[str] = None

    @field_validator("order_id", mode="before")
    @classmethod
    def _stringify_order_id(cls, value: Any) -> Any:
        return _stringify(value)
