"""Checkout validation and order payload building."""
import re

from app.services.cart.models import CartState
from app.services.orders.models import CustomerInfo, OrderData, OrderType

PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


class CheckoutValidationError(ValueError):
    """Raised when a cart cannot be checked out as entered."""


def normalize_customer_info(info: CustomerInfo, order_type: OrderType) -> CustomerInfo:
    """Strip whitespace, keep only phone digits, drop the table for take-out."""
    return CustomerInfo(
        name=info.name.strip(),
        phone=re.sub(r"[^0-9]", "", info.phone),
        table_number="" if order_type == OrderType.TAKE_OUT else info.table_number.strip(),
    )


def build_order_data(
    state: CartState, customer_info: CustomerInfo, order_type: OrderType
) -> OrderData:
    """
    Validate checkout input and build the order payload.

    Raises:
        CheckoutValidationError: on the first failed check, in the order the
        customer sees them (cart, name, phone, phone format)
    """
    if not state.lines:
        raise CheckoutValidationError("您的購物車是空的")

    info = normalize_customer_info(customer_info, order_type)
    if not info.name:
        raise CheckoutValidationError("請填寫您的姓名")
    if not info.phone:
        raise CheckoutValidationError("請填寫您的電話")
    if not PHONE_PATTERN.match(info.phone):
        raise CheckoutValidationError("請輸入有效的手機號碼（10位數字）")

    return OrderData(
        items=list(state.lines),
        total_price=state.total_price,
        customer_info=info,
        order_type=order_type,
    )
