"""Admin order board."""
from typing import Dict, List

from app.services.orders.models import BOARD_STATUSES, INACTIVE_STATUSES, Order, OrderStatus


def newest_first(orders: List[Order]) -> List[Order]:
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def active_orders(orders: List[Order]) -> List[Order]:
    """Orders still moving through the kitchen."""
    return [order for order in orders if order.status not in INACTIVE_STATUSES]


def build_order_board(orders: List[Order]) -> Dict[OrderStatus, List[Order]]:
    """Group active orders by status column, oldest first within a column."""
    board: Dict[OrderStatus, List[Order]] = {status: [] for status in BOARD_STATUSES}
    for order in sorted(active_orders(orders), key=lambda order: order.created_at):
        board[order.status].append(order)
    return board
