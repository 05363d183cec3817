"""Kitchen ticket formatting."""
import re
from typing import Dict, Iterable, List, Optional, Tuple, Union

from app.services.cart.models import CartLine
from app.services.orders.models import Order, OrderData

TICKET_TITLE = "廚房工作單"
TICKET_FOOTER = "感謝您的訂購！"
SEPARATOR = "."

_SET_NAME_PATTERN = re.compile(r"半全餐|半套餐")


def _add(counter: Dict[str, int], entries: Iterable[Tuple[str, int]]) -> None:
    for name, count in entries:
        counter[name] = counter.get(name, 0) + count


def _format_counts(counter: Dict[str, int]) -> str:
    return SEPARATOR.join(f"{name}x{count}" for name, count in counter.items())


def _main_items(lines: List[CartLine]) -> List[str]:
    merged: Dict[str, List[int]] = {}
    for line in lines:
        name = _SET_NAME_PATTERN.sub("套餐", line.item.name)
        quantity, total = merged.get(name, [0, 0])
        merged[name] = [quantity + line.quantity, total + line.total_price]
    return [f"{name}x{quantity}${total}" for name, (quantity, total) in merged.items()]


def format_ticket_line(order: Union[Order, OrderData], order_id: Optional[str] = None) -> str:
    """Compact one-line kitchen summary of an order.

    Lines with the same display name are merged; choices are totalled per
    name across the whole order.
    """
    final_id = order.id if isinstance(order, Order) else order_id

    components: Dict[str, int] = {}
    drinks: Dict[str, int] = {}
    sauces: Dict[str, int] = {}
    extras: Dict[str, int] = {}
    donenesses: Dict[str, int] = {}

    for line in order.items:
        _add(components, line.selected_component.items())
        _add(drinks, line.selected_drinks.items())
        _add(sauces, ((s.name, s.quantity) for s in line.selected_sauces))
        _add(extras, ((a.name, a.quantity) for a in line.selected_addons))
        _add(donenesses, line.selected_donenesses.items())
        if line.selected_single_choice_addon:
            _add(extras, [(line.selected_single_choice_addon, line.quantity)])

    parts = [
        f"單號:{final_id}",
        SEPARATOR.join(_main_items(order.items)),
        _format_counts(components),
        _format_counts(drinks),
        _format_counts(sauces),
        _format_counts(extras),
        _format_counts(donenesses),
        f"總金額:${order.total_price}",
    ]
    return SEPARATOR.join(part for part in parts if part)


def format_ticket(
    order: Union[Order, OrderData],
    order_id: Optional[str] = None,
    restaurant_name: str = "",
) -> str:
    """Full printable kitchen ticket: header, summary line, footer."""
    lines = [restaurant_name, TICKET_TITLE, format_ticket_line(order, order_id), TICKET_FOOTER]
    return "\n".join(line for line in lines if line)
