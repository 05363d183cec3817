"""Cart line price computation.

total = (item price + single-choice addon price) * quantity + addons total

Addons are a flat amount for the whole line; they are not multiplied by the
line quantity. All amounts are integer currency units.
"""
from typing import Iterable, Optional

from app.services.cart.models import SelectedAddon
from app.services.menu.base import MenuItem


def single_choice_price(item: MenuItem, single_choice_addon: Optional[str]) -> int:
    """Price of the single-choice upgrade, or 0 when none is chosen."""
    offer = item.customizations.single_choice_addon
    if single_choice_addon and offer is not None:
        return offer.price
    return 0


def addons_total(addons: Iterable[SelectedAddon]) -> int:
    return sum(addon.price * addon.quantity for addon in addons)


def unit_price(item: MenuItem, single_choice_addon: Optional[str]) -> int:
    return item.price + single_choice_price(item, single_choice_addon)


def line_total(
    item: MenuItem,
    quantity: int,
    single_choice_addon: Optional[str] = None,
    addons: Iterable[SelectedAddon] = (),
) -> int:
    """Compute a cart line's total price from scratch."""
    if quantity < 1:
        raise ValueError(f"Line quantity must be a positive integer, got {quantity}")
    return unit_price(item, single_choice_addon) * quantity + addons_total(addons)
