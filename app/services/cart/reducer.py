"""Cart state transitions.

Every transition is a pure function of the current state and returns a new
`CartState`; the input state is never modified. Adding merges into an
existing line with the same cart key, editing replaces a line in place and
never merges.
"""
import secrets
from typing import Callable, Optional

from app.services.cart.keys import make_cart_id, make_cart_key
from app.services.cart.models import CartLine, CartState, EditableSelection, SelectionBundle
from app.services.cart.pricing import line_total
from app.services.menu.base import MenuItem


def _token() -> str:
    return secrets.token_hex(4)


def build_line(
    item: MenuItem,
    quantity: int,
    selection: SelectionBundle,
    category_title: str,
    cart_id: Optional[str] = None,
    make_token: Callable[[], str] = _token,
) -> CartLine:
    """Fold a selection bundle into a cart line."""
    cart_key = make_cart_key(item.id, selection)
    return CartLine(
        cart_id=cart_id or make_cart_id(cart_key, make_token()),
        cart_key=cart_key,
        item=item,
        quantity=quantity,
        category_title=category_title,
        selected_donenesses=dict(selection.donenesses),
        selected_drinks=dict(selection.drinks),
        selected_side_choices=dict(selection.side_choices),
        selected_component=dict(selection.component_choices),
        selected_multi_choice=dict(selection.multi_choice),
        selected_addons=list(selection.addons),
        selected_sauces=list(selection.sauces),
        selected_desserts=list(selection.desserts),
        selected_pastas=list(selection.pastas),
        selected_notes=selection.notes,
        selected_single_choice_addon=selection.single_choice_addon,
        total_price=line_total(
            item, quantity, selection.single_choice_addon, selection.addons
        ),
    )


def reprice(line: CartLine, quantity: int) -> CartLine:
    """Copy of `line` at a new quantity, priced from its own stored choices."""
    return line.model_copy(
        update={
            "quantity": quantity,
            "total_price": line_total(
                line.item,
                quantity,
                line.selected_single_choice_addon,
                line.selected_addons,
            ),
        }
    )


def apply_add(
    state: CartState,
    item: MenuItem,
    quantity: int,
    selection: SelectionBundle,
    category_title: str,
    make_token: Callable[[], str] = _token,
) -> CartState:
    """Add a confirmed selection, merging into an equal-keyed line if present."""
    new_line = build_line(item, quantity, selection, category_title, make_token=make_token)

    existing = state.find_by_key(new_line.cart_key)
    if existing is None:
        return CartState(lines=[*state.lines, new_line])

    merged = reprice(existing, existing.quantity + quantity)
    return CartState(
        lines=[merged if line.cart_id == existing.cart_id else line for line in state.lines]
    )


def apply_edit(
    state: CartState,
    cart_id: str,
    item: MenuItem,
    quantity: int,
    selection: SelectionBundle,
    category_title: str,
    make_token: Callable[[], str] = _token,
) -> CartState:
    """Replace a line in place, keeping its cart id.

    The edited line is not merged even if its new key equals another line's.
    When the line is no longer in the cart the selection is added instead.
    """
    if state.find(cart_id) is None:
        return apply_add(state, item, quantity, selection, category_title, make_token)

    edited = build_line(item, quantity, selection, category_title, cart_id=cart_id)
    return CartState(
        lines=[edited if line.cart_id == cart_id else line for line in state.lines]
    )


def update_quantity(state: CartState, cart_id: str, new_quantity: int) -> CartState:
    """Set a line's quantity; zero or less removes it. Unknown ids are ignored."""
    if new_quantity <= 0:
        return remove_item(state, cart_id)
    return CartState(
        lines=[
            reprice(line, new_quantity) if line.cart_id == cart_id else line
            for line in state.lines
        ]
    )


def remove_item(state: CartState, cart_id: str) -> CartState:
    return CartState(lines=[line for line in state.lines if line.cart_id != cart_id])


def edit_item(state: CartState, cart_id: str) -> Optional[EditableSelection]:
    """Load a line's stored choices back for editing. Does not touch the cart."""
    line = state.find(cart_id)
    if line is None:
        return None
    return EditableSelection(
        cart_id=line.cart_id,
        item=line.item,
        category_title=line.category_title,
        quantity=line.quantity,
        selection=line.selection(),
    )
