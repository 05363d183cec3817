"""Cart models."""
from typing import Dict, List, Optional
from pydantic import Field

from app.services.menu.base import Addon, CamelModel, MenuItem


class NamedQuantity(CamelModel):
    """A choice drawn from a dynamic option list, with its count."""

    name: str
    quantity: int


class SelectedAddon(Addon):
    """An addon with the number of units selected."""

    quantity: int


class SelectionBundle(CamelModel):
    """Customization choices for one cart line in progress.

    Mapping categories hold choice name -> quantity; list categories hold
    choices drawn from server-supplied lists. Notes do not take part in
    cart line identity.
    """

    donenesses: Dict[str, int] = {}
    drinks: Dict[str, int] = {}
    side_choices: Dict[str, int] = {}
    component_choices: Dict[str, int] = {}
    multi_choice: Dict[str, int] = {}
    sauces: List[NamedQuantity] = []
    desserts: List[NamedQuantity] = []
    pastas: List[NamedQuantity] = []
    single_choice_addon: Optional[str] = None
    notes: str = ""
    addons: List[SelectedAddon] = []


class CartLine(CamelModel):
    """One row of the cart: an item, its customizations and a quantity.

    Serializes to the field names the order backend and kitchen ticket read
    (`cartId`, `selectedDonenesses`, `totalPrice`, ...).
    """

    cart_id: str
    cart_key: str
    item: MenuItem
    quantity: int = Field(ge=1)
    category_title: str
    selected_donenesses: Dict[str, int] = {}
    selected_drinks: Dict[str, int] = {}
    selected_side_choices: Dict[str, int] = {}
    selected_component: Dict[str, int] = {}
    selected_multi_choice: Dict[str, int] = {}
    selected_addons: List[SelectedAddon] = []
    selected_sauces: List[NamedQuantity] = []
    selected_desserts: List[NamedQuantity] = []
    selected_pastas: List[NamedQuantity] = []
    selected_notes: str = ""
    selected_single_choice_addon: Optional[str] = None
    total_price: int

    def selection(self) -> SelectionBundle:
        """Rebuild the selection bundle this line was confirmed with."""
        return SelectionBundle(
            donenesses=dict(self.selected_donenesses),
            drinks=dict(self.selected_drinks),
            side_choices=dict(self.selected_side_choices),
            component_choices=dict(self.selected_component),
            multi_choice=dict(self.selected_multi_choice),
            sauces=[s.model_copy() for s in self.selected_sauces],
            desserts=[d.model_copy() for d in self.selected_desserts],
            pastas=[p.model_copy() for p in self.selected_pastas],
            single_choice_addon=self.selected_single_choice_addon,
            notes=self.selected_notes,
            addons=[a.model_copy() for a in self.selected_addons],
        )


class CartState(CamelModel):
    """Ordered sequence of cart lines. Aggregates are always recomputed."""

    lines: List[CartLine] = []

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> int:
        return sum(line.total_price for line in self.lines)

    def find(self, cart_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.cart_id == cart_id), None)

    def find_by_key(self, cart_key: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.cart_key == cart_key), None)


class EditableSelection(CamelModel):
    """What the editing surface needs to reopen a cart line."""

    cart_id: str
    item: MenuItem
    category_title: str
    quantity: int
    selection: SelectionBundle
