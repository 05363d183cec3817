"""Cart key normalization.

A cart key identifies a line for merge purposes. It is built from the item
id and every customization category, in this fixed order:

    donenesses, drinks, sideChoices, multiChoice, componentChoices,
    addons, sauces, desserts, pastas, singleChoiceAddon

Mapping categories keep only positive quantities and are serialized with
sorted keys. List categories become sorted `name:quantity` strings joined
by commas (addons use their id). Notes are not part of the key.
"""
import hashlib
import json
from typing import Dict, Iterable, Mapping, Tuple

from app.services.cart.models import SelectionBundle

NO_SINGLE_CHOICE = "none"
LIST_DELIMITER = ","


def stable_mapping_string(mapping: Mapping[str, int]) -> str:
    """Serialize choice -> quantity, ignoring insertion order and empty entries."""
    retained = {
        name: quantity
        for name, quantity in sorted((mapping or {}).items())
        if quantity and quantity > 0
    }
    if not retained:
        return ""
    return json.dumps(retained, ensure_ascii=False, separators=(",", ":"))


def stable_list_string(entries: Iterable[Tuple[str, int]]) -> str:
    """Serialize (name, quantity) pairs as a sorted, comma-joined string."""
    return LIST_DELIMITER.join(
        sorted(f"{name}:{quantity}" for name, quantity in entries if quantity > 0)
    )


def key_fields(item_id: str, selection: SelectionBundle) -> Dict[str, str]:
    """Normalized key components, in key order."""
    return {
        "id": item_id,
        "donenesses": stable_mapping_string(selection.donenesses),
        "drinks": stable_mapping_string(selection.drinks),
        "sideChoices": stable_mapping_string(selection.side_choices),
        "multiChoice": stable_mapping_string(selection.multi_choice),
        "componentChoices": stable_mapping_string(selection.component_choices),
        "addons": stable_list_string((a.id, a.quantity) for a in selection.addons),
        "sauces": stable_list_string((s.name, s.quantity) for s in selection.sauces),
        "desserts": stable_list_string((d.name, d.quantity) for d in selection.desserts),
        "pastas": stable_list_string((p.name, p.quantity) for p in selection.pastas),
        "singleChoiceAddon": selection.single_choice_addon or NO_SINGLE_CHOICE,
    }


def make_cart_key(item_id: str, selection: SelectionBundle) -> str:
    """Build the cart key for an item and selection bundle."""
    return json.dumps(key_fields(item_id, selection), ensure_ascii=False)


def make_cart_id(cart_key: str, unique: str) -> str:
    """Build a URL-safe line id from a cart key and a uniqueness token."""
    digest = hashlib.sha1(cart_key.encode("utf-8")).hexdigest()[:12]
    return f"{digest}-{unique}"
