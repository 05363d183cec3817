"""Selection validation service."""
from typing import Dict, Iterable, List, Mapping, Optional

from app.services.cart.models import NamedQuantity, SelectionBundle
from app.services.menu.base import (
    Addon,
    DONENESS_LEVELS,
    DRINK_CHOICES,
    MenuItem,
    Option,
    OptionsData,
)
from app.services.menu.repository import multi_choice_options


class SelectionValidationError(ValueError):
    """Raised when a selection bundle does not satisfy the item's quotas."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def _mapping_total(mapping: Mapping[str, int]) -> int:
    return sum(quantity for quantity in mapping.values() if quantity > 0)


def _list_total(entries: Iterable[NamedQuantity], group: Optional[List[str]] = None) -> int:
    return sum(
        entry.quantity
        for entry in entries
        if entry.quantity > 0 and (group is None or entry.name in group)
    )


class SelectionValidator:
    """Checks a selection bundle against an item's customization quotas.

    The cart engine trusts its input; this is the layer that runs before a
    selection is confirmed.
    """

    def __init__(self, options: OptionsData, addons: List[Addon]):
        self.options = options
        self.addons: Dict[str, Addon] = {addon.id: addon for addon in addons}

    def validate(self, item: MenuItem, quantity: int, selection: SelectionBundle) -> List[str]:
        """
        Validate a selection for `quantity` units of `item`.

        Returns:
            List of error messages, empty when the selection is acceptable
        """
        if quantity < 1:
            return ["Quantity must be at least 1"]

        errors: List[str] = []
        custom = item.customizations

        if not item.is_available:
            errors.append(f"'{item.name}' is currently unavailable")

        self._check_non_negative(errors, selection)

        # Doneness
        if custom.doneness:
            self._check_keys(errors, "Doneness", selection.donenesses, DONENESS_LEVELS)
            if _mapping_total(selection.donenesses) != quantity:
                errors.append(f"Select exactly {quantity} doneness level(s)")
        elif _mapping_total(selection.donenesses):
            errors.append(f"'{item.name}' has no doneness choice")

        # Sauces
        if custom.sauce_choice:
            limit = (custom.sauces_per_item or 1) * quantity
            self._check_options(errors, "Sauce", selection.sauces, self.options.sauces)
            if _list_total(selection.sauces) != limit:
                errors.append(f"Select exactly {limit} sauce(s)")
        elif _list_total(selection.sauces):
            errors.append(f"'{item.name}' has no sauce choice")

        # Drinks
        if custom.drink_choice:
            self._check_keys(errors, "Drink", selection.drinks, DRINK_CHOICES)
            if _mapping_total(selection.drinks) != quantity:
                errors.append(f"Select exactly {quantity} drink(s)")
        elif _mapping_total(selection.drinks):
            errors.append(f"'{item.name}' has no drink choice")

        # Desserts: one from each group per unit
        if custom.dessert_choice:
            group_a = self.options.desserts_a
            group_b = self.options.desserts_b
            self._check_options(errors, "Dessert", selection.desserts, group_a + group_b)
            if (
                _list_total(selection.desserts, [o.name for o in group_a]) != quantity
                or _list_total(selection.desserts, [o.name for o in group_b]) != quantity
            ):
                errors.append(f"Select exactly {quantity} dessert(s) from each of groups A and B")
        elif _list_total(selection.desserts):
            errors.append(f"'{item.name}' has no dessert choice")

        # Pastas: one noodle and one sauce per unit
        if custom.pasta_choice:
            group_a = self.options.pastas_a
            group_b = self.options.pastas_b
            self._check_options(errors, "Pasta", selection.pastas, group_a + group_b)
            if (
                _list_total(selection.pastas, [o.name for o in group_a]) != quantity
                or _list_total(selection.pastas, [o.name for o in group_b]) != quantity
            ):
                errors.append(f"Select exactly {quantity} pasta(s) and {quantity} pasta sauce(s)")
        elif _list_total(selection.pastas):
            errors.append(f"'{item.name}' has no pasta choice")

        # Component choice
        if custom.component_choice:
            choice = custom.component_choice
            self._check_keys(errors, choice.title, selection.component_choices, choice.options)
            if _mapping_total(selection.component_choices) != quantity:
                errors.append(f"{choice.title}: select exactly {quantity}")
        elif _mapping_total(selection.component_choices):
            errors.append(f"'{item.name}' has no component choice")

        # Side choice: `choices` picks per unit
        if custom.side_choice:
            choice = custom.side_choice
            limit = choice.choices * quantity
            self._check_keys(errors, choice.title, selection.side_choices, choice.options)
            if _mapping_total(selection.side_choices) != limit:
                errors.append(f"{choice.title}: select exactly {limit}")
        elif _mapping_total(selection.side_choices):
            errors.append(f"'{item.name}' has no side choice")

        # Multi choice
        if custom.multi_choice:
            choice = custom.multi_choice
            available = multi_choice_options(item, self.options)
            self._check_keys(
                errors,
                choice.title,
                selection.multi_choice,
                [o.name for o in available if o.is_available],
            )
            if _mapping_total(selection.multi_choice) != quantity:
                errors.append(f"{choice.title}: select exactly {quantity}")
        elif _mapping_total(selection.multi_choice):
            errors.append(f"'{item.name}' has no multi choice")

        # Single-choice addon
        if selection.single_choice_addon:
            offer = custom.single_choice_addon
            if offer is None:
                errors.append(f"'{item.name}' has no single-choice upgrade")
            elif selection.single_choice_addon not in offer.options:
                errors.append(f"Unknown upgrade '{selection.single_choice_addon}'")

        # Notes
        if selection.notes.strip() and not custom.notes:
            errors.append(f"'{item.name}' does not take notes")

        # Addons
        for selected in selection.addons:
            addon = self.addons.get(selected.id)
            if addon is None:
                errors.append(f"Unknown addon '{selected.id}'")
            elif not addon.is_available:
                errors.append(f"Addon '{addon.name}' is currently unavailable")
            if selected.quantity < 1:
                errors.append(f"Addon '{selected.name}' quantity must be at least 1")

        return errors

    def ensure_valid(self, item: MenuItem, quantity: int, selection: SelectionBundle) -> None:
        """Raise SelectionValidationError unless the selection is acceptable."""
        errors = self.validate(item, quantity, selection)
        if errors:
            raise SelectionValidationError(errors)

    @staticmethod
    def _check_non_negative(errors: List[str], selection: SelectionBundle) -> None:
        mappings = {
            "Doneness": selection.donenesses,
            "Drink": selection.drinks,
            "Side choice": selection.side_choices,
            "Component choice": selection.component_choices,
            "Multi choice": selection.multi_choice,
        }
        lists = {
            "Sauce": selection.sauces,
            "Dessert": selection.desserts,
            "Pasta": selection.pastas,
        }
        counts = [(label, name, count) for label, m in mappings.items() for name, count in m.items()]
        counts += [(label, e.name, e.quantity) for label, entries in lists.items() for e in entries]
        for label, name, count in counts:
            if count < 0:
                errors.append(f"{label} '{name}' quantity must not be negative")

    @staticmethod
    def _check_keys(
        errors: List[str],
        label: str,
        mapping: Mapping[str, int],
        allowed: Iterable[str],
    ) -> None:
        allowed = set(allowed)
        for name, count in mapping.items():
            if count > 0 and name not in allowed:
                errors.append(f"{label} '{name}' is not offered")

    @staticmethod
    def _check_options(
        errors: List[str],
        label: str,
        entries: Iterable[NamedQuantity],
        options: List[Option],
    ) -> None:
        by_name = {option.name: option for option in options}
        for entry in entries:
            option = by_name.get(entry.name)
            if option is None:
                errors.append(f"{label} '{entry.name}' is not offered")
            elif not option.is_available and entry.quantity > 0:
                errors.append(f"{label} '{entry.name}' is currently unavailable")
