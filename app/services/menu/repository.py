"""Menu repository."""
import json
from typing import Dict, List, Optional, Tuple
from app.services.menu.base import (
    Addon,
    Catalog,
    MenuCategory,
    MenuItem,
    MenuProvider,
    Option,
    OptionsData,
)


class MenuRepository:
    """Repository for catalog lookups."""

    def __init__(self, provider: MenuProvider):
        self.provider = provider

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return await self.provider.get_catalog()

    async def refresh(self) -> Catalog:
        """Re-read the catalog, bypassing any cache."""
        self.provider.invalidate()
        return await self.provider.get_catalog()

    async def get_availability(self) -> Dict[str, Dict]:
        """Current availability flags, in the shape the admin toggler saves."""
        catalog = await self.get_catalog()
        return {
            "menu": {
                item.id: item.is_available
                for category in catalog.menu
                for item in category.items
            },
            "addons": {addon.id: addon.is_available for addon in catalog.addons},
            "options": catalog.options.availability(),
        }

    async def get_menu_context(self) -> str:
        """Get a compact JSON rendering of the catalog for LLM context."""
        catalog = await self.get_catalog()
        menu = [
            {
                "title": category.title,
                "items": [
                    item.model_dump(
                        include={"id", "name", "weight", "price", "is_available"},
                        by_alias=True,
                    )
                    for item in category.items
                ],
            }
            for category in catalog.menu
        ]
        addons = [
            addon.model_dump(
                include={"id", "name", "price", "category", "is_available"},
                by_alias=True,
            )
            for addon in catalog.addons
        ]
        return (
            "這是餐廳的菜單資料 (JSON格式):\n\n"
            f"菜單: {json.dumps(menu, ensure_ascii=False)}\n\n"
            f"加購項目: {json.dumps(addons, ensure_ascii=False)}"
        )


def find_item(catalog: Catalog, item_id: str) -> Optional[Tuple[MenuItem, MenuCategory]]:
    """Find an item and its category in a catalog."""
    for category in catalog.menu:
        for item in category.items:
            if item.id == item_id:
                return item, category
    return None


def find_addon(catalog: Catalog, addon_id: str) -> Optional[Addon]:
    return next((addon for addon in catalog.addons if addon.id == addon_id), None)


def multi_choice_options(item: MenuItem, options: OptionsData) -> List[Option]:
    """Resolve the option list a multi-choice group draws from.

    Cold noodle and simple meal groups use the server-supplied lists; any
    other group uses the item's own options, all available.
    """
    multi_choice = item.customizations.multi_choice
    if multi_choice is None:
        return []
    if "涼麵" in multi_choice.title:
        return options.cold_noodles
    if "主餐選擇" in multi_choice.title:
        return options.simple_meals
    return [Option(name=name) for name in multi_choice.options]
