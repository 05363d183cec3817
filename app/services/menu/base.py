"""Catalog models and menu provider interface."""
from abc import ABC, abstractmethod
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DONENESS_LEVELS = ("3分熟", "5分熟", "7分熟", "全熟")
DRINK_CHOICES = ("無糖紅茶", "冰涼可樂")

# Keys of the dynamic, server-supplied option lists
OPTION_LIST_KEYS = (
    "sauces",
    "desserts_a",
    "desserts_b",
    "pastas_a",
    "pastas_b",
    "cold_noodles",
    "simple_meals",
)


class CamelModel(BaseModel):
    """Base model that speaks the remote endpoint's camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SingleChoiceAddon(CamelModel):
    """Priced upgrade where exactly one option may be chosen."""

    price: int = Field(ge=0)
    options: List[str] = []


class ComponentChoice(CamelModel):
    """Named single-component choice (e.g. fried chicken or fried fish)."""

    title: str
    options: List[str] = []


class MultiChoice(CamelModel):
    """Generic multi-choice group, e.g. cold noodle flavours."""

    title: str
    options: List[str] = []


class SideChoice(CamelModel):
    """Side dishes where `choices` picks are required per unit."""

    title: str
    options: List[str] = []
    choices: int = Field(ge=1)


class MenuItemCustomizations(CamelModel):
    """Customization capabilities a menu item offers."""

    doneness: bool = False
    sauce_choice: bool = False
    sauces_per_item: Optional[int] = None
    drink_choice: bool = False
    dessert_choice: bool = False
    pasta_choice: bool = False
    component_choice: Optional[ComponentChoice] = None
    notes: bool = False
    single_choice_addon: Optional[SingleChoiceAddon] = None
    multi_choice: Optional[MultiChoice] = None
    side_choice: Optional[SideChoice] = None


class MenuItem(CamelModel):
    """Menu item model."""

    id: str
    name: str
    short_name: Optional[str] = None
    weight: Optional[str] = None
    price: int = Field(ge=0)
    description: Optional[str] = None
    customizations: MenuItemCustomizations = MenuItemCustomizations()
    is_available: bool = True


class MenuCategory(CamelModel):
    """A titled group of menu items."""

    title: str
    items: List[MenuItem] = []


class Addon(CamelModel):
    """Priced optional extra."""

    id: str
    name: str
    price: int = Field(ge=0)
    category: str = ""
    is_available: bool = True


class Option(CamelModel):
    """Entry of a server-supplied option list."""

    name: str
    is_available: bool = True


class OptionsData(CamelModel):
    """Dynamic option lists supplied by the backend."""

    sauces: List[Option] = []
    desserts_a: List[Option] = []
    desserts_b: List[Option] = []
    pastas_a: List[Option] = []
    pastas_b: List[Option] = []
    cold_noodles: List[Option] = []
    simple_meals: List[Option] = []

    def availability(self) -> Dict[str, Dict[str, bool]]:
        """Availability flags per list, keyed by camelCase list name."""
        return {
            to_camel(key): {option.name: option.is_available for option in getattr(self, key)}
            for key in OPTION_LIST_KEYS
        }


class Catalog(CamelModel):
    """Full catalog: menu, addons and option lists."""

    menu: List[MenuCategory] = []
    addons: List[Addon] = []
    options: OptionsData = OptionsData()
    is_quiet_hours: bool = False
    source: Literal["api", "fallback"] = "fallback"
    notification: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.menu or all(not category.items for category in self.menu)


class MenuProvider(ABC):
    """Abstract base class for menu providers."""

    @abstractmethod
    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        pass

    def invalidate(self) -> None:
        """Drop any cached catalog so the next read is fresh."""
        pass
