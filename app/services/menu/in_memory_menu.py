"""In-memory menu provider."""
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from app.services.menu.base import (
    Addon,
    Catalog,
    MenuCategory,
    MenuProvider,
    OPTION_LIST_KEYS,
    Option,
    OptionsData,
)


class InMemoryMenuProvider(MenuProvider):
    """Static catalog provider backed by a YAML file.

    Option lists in the file are plain name lists; every entry is treated
    as available.
    """

    def __init__(self, menu_file: Optional[str] = None):
        """Initialize with optional menu file path."""
        if menu_file is None:
            menu_file = Path(__file__).parent / "data" / "menu.yaml"
        self.menu_file = Path(menu_file)
        self._catalog: Optional[Catalog] = None

    def _load_catalog(self) -> Catalog:
        """Load catalog from YAML file."""
        if self._catalog is None:
            with open(self.menu_file, "r", encoding="utf-8") as f:
                data: Dict[str, Any] = yaml.safe_load(f) or {}
            options = data.get("options") or {}
            self._catalog = Catalog(
                menu=[MenuCategory(**category) for category in data.get("menu", [])],
                addons=[Addon(**addon) for addon in data.get("addons", [])],
                options=OptionsData(
                    **{
                        key: [Option(name=name) for name in options.get(key) or []]
                        for key in OPTION_LIST_KEYS
                    }
                ),
                source="fallback",
            )
        return self._catalog

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return self._load_catalog().model_copy(deep=True)
