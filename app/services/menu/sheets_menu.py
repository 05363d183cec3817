"""Remote (spreadsheet) menu provider with static fallback."""
import logging
import time
from typing import Optional
from pydantic import ValidationError

from app.services.menu.base import Catalog, MenuProvider, OPTION_LIST_KEYS, OptionsData
from app.services.sheets.client import SheetsAPIError, SheetsClient

logger = logging.getLogger(__name__)

OFFLINE_NOTICE = "無法連接伺服器，目前顯示的是離線菜單。"
EMPTY_MENU_NOTICE = (
    "成功連接伺服器，但菜單是空的。請檢查後台 Google Sheet 是否已填入資料，"
    "或執行「一鍵設定工作表」。"
)


class SheetsMenuProvider(MenuProvider):
    """Catalog provider that reads the remote sheet and degrades to a fallback."""

    def __init__(
        self,
        client: SheetsClient,
        fallback: MenuProvider,
        cache_seconds: float = 0.0,
    ):
        self.client = client
        self.fallback = fallback
        self.cache_seconds = cache_seconds
        self._cached: Optional[Catalog] = None
        self._cached_at = 0.0

    def invalidate(self) -> None:
        self._cached = None

    async def get_catalog(self) -> Catalog:
        """Get the full catalog. Only remote catalogs are cached."""
        if self._cached is not None and time.monotonic() - self._cached_at < self.cache_seconds:
            return self._cached.model_copy(deep=True)

        catalog = await self._fetch_catalog()
        if catalog.source == "api" and self.cache_seconds > 0:
            self._cached = catalog.model_copy(deep=True)
            self._cached_at = time.monotonic()
        return catalog

    async def _fetch_catalog(self) -> Catalog:
        """Fetch the remote catalog, falling back to the static one on failure."""
        fallback = await self.fallback.get_catalog()

        try:
            data = await self.client.get_menu()
            if not all(data.get(key) is not None for key in ("menu", "addons", "options")):
                raise SheetsAPIError("Invalid data structure from API")
            if not isinstance(data["options"], dict):
                raise SheetsAPIError("Invalid options structure from API")
            # Missing or null lists are filled from the static catalog below
            options = {key: value for key, value in data["options"].items() if value}
            remote = Catalog.model_validate({**data, "options": options, "source": "api"})
        except (SheetsAPIError, ValidationError) as e:
            logger.warning(f"[MENU] Remote menu fetch failed, using fallback: {e}")
            fallback.notification = OFFLINE_NOTICE
            return fallback

        remote.options = self._merge_options(remote.options, fallback.options)

        if remote.is_empty:
            logger.warning("[MENU] Remote menu is empty, serving static items")
            remote.menu = fallback.menu
            remote.addons = fallback.addons
            remote.notification = EMPTY_MENU_NOTICE

        logger.info(
            f"[MENU] Remote catalog loaded - {sum(len(c.items) for c in remote.menu)} items, "
            f"{len(remote.addons)} addons"
        )
        return remote

    @staticmethod
    def _merge_options(remote: OptionsData, fallback: OptionsData) -> OptionsData:
        """Replace every empty remote option list with the static one."""
        return OptionsData(
            **{
                key: getattr(remote, key) or getattr(fallback, key)
                for key in OPTION_LIST_KEYS
            }
        )
