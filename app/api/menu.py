"""Menu API endpoints."""
import logging
from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_menu_repository
from app.services.menu.base import Catalog
from app.services.menu.repository import MenuRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/menu", response_model=Catalog, response_model_by_alias=True)
async def get_menu(
    request: Request,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get menu, addons and option lists."""
    logger.info(
        f"[MENU] Request received - Client: {request.client.host if request.client else 'unknown'}"
    )
    catalog = await menu_repository.get_catalog()
    logger.info(
        f"[MENU] Catalog served - source: {catalog.source}, "
        f"{len(catalog.menu)} categories, {len(catalog.addons)} addons"
    )
    return catalog


@router.post("/api/menu/refresh", response_model=Catalog, response_model_by_alias=True)
async def refresh_menu(
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Re-read the menu from the backend, bypassing the cache."""
    logger.info("[MENU] Refresh requested")
    return await menu_repository.refresh()
