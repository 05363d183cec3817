"""FastAPI dependencies."""
from datetime import timedelta
from typing import Optional
from fastapi import Depends, Request, Response

from app.core.config import settings
from app.services.assistant.assistant import MenuAssistant
from app.services.cart.store import CartStore, create_cart_session_id
from app.services.menu.in_memory_menu import InMemoryMenuProvider
from app.services.menu.repository import MenuRepository
from app.services.menu.sheets_menu import SheetsMenuProvider
from app.services.sheets.client import SheetsClient

# Process-wide provider; holds the parsed static catalog and the remote cache
_menu_provider: Optional[SheetsMenuProvider] = None


def get_sheets_client() -> SheetsClient:
    """Get remote script endpoint client."""
    return SheetsClient(
        base_url=settings.sheets_api_url,
        timeout=settings.sheets_timeout_seconds,
    )


def get_menu_repository() -> MenuRepository:
    """Get menu repository instance."""
    global _menu_provider
    if _menu_provider is None:
        _menu_provider = SheetsMenuProvider(
            client=get_sheets_client(),
            fallback=InMemoryMenuProvider(),
            cache_seconds=settings.menu_cache_seconds,
        )
    return MenuRepository(provider=_menu_provider)


def get_cart_store() -> CartStore:
    """Get cart store instance."""
    return CartStore(ttl=timedelta(hours=settings.cart_ttl_hours))


def get_cart_session(request: Request, response: Response) -> str:
    """Get the caller's cart session id, issuing a cookie on first use."""
    session_id = request.cookies.get(settings.cart_cookie_name)
    if not session_id:
        session_id = create_cart_session_id()
        response.set_cookie(
            key=settings.cart_cookie_name,
            value=session_id,
            httponly=True,
            samesite="lax",
        )
    return session_id


def get_menu_assistant(
    menu_repository: MenuRepository = Depends(get_menu_repository),
) -> MenuAssistant:
    """Get menu assistant instance."""
    return MenuAssistant(menu_repository)
