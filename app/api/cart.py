"""Cart API endpoints."""
import logging
from typing import List, Tuple
from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import (
    get_cart_session,
    get_cart_store,
    get_menu_repository,
    get_sheets_client,
)
from app.db.database import get_db
from app.services.cart import reducer
from app.services.cart.models import (
    CartLine,
    CartState,
    EditableSelection,
    SelectedAddon,
    SelectionBundle,
)
from app.services.cart.store import CartStore
from app.services.cart.validator import SelectionValidationError, SelectionValidator
from app.services.menu.base import CamelModel, MenuCategory, MenuItem
from app.services.menu.repository import MenuRepository, find_addon, find_item
from app.services.orders.checkout import CheckoutValidationError, build_order_data
from app.services.orders.models import CustomerInfo, OrderType, SubmitResult
from app.services.orders.ticket import format_ticket
from app.services.persistence.orders import OrderPersistenceService
from app.services.sheets.client import SheetsAPIError, SheetsClient

router = APIRouter()
logger = logging.getLogger(__name__)


class AddonQuantity(CamelModel):
    """Addon reference in a request; price and name come from the menu."""

    id: str
    quantity: int = Field(ge=1)


class SelectionRequest(SelectionBundle):
    """Selection bundle as sent by the client."""

    addons: List[AddonQuantity] = []


class CartItemRequest(CamelModel):
    """Confirm a selection for an item."""

    item_id: str
    quantity: int = 1
    selection: SelectionRequest = SelectionRequest()


class QuantityUpdate(CamelModel):
    quantity: int


class CartResponse(CamelModel):
    """Cart contents with recomputed aggregates."""

    lines: List[CartLine]
    item_count: int
    total_price: int


class CheckoutRequest(CamelModel):
    customer_info: CustomerInfo
    order_type: OrderType = OrderType.DINE_IN


class CheckoutResponse(CamelModel):
    success: bool
    order_id: str
    total_price: int
    ticket: str


def _cart_response(state: CartState) -> CartResponse:
    return CartResponse(
        lines=state.lines,
        item_count=state.item_count,
        total_price=state.total_price,
    )


async def _resolve_selection(
    body: CartItemRequest, menu_repository: MenuRepository
) -> Tuple[MenuItem, MenuCategory, SelectionBundle]:
    """Look up the item and addons and validate the selection against them."""
    catalog = await menu_repository.get_catalog()
    found = find_item(catalog, body.item_id)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Menu item '{body.item_id}' not found")
    item, category = found

    addons = [(find_addon(catalog, a.id), a) for a in body.selection.addons]
    unknown = [a.id for addon, a in addons if addon is None]
    if unknown:
        raise SelectionValidationError([f"Unknown addon '{addon_id}'" for addon_id in unknown])

    selection = SelectionBundle(
        **body.selection.model_dump(exclude={"addons"}),
        addons=[SelectedAddon(**addon.model_dump(), quantity=a.quantity) for addon, a in addons],
    )
    SelectionValidator(catalog.options, catalog.addons).ensure_valid(
        item, body.quantity, selection
    )
    return item, category, selection


@router.get("/api/cart", response_model=CartResponse, response_model_by_alias=True)
async def get_cart(
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    """Get the session's cart."""
    return _cart_response(store.get(session_id))


@router.delete("/api/cart", response_model=CartResponse, response_model_by_alias=True)
async def clear_cart(
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    """Empty the session's cart."""
    store.clear(session_id)
    return _cart_response(CartState())


@router.post("/api/cart/items", response_model=CartResponse, response_model_by_alias=True)
async def add_cart_item(
    body: CartItemRequest,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Add a confirmed selection; equal selections merge into one line."""
    logger.info(f"[CART ADD] item: {body.item_id}, quantity: {body.quantity}")
    try:
        item, category, selection = await _resolve_selection(body, menu_repository)
    except SelectionValidationError as e:
        logger.info(f"[CART ADD] Rejected selection for {body.item_id}: {e.errors}")
        raise HTTPException(status_code=422, detail=e.errors)

    state = reducer.apply_add(store.get(session_id), item, body.quantity, selection, category.title)
    store.save(session_id, state)
    logger.info(
        f"[CART ADD] Cart now {len(state.lines)} lines, "
        f"{state.item_count} items, total {state.total_price}"
    )
    return _cart_response(state)


@router.get(
    "/api/cart/items/{cart_id}/selection",
    response_model=EditableSelection,
    response_model_by_alias=True,
)
async def get_cart_item_selection(
    cart_id: str,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    """Load a line's stored choices for editing."""
    editable = reducer.edit_item(store.get(session_id), cart_id)
    if editable is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return editable


@router.put("/api/cart/items/{cart_id}", response_model=CartResponse, response_model_by_alias=True)
async def edit_cart_item(
    cart_id: str,
    body: CartItemRequest,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Replace a line in place, keeping its id."""
    logger.info(f"[CART EDIT] cart_id: {cart_id}, item: {body.item_id}, quantity: {body.quantity}")
    try:
        item, category, selection = await _resolve_selection(body, menu_repository)
    except SelectionValidationError as e:
        logger.info(f"[CART EDIT] Rejected selection for {cart_id}: {e.errors}")
        raise HTTPException(status_code=422, detail=e.errors)

    state = reducer.apply_edit(
        store.get(session_id), cart_id, item, body.quantity, selection, category.title
    )
    store.save(session_id, state)
    return _cart_response(state)


@router.patch("/api/cart/items/{cart_id}", response_model=CartResponse, response_model_by_alias=True)
async def update_cart_item_quantity(
    cart_id: str,
    body: QuantityUpdate,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    """Change a line's quantity; zero or less removes the line."""
    state = store.get(session_id)
    if state.find(cart_id) is None:
        raise HTTPException(status_code=404, detail="Cart item not found")

    logger.info(f"[CART QUANTITY] cart_id: {cart_id}, quantity: {body.quantity}")
    state = store.save(session_id, reducer.update_quantity(state, cart_id, body.quantity))
    return _cart_response(state)


@router.delete("/api/cart/items/{cart_id}", response_model=CartResponse, response_model_by_alias=True)
async def remove_cart_item(
    cart_id: str,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    """Remove a line."""
    state = store.get(session_id)
    if state.find(cart_id) is None:
        raise HTTPException(status_code=404, detail="Cart item not found")

    logger.info(f"[CART REMOVE] cart_id: {cart_id}")
    state = store.save(session_id, reducer.remove_item(state, cart_id))
    return _cart_response(state)


@router.post("/api/cart/checkout", response_model=CheckoutResponse, response_model_by_alias=True)
async def checkout(
    body: CheckoutRequest,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
    client: SheetsClient = Depends(get_sheets_client),
    db: AsyncSession = Depends(get_db),
):
    """Submit the cart as an order and return the kitchen ticket."""
    state = store.get(session_id)
    try:
        order_data = build_order_data(state, body.customer_info, body.order_type)
    except CheckoutValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info(
        f"[CHECKOUT] Submitting order - {len(order_data.items)} lines, "
        f"total {order_data.total_price}, type {order_data.order_type.value}"
    )
    try:
        result = SubmitResult.model_validate(await client.create_order(order_data.to_payload()))
    except (SheetsAPIError, ValidationError) as e:
        logger.error(f"[CHECKOUT] Order submission failed: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"訂單提交時發生錯誤: {e}")

    if not result.success or not result.order_id:
        logger.warning(f"[CHECKOUT] Backend rejected order: {result.message}")
        raise HTTPException(
            status_code=502, detail=f"訂單提交失敗: {result.message or '未知錯誤'}"
        )

    # Accepted remotely: the cart is spent even if the local mirror fails
    store.clear(session_id)
    logger.info(f"[CHECKOUT] Order {result.order_id} submitted")

    try:
        await OrderPersistenceService(db).record_submission(result.order_id, session_id, order_data)
    except SQLAlchemyError as e:
        logger.error(
            f"[CHECKOUT] Could not record order {result.order_id} locally: {e}", exc_info=True
        )

    return CheckoutResponse(
        success=True,
        order_id=result.order_id,
        total_price=order_data.total_price,
        ticket=format_ticket(order_data, result.order_id, settings.restaurant_name),
    )
