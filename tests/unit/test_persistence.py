"""Unit tests for the submitted order mirror."""
import pytest

from app.services.cart import reducer
from app.services.cart.models import CartState, SelectionBundle
from app.services.menu.base import MenuItem
from app.services.orders.models import CustomerInfo, OrderData, OrderType
from app.services.persistence.orders import OrderPersistenceService


def _order_data(name: str = "王小明", total: int = 80) -> OrderData:
    item = MenuItem(id="burger-kimchi", name="黃金泡菜脆皮雞塊吃到堡", price=total)
    state = reducer.apply_add(CartState(), item, 1, SelectionBundle(), "炸物&漢堡")
    return OrderData(
        items=state.lines,
        total_price=state.total_price,
        customer_info=CustomerInfo(name=name, phone="0912345678"),
        order_type=OrderType.TAKE_OUT,
    )


class TestOrderPersistence:
    """Test order persistence service."""

    @pytest.mark.asyncio
    async def test_record_submission(self, test_db):
        """Test recording a submitted order."""
        service = OrderPersistenceService(test_db)

        record = await service.record_submission("A001", "session-1", _order_data())

        assert record.id is not None
        assert record.order_id == "A001"
        assert record.cart_session == "session-1"
        assert record.customer_name == "王小明"
        assert record.customer_phone == "0912345678"
        assert record.order_type == "外帶"
        assert record.total_price == 80
        assert record.created_at is not None

    @pytest.mark.asyncio
    async def test_record_submission_idempotent(self, test_db):
        """Test that recording the same remote id twice returns the first row."""
        service = OrderPersistenceService(test_db)

        first = await service.record_submission("A001", "session-1", _order_data())
        second = await service.record_submission("A001", "session-2", _order_data("其他人"))

        assert first.id == second.id
        assert second.customer_name == "王小明"

    @pytest.mark.asyncio
    async def test_get_by_order_id(self, test_db):
        """Test retrieving a recorded order by remote id."""
        service = OrderPersistenceService(test_db)
        await service.record_submission("A002", "session-1", _order_data())

        assert (await service.get_by_order_id("A002")).order_id == "A002"
        assert await service.get_by_order_id("missing") is None

    @pytest.mark.asyncio
    async def test_list_recent_per_session(self, test_db):
        """Test that recent orders are scoped to a session, newest first."""
        service = OrderPersistenceService(test_db)
        await service.record_submission("A001", "session-1", _order_data())
        await service.record_submission("A002", "session-2", _order_data())
        await service.record_submission("A003", "session-1", _order_data())

        recent = await service.list_recent("session-1")

        assert [record.order_id for record in recent] == ["A003", "A001"]

    @pytest.mark.asyncio
    async def test_list_recent_limit(self, test_db):
        """Test the recent list limit."""
        service = OrderPersistenceService(test_db)
        for i in range(3):
            await service.record_submission(f"A00{i}", "session-1", _order_data())

        assert len(await service.list_recent("session-1", limit=2)) == 2
