"""Submitted order persistence service."""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from app.db.models import SubmittedOrder
from app.services.orders.models import OrderData


class OrderPersistenceService:
    """Service for recording orders submitted from this service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_submission(
        self, order_id: str, cart_session: str, order_data: OrderData
    ) -> SubmittedOrder:
        """Record a successfully submitted order."""
        existing = await self.get_by_order_id(order_id)
        if existing:
            return existing

        record = SubmittedOrder(
            order_id=order_id,
            cart_session=cart_session,
            customer_name=order_data.customer_info.name,
            customer_phone=order_data.customer_info.phone,
            order_type=order_data.order_type.value,
            total_price=order_data.total_price,
        )
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def get_by_order_id(self, order_id: str) -> Optional[SubmittedOrder]:
        """Get a recorded order by its remote id."""
        result = await self.db.execute(
            select(SubmittedOrder).where(SubmittedOrder.order_id == order_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, cart_session: str, limit: int = 20) -> List[SubmittedOrder]:
        """Orders submitted from one cart session, newest first."""
        result = await self.db.execute(
            select(SubmittedOrder)
            .where(SubmittedOrder.cart_session == cart_session)
            .order_by(desc(SubmittedOrder.created_at), desc(SubmittedOrder.id))
            .limit(limit)
        )
        return list(result.scalars().all())
