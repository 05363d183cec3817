"""Database models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SubmittedOrder(Base):
    """Orders submitted from this service, kept for recent-order lookups."""

    __tablename__ = "submitted_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, unique=True, index=True, nullable=False)  # Remote order id
    cart_session = Column(String, index=True, nullable=False)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    order_type = Column(String, nullable=False)  # 內用, 外帶
    total_price = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
