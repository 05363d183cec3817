"""Per-session cart storage."""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, NamedTuple, Optional

from app.services.cart.models import CartState

logger = logging.getLogger(__name__)


class StoredCart(NamedTuple):
    state: CartState
    touched_at: datetime


# Module-level cart storage (persists across requests)
_carts: Dict[str, StoredCart] = {}


def create_cart_session_id() -> str:
    """Generate a new cart session identifier."""
    return secrets.token_urlsafe(24)


class CartStore:
    """Holds one cart per browser session.

    A cart nobody has read or written for `ttl` is dropped, so abandoned
    sessions do not pile up in memory.
    """

    def __init__(self, ttl: timedelta, carts: Optional[Dict[str, StoredCart]] = None):
        self.ttl = ttl
        self._carts = _carts if carts is None else carts

    def get(self, session_id: str, now: Optional[datetime] = None) -> CartState:
        """Get the session's cart, empty if none was saved or it expired."""
        now = now or datetime.now(timezone.utc)
        self.prune_expired(now)
        stored = self._carts.get(session_id)
        if stored is None:
            return CartState()
        self._carts[session_id] = stored._replace(touched_at=now)
        return stored.state

    def save(self, session_id: str, state: CartState, now: Optional[datetime] = None) -> CartState:
        now = now or datetime.now(timezone.utc)
        self.prune_expired(now)
        self._carts[session_id] = StoredCart(state, now)
        return state

    def clear(self, session_id: str) -> None:
        self._carts.pop(session_id, None)

    def prune_expired(self, now: datetime) -> None:
        expired = [sid for sid, stored in self._carts.items() if now - stored.touched_at > self.ttl]
        for session_id in expired:
            del self._carts[session_id]
        if expired:
            logger.info(f"[CART] Dropped {len(expired)} idle cart(s)")
