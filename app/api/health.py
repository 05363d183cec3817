"""Health check endpoint."""
import logging
from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_sheets_client
from app.services.sheets.client import SheetsClient

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request, client: SheetsClient = Depends(get_sheets_client)):
    """Health check endpoint; reports whether the order backend is configured."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {"status": "healthy", "ordersBackend": client.is_configured}
