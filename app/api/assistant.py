"""AI menu assistant endpoint."""
import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from app.core.dependencies import get_menu_assistant
from app.services.assistant.assistant import (
    AssistantError,
    AssistantUnavailableError,
    MenuAssistant,
)
from app.services.menu.base import CamelModel

router = APIRouter()
logger = logging.getLogger(__name__)


class AssistantRequest(CamelModel):
    message: str = Field(min_length=1)


class AssistantResponse(CamelModel):
    reply: str


@router.post("/api/assistant", response_model=AssistantResponse)
async def ask_assistant(
    body: AssistantRequest,
    assistant: MenuAssistant = Depends(get_menu_assistant),
):
    """Answer a customer question about the menu."""
    logger.info(f"[ASSISTANT] Question received ({len(body.message)} chars)")
    try:
        reply = await assistant.ask(body.message)
    except AssistantUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except AssistantError:
        raise HTTPException(status_code=502, detail="抱歉，AI 小幫手暫時無法回應，請稍後再試。")
    return AssistantResponse(reply=reply)
