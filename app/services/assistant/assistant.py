"""AI menu assistant service."""
import logging
from typing import Optional
from openai import AsyncOpenAI

from app.core.config import settings
from app.services.menu.repository import MenuRepository

logger = logging.getLogger(__name__)


class AssistantUnavailableError(Exception):
    """Raised when the assistant has no API key configured."""


class AssistantError(Exception):
    """Raised when the language model call fails."""


def get_system_prompt(restaurant_name: str, menu_context: str) -> str:
    """Generate system prompt for the menu assistant."""
    return (
        f"你是一位專業且友善的「{restaurant_name}」點餐小幫手。"
        "你的任務是根據我提供的菜單JSON資料，回答顧客的問題。"
        "請務必只使用提供的菜單資料來回答，不要杜撰任何菜單上沒有的品項、價格或資訊。"
        "如果顧客詢問有關售罄 (isAvailable: false) 的商品，請告知他們該商品目前無法提供。"
        "回答時請使用繁體中文，語氣親切有禮，並盡量用條列式或重點式的方式清楚呈現，讓顧客一目了然。"
        f"\n\n{menu_context}"
    )


class MenuAssistant:
    """Answers customer questions about the menu with an LLM."""

    def __init__(
        self,
        menu_repository: MenuRepository,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.menu_repository = menu_repository
        if client is None and settings.openai_api_key:
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        self.client = client

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    async def ask(self, message: str) -> str:
        """
        Answer one customer question.

        Raises:
            AssistantUnavailableError: no API key configured
            AssistantError: the model call failed
        """
        if self.client is None:
            raise AssistantUnavailableError("AI assistant is not configured")

        menu_context = await self.menu_repository.get_menu_context()
        system_prompt = get_system_prompt(settings.restaurant_name, menu_context)
        logger.debug(f"[ASSISTANT] System prompt length: {len(system_prompt)} chars")

        try:
            response = await self.client.chat.completions.create(
                model=settings.assistant_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": message},
                ],
                temperature=0.7,
            )
        except Exception as e:
            logger.error(f"[ASSISTANT] Model call failed: {type(e).__name__}: {e}", exc_info=True)
            raise AssistantError(str(e)) from e

        return response.choices[0].message.content or ""
