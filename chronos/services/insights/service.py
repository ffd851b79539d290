"""AI insight service: productivity analysis, topic ideas and mentor chat"""
import json
import logging
from datetime import datetime
from typing import AsyncGenerator, List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from chronos.config import GOOGLE_API_KEY
from chronos.models.chat import ChatMessage, ChatRole
from chronos.models.session import SessionRecord
from chronos.services.llm import LLMService

from .prompts import build_chat_system_prompt, insight_prompt_template, topic_prompt_template
from .schemas import TopicSuggestions

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 20
SUGGESTION_COUNT = 5

NOT_CONFIGURED_MESSAGE = (
    "⚠️ API Key not configured. Please add GOOGLE_API_KEY to your environment variables."
)
UNAVAILABLE_MESSAGE = "AI service is currently unavailable. Please check your API key."
EMPTY_RESPONSE_MESSAGE = "Unable to generate insights at this time."


class AIServiceNotConfigured(RuntimeError):
    """Raised when a chat is attempted without an API key"""


def summarise_history(history: Sequence[SessionRecord]) -> str:
    """Compact JSON view of the most recent sessions for the insight prompt"""
    recent = list(history)[-HISTORY_WINDOW:]
    rows = [
        {
            "date": record.completed_at.strftime("%Y-%m-%d"),
            "mode": record.mode.value,
            "duration": f"{round(record.duration_seconds / 60)} mins",
            "topic": record.topic,
            "tags": ", ".join(record.tags),
        }
        for record in recent
    ]
    return json.dumps(rows, ensure_ascii=False)


class InsightService:
    """
    Opaque text generation on top of Gemini.

    `generate_insights` and `suggest_topics` never raise: any failure is logged
    and turned into a fixed fallback. `stream_chat` propagates failures so the
    consumer can discard its partial reply.
    """

    def __init__(self, llm: Optional[LLMService] = None, api_key: Optional[str] = None):
        self._api_key = api_key if api_key is not None else GOOGLE_API_KEY
        self._llm = llm

    @property
    def configured(self) -> bool:
        return self._llm is not None or bool(self._api_key)

    def _get_llm(self) -> LLMService:
        if self._llm is None:
            self._llm = LLMService(api_key=self._api_key)
        return self._llm

    async def generate_insights(self, history: Sequence[SessionRecord], topic: str) -> str:
        """
        Coaching advice on recent focus habits.

        Args:
            history: Session log in chronological order; only the last 20 are sent
            topic: Current focus topic

        Returns:
            Markdown text, or a fallback message on any failure
        """
        if not self.configured:
            return NOT_CONFIGURED_MESSAGE

        try:
            messages = insight_prompt_template.format_messages(
                topic=topic,
                history=summarise_history(history),
            )
            text = await self._get_llm().invoke(messages)
            return text.strip() or EMPTY_RESPONSE_MESSAGE
        except Exception as e:
            logger.error(f"Insight generation failed: {e}")
            return UNAVAILABLE_MESSAGE

    async def suggest_topics(self, seed: str) -> List[str]:
        """
        Five sub-topics or related skills for `seed`.

        Returns:
            Suggestions, or an empty list for a blank seed, a missing key or any failure
        """
        if not seed or not seed.strip() or not self.configured:
            return []

        try:
            messages = topic_prompt_template.format_messages(
                count=SUGGESTION_COUNT,
                interest=seed.strip(),
            )
            result = await self._get_llm().structured_invoke(messages, TopicSuggestions)
            topics = [t.strip() for t in result.topics if t and t.strip()]
            return topics[:SUGGESTION_COUNT]
        except Exception as e:
            logger.error(f"Topic suggestion failed for '{seed}': {e}")
            return []

    async def stream_chat(
        self,
        message: str,
        history: Sequence[ChatMessage] = (),
        topic: str = "",
    ) -> AsyncGenerator[str, None]:
        """
        Stream the mentor's reply to `message`.

        Args:
            message: New user message
            history: Earlier turns of the conversation, oldest first
            topic: Current focus topic for the system prompt

        Yields:
            Text chunks as they arrive

        Raises:
            AIServiceNotConfigured: If no API key is configured
        """
        if not self.configured:
            raise AIServiceNotConfigured(NOT_CONFIGURED_MESSAGE)

        messages: List[BaseMessage] = [SystemMessage(content=build_chat_system_prompt(topic))]
        for turn in history:
            if turn.role == ChatRole.USER:
                messages.append(HumanMessage(content=turn.text))
            else:
                messages.append(AIMessage(content=turn.text))
        messages.append(HumanMessage(content=message))

        started = datetime.now()
        async for chunk in self._get_llm().stream_invoke(messages):
            yield chunk
        logger.debug(f"Chat reply streamed in {(datetime.now() - started).total_seconds():.1f}s")
