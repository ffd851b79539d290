"""Conversation state for the mentor chat"""
import asyncio
import logging
from contextlib import aclosing
from typing import AsyncGenerator, Callable, List, Optional

from chronos.models.chat import ChatMessage, ChatRole
from chronos.utils.ids import new_time_id, now_ms

from .service import AIServiceNotConfigured, InsightService, NOT_CONFIGURED_MESSAGE

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = (
    "I apologize, but I encountered an error connecting to the Dojo mainframe. Please try again."
)
CLEARED_MESSAGE = "Context cleared. Ready for a new topic!"
DEFAULT_TOPIC = "Kubernetes"


class ChatRejected(ValueError):
    """Blank input, or a reply is still streaming"""


class ChatStreamFailed(RuntimeError):
    """The reply stream broke; the transcript now ends with the apology"""


def welcome_message(topic: str) -> str:
    return (
        f"Hello! I'm your DevOps Dojo Sensei. I see you're focusing on **{topic or DEFAULT_TOPIC}**. "
        "How can I help you deepen your understanding today? I can generate roadmaps, "
        "explain concepts, or create quiz questions."
    )


class ChatSession:
    """
    Visible transcript plus the model-side conversation context.

    One reply streams at a time into a single model message. A stream that
    fails is discarded and replaced by an apology; the context only keeps
    completed exchanges.
    """

    def __init__(self, service: InsightService, topic: str = DEFAULT_TOPIC):
        self._service = service
        self._topic = topic
        self._messages: List[ChatMessage] = []
        self._history: List[ChatMessage] = []
        self._streaming = False
        self._reset(welcome_message(topic), "welcome")

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    @property
    def topic(self) -> str:
        return self._topic

    @topic.setter
    def topic(self, value: str) -> None:
        self._topic = value

    def _reset(self, text: str, message_id: str) -> None:
        self._history = []
        if not self._service.configured:
            text = NOT_CONFIGURED_MESSAGE
            message_id = "error-init"
        self._messages = [
            ChatMessage(id=message_id, role=ChatRole.MODEL, text=text, timestamp=now_ms())
        ]

    def clear(self) -> None:
        """Drop the conversation and its context"""
        if self._streaming:
            raise RuntimeError("Cannot clear while a reply is streaming")
        self._reset(CLEARED_MESSAGE, "welcome-reset")

    def _replace(self, message_id: str, text: str) -> ChatMessage:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                updated = message.model_copy(update={"text": text})
                self._messages[index] = updated
                return updated
        raise ValueError(f"Message {message_id} not found")

    def _discard(self, message_id: str) -> None:
        self._messages = [m for m in self._messages if m.id != message_id]

    async def stream(self, text: str) -> AsyncGenerator[str, None]:
        """
        Send a user message and yield the reply chunk by chunk.

        The transcript is updated as chunks arrive. Closing the generator
        early drops the partial reply.

        Raises:
            ChatRejected: Blank input or a reply already streaming
            AIServiceNotConfigured: No API key
            ChatStreamFailed: The stream broke; the apology was appended
        """
        if not text or not text.strip():
            raise ChatRejected("Message is empty")
        if self._streaming:
            logger.info("Chat send rejected: a reply is still streaming")
            raise ChatRejected("A reply is still streaming")
        if not self._service.configured:
            raise AIServiceNotConfigured(NOT_CONFIGURED_MESSAGE)

        user_message = ChatMessage(id=new_time_id(), role=ChatRole.USER, text=text, timestamp=now_ms())
        self._messages.append(user_message)
        self._streaming = True

        reply_id = new_time_id()
        self._messages.append(ChatMessage(id=reply_id, role=ChatRole.MODEL, text="", timestamp=now_ms()))
        full_text = ""

        try:
            async for chunk in self._service.stream_chat(text, self._history, self._topic):
                full_text += chunk
                self._replace(reply_id, full_text)
                yield chunk
        except (asyncio.CancelledError, GeneratorExit):
            self._discard(reply_id)
            raise
        except Exception as e:
            logger.error(f"Chat stream failed: {e}")
            self._discard(reply_id)
            self._messages.append(
                ChatMessage(id=new_time_id(), role=ChatRole.MODEL, text=APOLOGY_MESSAGE, timestamp=now_ms())
            )
            raise ChatStreamFailed(APOLOGY_MESSAGE) from e
        finally:
            self._streaming = False

        reply = self._replace(reply_id, full_text)
        self._history.extend([user_message, reply])

    async def send(
        self,
        text: str,
        on_chunk: Optional[Callable[[str], None]] = None,
    ) -> Optional[ChatMessage]:
        """
        Send a user message and wait for the whole reply.

        Args:
            text: User input
            on_chunk: Called with every text chunk as it arrives

        Returns:
            The final model message (reply or apology), or None when the send
            was rejected (blank input, a reply already streaming, no API key)
        """
        try:
            async with aclosing(self.stream(text)) as chunks:
                async for chunk in chunks:
                    if on_chunk is not None:
                        on_chunk(chunk)
        except (ChatRejected, AIServiceNotConfigured):
            return None
        except ChatStreamFailed:
            pass
        return self._messages[-1]
