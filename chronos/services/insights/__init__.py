"""AI insight service and mentor chat"""
from .service import (
    InsightService,
    AIServiceNotConfigured,
    NOT_CONFIGURED_MESSAGE,
    UNAVAILABLE_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
)
from .chat_session import (
    ChatSession,
    ChatRejected,
    ChatStreamFailed,
    APOLOGY_MESSAGE,
    CLEARED_MESSAGE,
    DEFAULT_TOPIC,
    welcome_message,
)
from .schemas import TopicSuggestions

__all__ = [
    'InsightService', 'AIServiceNotConfigured',
    'NOT_CONFIGURED_MESSAGE', 'UNAVAILABLE_MESSAGE', 'EMPTY_RESPONSE_MESSAGE',
    'ChatSession', 'ChatRejected', 'ChatStreamFailed', 'APOLOGY_MESSAGE', 'CLEARED_MESSAGE', 'DEFAULT_TOPIC', 'welcome_message',
    'TopicSuggestions',
]
