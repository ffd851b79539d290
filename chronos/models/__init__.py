"""Domain models for the application"""
from .timer import TimerMode, TimerState, DEFAULT_TIMERS, DEFAULT_CUSTOM_LABEL
from .app_config import AppConfig, FeatureFlags, Theme, DEFAULT_THEME
from .resource import ResourceEntry, ResourceType
from .task import TaskEntry, TaskStatus, TaskPriority, TaskProgress
from .session import SessionRecord, SessionContext
from .stats import SessionStats, DailyFocus, TopicShare
from .chat import ChatMessage, ChatRole

__all__ = [
    'TimerMode', 'TimerState', 'DEFAULT_TIMERS', 'DEFAULT_CUSTOM_LABEL',
    'AppConfig', 'FeatureFlags', 'Theme', 'DEFAULT_THEME',
    'ResourceEntry', 'ResourceType',
    'TaskEntry', 'TaskStatus', 'TaskPriority', 'TaskProgress',
    'SessionRecord', 'SessionContext',
    'SessionStats', 'DailyFocus', 'TopicShare',
    'ChatMessage', 'ChatRole',
]
