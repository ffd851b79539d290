"""Completion notifications"""
from .audio import AudioCue
from .sink import NotificationSink, COMPLETION_TITLE, completion_message

__all__ = ['AudioCue', 'NotificationSink', 'COMPLETION_TITLE', 'completion_message']
