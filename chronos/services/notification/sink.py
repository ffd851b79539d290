"""Best-effort user notification on session completion"""
import logging
from typing import Optional

from plyer import notification

from chronos.config import NOTIFICATIONS_ENABLED
from chronos.models.timer import TimerMode

from .audio import AudioCue

logger = logging.getLogger(__name__)

COMPLETION_TITLE = "Time's Up!"


def completion_message(mode: TimerMode) -> str:
    return f"Your {mode.value.replace('_', ' ').lower()} session is complete."


class NotificationSink:
    """
    Plays the completion chime and shows a desktop notification.

    Failures never propagate to the caller; the timer must transition whether
    or not the user could be notified.
    """

    def __init__(
        self,
        app_name: str = "Chronos",
        audio: Optional[AudioCue] = None,
        enabled: bool = NOTIFICATIONS_ENABLED,
    ):
        self._app_name = app_name
        self._audio = audio or AudioCue()
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def prepare_audio(self) -> None:
        """Acquire the audio output ahead of the first chime (idempotent)"""
        if not self._enabled:
            return
        try:
            self._audio.acquire()
        except Exception as e:
            logger.warning(f"Failed to prepare audio output: {e}")

    def notify_completion(self, mode: TimerMode) -> None:
        message = completion_message(mode)
        if not self._enabled:
            logger.info(f"{COMPLETION_TITLE} {message}")
            return

        self._audio.play()
        try:
            notification.notify(
                title=COMPLETION_TITLE,
                message=message,
                app_name=self._app_name,
                timeout=10,
            )
        except Exception as e:
            logger.warning(f"Desktop notification unavailable: {e}")
