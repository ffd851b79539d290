"""Session timer and auto-transition engine"""
import logging
from enum import Enum
from typing import Callable, Dict, Optional

from chronos.infra.state_store import StateKey, StateStore
from chronos.models.app_config import AppConfig
from chronos.models.session import SessionContext, SessionRecord
from chronos.models.timer import DEFAULT_CUSTOM_LABEL, TimerMode, TimerState
from chronos.services.notification import NotificationSink
from chronos.services.planner import PlannerRegistry
from chronos.services.session_log import SessionLogStore
from chronos.utils.datetime_helper import format_remaining
from chronos.utils.ids import new_time_id, now_ms

from .scheduler import TickScheduler
from .transitions import next_mode

logger = logging.getLogger(__name__)


class SwitchOutcome(str, Enum):
    SWITCHED = "switched"
    CUSTOM_PROMPT = "custom_prompt"  # caller must collect minutes and a label


class TimerEngine:
    """
    Owns one TimerState and drives it through start, pause, tick and completion.

    On natural completion the engine notifies the user, appends a SessionRecord
    built from the configured duration and value snapshots of the planner,
    clears the session resources and moves to the next mode. Collaborator
    failures are logged and never block a transition.
    """

    def __init__(
        self,
        config: AppConfig,
        log: SessionLogStore,
        planner: PlannerRegistry,
        notifier: Optional[NotificationSink] = None,
        store: Optional[StateStore] = None,
        context_provider: Optional[Callable[[], SessionContext]] = None,
        scheduler: Optional[TickScheduler] = None,
        state: Optional[TimerState] = None,
        on_custom_prompt: Optional[Callable[[], None]] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.config = config
        self.log = log
        self.planner = planner
        self._notifier = notifier
        self._store = store
        self._context_provider = context_provider or SessionContext
        self._scheduler = scheduler or TickScheduler()
        self._on_custom_prompt = on_custom_prompt
        self._clock = clock
        self._state = state or TimerState(
            mode=TimerMode.FOCUS,
            remaining_seconds=config.timers[TimerMode.FOCUS],
        )

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def formatted_remaining(self) -> str:
        return format_remaining(self._state.remaining_seconds)

    def snapshot(self) -> TimerState:
        """Independent copy of the current state"""
        return self._state.model_copy()

    def switch_mode(self, target: TimerMode) -> SwitchOutcome:
        """
        Stop and load the configured duration of `target`.

        CUSTOM is not switched to directly: the custom prompt hook fires and the
        state is left untouched.
        """
        if target == TimerMode.CUSTOM:
            if self._on_custom_prompt is not None:
                self._on_custom_prompt()
            return SwitchOutcome.CUSTOM_PROMPT

        self._scheduler.cancel()
        self._state.is_running = False
        self._state.mode = target
        self._state.custom_label = None
        self._state.remaining_seconds = self.config.timers[target]
        return SwitchOutcome.SWITCHED

    def start_custom(self, minutes: int, label: Optional[str] = None) -> None:
        """
        Load a custom countdown of `minutes`. Callers enforce minutes >= 1.

        The CUSTOM duration in the config is overwritten and written through.
        """
        seconds = minutes * 60
        self._scheduler.cancel()
        self.config.timers[TimerMode.CUSTOM] = seconds
        self._state.is_running = False
        self._state.mode = TimerMode.CUSTOM
        self._state.custom_label = (label or "").strip() or DEFAULT_CUSTOM_LABEL
        self._state.remaining_seconds = seconds
        self._save(StateKey.CONFIG, self.config)

    def toggle(self) -> bool:
        """
        Start or pause the countdown.

        Returns:
            The new running flag
        """
        if self._state.is_running:
            self._state.is_running = False
            self._scheduler.cancel()
            return False

        self._state.is_running = True
        if self._notifier is not None:
            try:
                self._notifier.prepare_audio()
            except Exception as e:
                logger.warning(f"Audio output unavailable: {e}")
        self._scheduler.arm(self.tick, lambda: self._state.is_running)
        return True

    def tick(self) -> Optional[SessionRecord]:
        """
        Advance the countdown by one second.

        Returns:
            The appended SessionRecord when this tick completed the session
        """
        if not self._state.is_running:
            return None

        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
        if self._state.remaining_seconds == 0:
            return self._complete()
        return None

    def reset(self) -> None:
        """Stop and reload the configured duration of the current mode"""
        self._scheduler.cancel()
        self._state.is_running = False
        self._state.remaining_seconds = self.config.timers[self._state.mode]

    def update_timers(self, timers: Dict[TimerMode, int], persist: bool = True) -> None:
        """
        Apply new durations from settings.

        A paused timer outside CUSTOM mode reloads the new duration of its
        mode; a running or CUSTOM timer is clamped to it.

        Args:
            timers: Durations to replace, in seconds
            persist: Write the config through; False when it is already stored
        """
        merged = {**self.config.timers, **timers}
        validated = AppConfig(feature_flags=self.config.feature_flags, timers=merged)
        self.config.timers.update(validated.timers)

        duration = self.config.timers[self._state.mode]
        if self._state.is_running or self._state.mode == TimerMode.CUSTOM:
            self._state.remaining_seconds = min(self._state.remaining_seconds, duration)
        else:
            self._state.remaining_seconds = duration
        if persist:
            self._save(StateKey.CONFIG, self.config)

    def _complete(self) -> SessionRecord:
        mode = self._state.mode

        if self._notifier is not None:
            try:
                self._notifier.notify_completion(mode)
            except Exception as e:
                logger.error(f"Completion notification failed: {e}")

        try:
            context = self._context_provider()
        except Exception as e:
            logger.error(f"Session context unavailable: {e}")
            context = SessionContext()

        record = SessionRecord(
            id=new_time_id(),
            timestamp=self._clock(),
            duration_seconds=self.config.timers[mode],
            mode=mode,
            session_label=self._state.custom_label if mode == TimerMode.CUSTOM else None,
            topic=context.topic,
            tags=context.tags,
            resources=self.planner.resources_snapshot(),
            tasks=self.planner.tasks_snapshot(),
        )
        self.log.append(record)
        self.planner.clear_resources()

        self._state.is_running = False
        self._scheduler.cancel()

        following = next_mode(mode)
        self._state.mode = following
        if mode == TimerMode.CUSTOM:
            self._state.custom_label = None
        self._state.remaining_seconds = self.config.timers[following]

        logger.info(f"{mode.value} session {record.id} complete, next {following.value}")
        self._save(StateKey.SESSIONS, self.log.read_all())
        return record

    def _save(self, key: StateKey, value) -> None:
        if self._store is not None:
            self._store.save(key, value)
