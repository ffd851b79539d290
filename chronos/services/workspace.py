"""Per-user wiring of the engine, stores, planner and AI collaborators"""
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from chronos.infra.state_store import StateKey, StateStore
from chronos.models.app_config import AppConfig, FeatureFlags, Theme, DEFAULT_THEME
from chronos.models.session import SessionContext, SessionRecord
from chronos.models.task import TaskEntry
from chronos.models.timer import TimerMode
from chronos.services.insights import ChatSession, InsightService, DEFAULT_TOPIC
from chronos.services.notification import NotificationSink
from chronos.services.planner import PlannerRegistry
from chronos.services.session_log import SessionLogStore
from chronos.services.timer.engine import TimerEngine
from chronos.services.timer.scheduler import TickScheduler
from chronos.utils.ids import now_ms

logger = logging.getLogger(__name__)

DEFAULT_TAGS = ["DevOps"]


class FocusWorkspace:
    """
    Everything one user works with: the timer, the session log, the planner,
    the topic and tags used as completion context, the theme and feature flags.

    State is loaded once by `load()`; every later mutation is written through
    the StateStore.
    """

    def __init__(
        self,
        store: StateStore,
        insight_service: Optional[InsightService] = None,
        notifier: Optional[NotificationSink] = None,
        scheduler: Optional[TickScheduler] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.config = AppConfig()
        self.theme: Theme = DEFAULT_THEME
        self.topic: str = DEFAULT_TOPIC
        self.tags: List[str] = list(DEFAULT_TAGS)

        self.log = SessionLogStore()
        self.planner = PlannerRegistry(store=store, clock=clock)
        self.insight_service = insight_service or InsightService()
        self.engine = TimerEngine(
            config=self.config,
            log=self.log,
            planner=self.planner,
            notifier=notifier,
            store=store,
            context_provider=self.session_context,
            scheduler=scheduler,
            clock=clock,
        )

        self.insights: Optional[str] = None
        self.topic_suggestions: List[str] = []
        self._insight_generation = 0
        self._suggestion_generation = 0
        self._chat: Optional[ChatSession] = None
        self._loaded = False

    @property
    def user_id(self) -> str:
        return self.store.user_id

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """Read persisted state once; absent or unreadable keys keep the defaults"""
        if self._loaded:
            return

        theme = await self.store.load(StateKey.THEME)
        if theme:
            try:
                self.theme = Theme(theme)
            except ValueError:
                logger.warning(f"Ignoring unknown theme '{theme}' for user {self.user_id}")

        sessions = await self.store.load(StateKey.SESSIONS)
        if sessions:
            try:
                self.log.load(SessionRecord.model_validate(item) for item in sessions)
            except ValidationError as e:
                logger.error(f"Ignoring unreadable session history for user {self.user_id}: {e}")

        tasks = await self.store.load(StateKey.TASKS)
        if tasks:
            try:
                self.planner.load_tasks([TaskEntry.model_validate(item) for item in tasks])
            except ValidationError as e:
                logger.error(f"Ignoring unreadable tasks for user {self.user_id}: {e}")

        config = await self.store.load(StateKey.CONFIG)
        if config:
            try:
                self.apply_config(AppConfig.model_validate(config))
            except ValidationError as e:
                logger.error(f"Ignoring unreadable config for user {self.user_id}: {e}")

        self.engine.reset()
        self._loaded = True
        logger.info(f"Workspace loaded for user {self.user_id}: {len(self.log)} sessions, {len(self.planner.tasks)} tasks")

    # Completion context

    def session_context(self) -> SessionContext:
        return SessionContext(topic=self.topic, tags=tuple(self.tags))

    def set_topic(self, topic: str) -> None:
        self.topic = topic.strip()
        if self._chat is not None:
            self._chat.topic = self.topic

    def add_tag(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> bool:
        if tag not in self.tags:
            return False
        self.tags.remove(tag)
        return True

    def set_tags(self, tags: List[str]) -> None:
        self.tags = []
        for tag in tags:
            self.add_tag(tag)

    # Preferences

    def set_theme(self, theme: Theme) -> None:
        self.theme = theme
        self.store.save(StateKey.THEME, theme)

    def toggle_theme(self) -> Theme:
        self.set_theme(Theme.LIGHT if self.theme == Theme.DARK else Theme.DARK)
        return self.theme

    def toggle_feature(self, flag: str) -> bool:
        """
        Flip a feature flag by attribute name or wire name.

        Raises:
            ValueError: If the flag does not exist
        """
        name = _feature_attribute(flag)
        value = not getattr(self.config.feature_flags, name)
        setattr(self.config.feature_flags, name, value)
        self.store.save(StateKey.CONFIG, self.config)
        return value

    def update_timers(self, timers: Dict[TimerMode, int]) -> None:
        self.engine.update_timers(timers)

    def apply_config(self, config: AppConfig) -> None:
        """
        Adopt a config that is already stored (loaded, or written through the
        config API) without writing it back.
        """
        # The engine shares this config object
        self.config.feature_flags = config.feature_flags.model_copy()
        self.engine.update_timers(config.timers, persist=False)

    @property
    def ai_enabled(self) -> bool:
        return self.config.feature_flags.experimental_ai

    # AI

    async def request_insights(self) -> Optional[str]:
        """
        Ask for coaching advice on the session history.

        Only the latest request updates `insights`; an earlier request that
        resolves afterwards is dropped.

        Returns:
            The generated text, or None when AI features are disabled
        """
        if not self.ai_enabled:
            return None

        self._insight_generation += 1
        generation = self._insight_generation
        text = await self.insight_service.generate_insights(self.log.read_all(), self.topic)
        if generation == self._insight_generation:
            self.insights = text
        else:
            logger.debug(f"Dropping superseded insight result for user {self.user_id}")
        return text

    async def request_topic_suggestions(self, seed: Optional[str] = None) -> Optional[List[str]]:
        """
        Ask for sub-topics of `seed` (default: the current topic). Latest wins
        like `request_insights`.

        Returns:
            Suggestions, or None when AI features are disabled
        """
        if not self.ai_enabled:
            return None

        self._suggestion_generation += 1
        generation = self._suggestion_generation
        topics = await self.insight_service.suggest_topics(seed if seed is not None else self.topic)
        if generation == self._suggestion_generation:
            self.topic_suggestions = topics
        return topics

    def open_chat(self) -> ChatSession:
        if self._chat is None:
            self._chat = ChatSession(self.insight_service, self.topic or DEFAULT_TOPIC)
        return self._chat

    def to_dict(self) -> Dict[str, Any]:
        """Wire view of the workspace for the timer API"""
        return {
            "userId": self.user_id,
            "timer": self.engine.snapshot().model_dump(mode="json", by_alias=True),
            "formattedRemaining": self.engine.formatted_remaining,
            "config": self.config.model_dump(mode="json", by_alias=True),
            "theme": self.theme.value,
            "topic": self.topic,
            "tags": list(self.tags),
            "resources": [r.model_dump(mode="json", by_alias=True) for r in self.planner.resources],
            "tasks": [t.model_dump(mode="json", by_alias=True) for t in self.planner.tasks],
            "taskProgress": self.planner.progress().model_dump(mode="json", by_alias=True),
            "sessionCount": len(self.log),
        }

    async def close(self) -> None:
        self.engine.reset()
        await self.store.close()


def _feature_attribute(flag: str) -> str:
    for name, field in FeatureFlags.model_fields.items():
        if flag in (name, field.alias):
            return name
    raise ValueError(f"Unknown feature flag: {flag}")
