from __future__ import annotations

import logging
from collections import deque

from linechat.classifier import LineClassifier
from linechat.colors import ColorAssigner
from linechat.constants import MAX_LOG_LINES, STATUS_LABELS
from linechat.event_bus import EventBus
from linechat.events import (
    AppEvent,
    ConnectionStatusEvent,
    LogAppendedEvent,
    LogClearedEvent,
    PresenceChangedEvent,
)
from linechat.identity import SessionIdentity
from linechat.models import (
    ChatMessage,
    ClassifiedEvent,
    ConnectionState,
    LogEntry,
    LogTag,
    MemberEntry,
    RenameNotice,
    SystemNotice,
)
from linechat.presence import PresenceSet

logger = logging.getLogger(__name__)


class ChatSession:
    """Everything the client knows about the room, owned in one place.

    The connection manager feeds inbound lines through ``apply_line`` and
    reports lifecycle changes through ``set_state``; the view reads
    ``members()``, ``entries()`` and ``status_label()`` and listens on the
    event bus for changes.
    """

    def __init__(
        self,
        colors: ColorAssigner | None = None,
        presence: PresenceSet | None = None,
        identity: SessionIdentity | None = None,
        classifier: LineClassifier | None = None,
        event_bus: EventBus | None = None,
        max_log_lines: int = MAX_LOG_LINES,
    ):
        self.colors = colors or ColorAssigner()
        self.presence = presence or PresenceSet()
        self.identity = identity or SessionIdentity()
        self.classifier = classifier or LineClassifier()
        self.event_bus = event_bus
        self.state = ConnectionState.IDLE
        self.log: deque[LogEntry] = deque(maxlen=max_log_lines)

    def _publish(self, event: AppEvent, *, critical: bool = False) -> bool:
        if self.event_bus is None:
            return False
        try:
            return self.event_bus.publish(event, critical=critical)
        except Exception:
            logger.exception("Failed publishing event topic=%s", event.topic)
            return False

    def apply_line(self, raw: str) -> ClassifiedEvent:
        event = self.classifier.classify(raw)
        if isinstance(event, RenameNotice):
            self.identity.observe_rename(event)
        if self.presence.apply_event(event):
            self._publish(
                PresenceChangedEvent(source="session", count=len(self.presence))
            )
        self._append(LogEntry(text=raw, tag=self._tag_for(event), author=_author(event)))
        return event

    def _tag_for(self, event: ClassifiedEvent) -> LogTag:
        if isinstance(event, ChatMessage):
            return "self" if self.identity.is_self(event.from_) else "plain"
        if isinstance(event, SystemNotice) and not event.marked:
            return "plain"
        return "system"

    def append_system(self, text: str) -> LogEntry:
        entry = LogEntry(text=text, tag="system")
        self._append(entry)
        return entry

    def _append(self, entry: LogEntry) -> None:
        self.log.append(entry)
        self._publish(LogAppendedEvent(source="session", entry=entry))

    def clear_log(self) -> None:
        self.log.clear()
        self._publish(LogClearedEvent(source="session"))

    def entries(self) -> list[LogEntry]:
        return list(self.log)

    def set_state(self, state: ConnectionState) -> None:
        if state == self.state:
            return
        logger.debug("Connection state %s -> %s", self.state.value, state.value)
        self.state = state
        self._publish(
            ConnectionStatusEvent(
                source="session", state=state, label=self.status_label()
            ),
            critical=True,
        )

    def status_label(self) -> str:
        return STATUS_LABELS[self.state.value]

    def members(self) -> list[MemberEntry]:
        return [
            MemberEntry(
                name=name,
                is_self=self.identity.is_self(name),
                color=self.colors.color_for(name),
            )
            for name in self.presence.view()
        ]

    def nickname(self) -> str | None:
        return self.identity.current()


def _author(event: ClassifiedEvent) -> str | None:
    if isinstance(event, ChatMessage):
        return event.from_
    return None
