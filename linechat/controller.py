from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from linechat.commands.registry import CommandRegistry
from linechat.event_bus import EventBus
from linechat.events import (
    ConnectionStatusEvent,
    LogAppendedEvent,
    LogClearedEvent,
    PresenceChangedEvent,
    ThemeChangedEvent,
)

if TYPE_CHECKING:
    from chat import ChatApp

logger = logging.getLogger(__name__)


class ChatController:
    def __init__(self, app: "ChatApp"):
        self.app = app
        self.command_handlers: dict[str, Any] = {}

    def build_command_handlers(self) -> dict[str, Any]:
        self.command_handlers = CommandRegistry(self.app).build()
        return self.command_handlers

    def register_event_handlers(self, bus: EventBus) -> None:
        bus.subscribe(LogAppendedEvent, self.on_log_changed)
        bus.subscribe(LogClearedEvent, self.on_log_changed)
        bus.subscribe(PresenceChangedEvent, self.on_presence_changed)
        bus.subscribe(ConnectionStatusEvent, self.on_connection_status)
        bus.subscribe(ThemeChangedEvent, self.on_theme_changed)

    def on_log_changed(self, _event: LogAppendedEvent | LogClearedEvent) -> None:
        self.app.refresh_output()
        # Presence events can be dropped under backlog.
        self.app.update_sidebar()

    def on_presence_changed(self, _event: PresenceChangedEvent) -> None:
        self.app.update_sidebar()

    def on_connection_status(self, event: ConnectionStatusEvent) -> None:
        logger.debug("Status now %s", event.label)
        # Self markers in the sidebar depend on the nickname re-asserted on connect.
        self.app.update_sidebar()

    def on_theme_changed(self, _event: ThemeChangedEvent) -> None:
        self.app.apply_style()

    def handle_input(self, text: str) -> bool:
        """Handle one submitted line; returns True when the input box can be cleared."""
        text = text.strip()
        if not text:
            return False

        if text.startswith("/"):
            if not self.command_handlers:
                self.build_command_handlers()
            parts = text.split(" ", 1)
            command = parts[0].lower()
            args = parts[1] if len(parts) > 1 else ""
            handler = self.command_handlers.get(command)
            if handler is not None:
                return bool(handler(args))

        return self.app.gateway.send_message(text)
