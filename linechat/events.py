from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from linechat.models import ConnectionState, LogEntry


class AppEvent(BaseModel):
    event_id: str = Field(default_factory=lambda: uuid4().hex)
    ts: str = Field(
        default_factory=lambda: datetime.now().isoformat(timespec="seconds")
    )
    topic: str
    source: str
    critical: bool = False
    retry_count: int = 0


class LogAppendedEvent(AppEvent):
    topic: Literal["log_appended"] = "log_appended"
    entry: LogEntry


class LogClearedEvent(AppEvent):
    topic: Literal["log_cleared"] = "log_cleared"


class PresenceChangedEvent(AppEvent):
    topic: Literal["presence_changed"] = "presence_changed"
    count: int


class ConnectionStatusEvent(AppEvent):
    topic: Literal["connection_status"] = "connection_status"
    state: ConnectionState
    label: str


class ThemeChangedEvent(AppEvent):
    topic: Literal["theme_changed"] = "theme_changed"
    theme: str
