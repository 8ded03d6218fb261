from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from linechat.constants import NICK_COMMAND, WHO_COMMAND

if TYPE_CHECKING:
    from linechat.connection import ConnectionManager
    from linechat.session import ChatSession

logger = logging.getLogger(__name__)


def format_nick(name: str) -> str:
    return f"{NICK_COMMAND} {name}"


class OutboundGateway:
    """Turns local intents into wire lines.

    Blank text or names are ignored. Nothing is queued: when the connection
    is not up the line is dropped and the caller gets False back.
    """

    def __init__(self, session: "ChatSession", connection: "ConnectionManager"):
        self.session = session
        self.connection = connection

    def send_message(self, text: str) -> bool:
        text = text.strip()
        if not text:
            return False
        return self.connection.send_line(text)

    def set_nickname(self, name: str) -> bool:
        name = name.strip()
        if not name:
            return False
        self.session.identity.request_rename(name)
        return self.connection.send_line(format_nick(name))

    def reassert_nickname(self) -> bool:
        name = self.session.identity.current()
        if not name:
            return False
        return self.connection.send_line(format_nick(name))

    def query_membership(self) -> bool:
        return self.connection.send_line(WHO_COMMAND)
