from datetime import datetime
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from linechat.constants import DEFAULT_HOST, DEFAULT_THEME


class ConnectionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class _Classified(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    raw: str = ""


class ChatMessage(_Classified):
    kind: Literal["chat"] = "chat"
    from_: str = Field(alias="from")
    body: str = ""


class SystemNotice(_Classified):
    kind: Literal["system"] = "system"
    text: str
    marked: bool = False


class MembershipSnapshot(_Classified):
    kind: Literal["snapshot"] = "snapshot"
    members: tuple[str, ...] = ()


class RenameNotice(_Classified):
    kind: Literal["rename"] = "rename"
    from_: str = Field(alias="from")
    to: str


class JoinNotice(_Classified):
    kind: Literal["join"] = "join"
    who: str


class LeaveNotice(_Classified):
    kind: Literal["leave"] = "leave"
    who: str


ClassifiedEvent = Union[
    ChatMessage,
    SystemNotice,
    MembershipSnapshot,
    RenameNotice,
    JoinNotice,
    LeaveNotice,
]

LogTag = Literal["system", "self", "plain"]


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    tag: LogTag = "plain"
    author: str | None = None
    ts: str = Field(default_factory=lambda: datetime.now().strftime("%H:%M:%S"))


class MemberEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    is_self: bool = False
    color: str


class Endpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    scheme: Literal["ws", "wss"]
    host: str
    port: int

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


class ClientConfig(BaseModel):
    theme: Literal["dark", "light"] = DEFAULT_THEME
    nickname: str | None = None
    host: str = DEFAULT_HOST
    port: int | None = None
    secure: bool = False

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
