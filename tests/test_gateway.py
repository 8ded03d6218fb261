from types import SimpleNamespace

from linechat.gateway import OutboundGateway, format_nick
from linechat.identity import SessionIdentity
from linechat.session import ChatSession


class RecordingConnection:
    def __init__(self, connected=True):
        self.connected = connected
        self.sent: list[str] = []

    def send_line(self, line: str) -> bool:
        if not self.connected:
            return False
        self.sent.append(line)
        return True


def build_gateway(connected=True, identity=None):
    session = ChatSession(identity=identity)
    connection = RecordingConnection(connected)
    return OutboundGateway(session, connection), session, connection


def test_send_message_trims_and_sends_plain_text():
    gateway, _session, connection = build_gateway()
    assert gateway.send_message("  hello there  ") is True
    assert connection.sent == ["hello there"]


def test_blank_message_is_ignored():
    gateway, _session, connection = build_gateway()
    assert gateway.send_message("   ") is False
    assert connection.sent == []


def test_set_nickname_sends_command_and_updates_identity():
    gateway, session, connection = build_gateway()
    assert gateway.set_nickname(" alice ") is True
    assert connection.sent == ["/nick alice"]
    assert session.nickname() == "alice"


def test_blank_nickname_is_ignored():
    gateway, session, connection = build_gateway(identity=SessionIdentity("bob"))
    assert gateway.set_nickname("  ") is False
    assert connection.sent == []
    assert session.nickname() == "bob"


def test_nickname_while_disconnected_is_kept_locally():
    gateway, session, connection = build_gateway(connected=False)
    assert gateway.set_nickname("alice") is False
    assert connection.sent == []
    assert session.nickname() == "alice"


def test_query_membership():
    gateway, _session, connection = build_gateway()
    assert gateway.query_membership() is True
    assert connection.sent == ["/who"]


def test_reassert_nickname_without_identity_sends_nothing():
    gateway, _session, connection = build_gateway()
    assert gateway.reassert_nickname() is False
    assert connection.sent == []


def test_reassert_nickname_does_not_change_identity():
    gateway, session, connection = build_gateway(identity=SessionIdentity("alice"))
    assert gateway.reassert_nickname() is True
    assert connection.sent == ["/nick alice"]
    assert session.identity.pending is None


def test_format_nick():
    assert format_nick("zed") == "/nick zed"


def test_disconnected_messages_are_not_sent():
    gateway = OutboundGateway(
        ChatSession(), SimpleNamespace(send_line=lambda _line: False)
    )
    assert gateway.send_message("hello") is False
