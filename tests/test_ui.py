import json
from types import SimpleNamespace

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

import chat
from linechat.repositories import ConfigRepository
from linechat.ui import SlashCompleter
from linechat.view import complete_or_open_menu


@pytest.fixture
def app_instance(tmp_path):
    path = tmp_path / "chat_config.json"
    path.write_text(json.dumps({}), encoding="utf-8")
    return chat.ChatApp(ConfigRepository(str(path)))


def complete(app, text):
    completer = SlashCompleter(app)
    return [c.text for c in completer.get_completions(Document(text), CompleteEvent())]


def test_slash_commands_complete(app_instance):
    assert complete(app_instance, "/n") == ["/nick"]
    assert "/who" in complete(app_instance, "/")


def test_nick_completes_current_nickname(app_instance):
    app_instance.session.identity.request_rename("alice")
    assert complete(app_instance, "/nick al") == ["alice"]


def test_member_names_complete_in_messages(app_instance):
    app_instance.session.apply_line("Users: alice, albert, bob")
    assert complete(app_instance, "hi al") == ["albert", "alice"]
    assert complete(app_instance, "hi ") == []


class FakeBuffer:
    def __init__(self, complete_state=None):
        self.complete_state = complete_state
        self.applied = []
        self.started = 0

    def apply_completion(self, completion):
        self.applied.append(completion)

    def start_completion(self, select_first=False):
        self.started += 1


def test_tab_opens_menu_when_nothing_is_offered():
    buffer = FakeBuffer()
    complete_or_open_menu(buffer)
    assert buffer.started == 1
    assert buffer.applied == []


def test_tab_accepts_first_completion_when_none_highlighted():
    state = SimpleNamespace(current_completion=None, completions=["/nick", "/who"])
    buffer = FakeBuffer(state)
    complete_or_open_menu(buffer)
    assert buffer.applied == ["/nick"]
    assert buffer.started == 0


def test_tab_accepts_highlighted_completion():
    state = SimpleNamespace(current_completion="/who", completions=["/nick", "/who"])
    buffer = FakeBuffer(state)
    complete_or_open_menu(buffer)
    assert buffer.applied == ["/who"]
