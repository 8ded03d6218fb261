from __future__ import annotations

from collections.abc import Callable
from typing import Any, TYPE_CHECKING

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout.containers import (
    Container,
    Float,
    FloatContainer,
    HSplit,
    VSplit,
    Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.layout.menus import CompletionsMenu
from prompt_toolkit.widgets import Frame, TextArea

from linechat.ui import ChatLexer, SlashCompleter

if TYPE_CHECKING:
    from chat import ChatApp

SIDEBAR_WIDTH = 28
INPUT_TITLE = "Message (/help for commands)"


def complete_or_open_menu(buffer: Buffer) -> None:
    """Accept the highlighted (or first) completion, else open the menu."""
    state = buffer.complete_state
    if state is None:
        buffer.start_completion(select_first=True)
        return
    choice = state.current_completion or next(iter(state.completions), None)
    if choice is None:
        buffer.start_completion(select_first=True)
    else:
        buffer.apply_completion(choice)


class PromptToolkitView:
    """History pane, member sidebar, one-line status bar and the input box."""

    def __init__(self, app: "ChatApp", on_submit: Callable[[str], bool]):
        self.app = app
        self.on_submit = on_submit

        self.history = TextArea(
            lexer=ChatLexer(app),
            wrap_lines=True,
            focusable=False,
            style="class:chat-area",
        )
        self.input_field = TextArea(
            prompt="> ",
            height=3,
            multiline=False,
            wrap_lines=False,
            completer=SlashCompleter(app),
            complete_while_typing=True,
            style="class:input-area",
        )
        self.members_control = FormattedTextControl()

        self.application: Any = Application(
            layout=Layout(self._build_root(), focused_element=self.input_field),
            key_bindings=self._build_key_bindings(),
            style=app.get_style(),
            mouse_support=True,
            full_screen=True,
        )

    def _online_title(self) -> str:
        return f"Online ({len(self.app.session.presence)})"

    def _build_root(self) -> Container:
        members = Window(
            self.members_control, width=SIDEBAR_WIDTH, style="class:sidebar"
        )
        status_bar = Window(
            FormattedTextControl(self.app.status_fragments),
            height=1,
            style="class:status",
        )
        body = VSplit(
            [Frame(self.history, title="Chat"), Frame(members, title=self._online_title)]
        )
        menu = Float(
            content=CompletionsMenu(max_height=10, scroll_offset=1),
            xcursor=True,
            ycursor=True,
        )
        return FloatContainer(
            HSplit([body, status_bar, Frame(self.input_field, title=INPUT_TITLE)]),
            floats=[menu],
        )

    def _build_key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        def submit(_event: Any) -> None:
            if self.on_submit(self.input_field.text):
                self.input_field.text = ""

        def clear_input(_event: Any) -> None:
            self.input_field.text = ""

        bindings.add("enter")(submit)
        bindings.add("escape")(clear_input)
        bindings.add("tab")(lambda event: complete_or_open_menu(event.current_buffer))
        bindings.add("c-c")(lambda event: event.app.exit())
        return bindings

    def set_output(self, text: str) -> None:
        # Keep the newest line in view.
        self.history.buffer.set_document(
            Document(text, len(text)), bypass_readonly=True
        )
        self.invalidate()

    def set_sidebar(self, fragments: list[tuple[str, str]]) -> None:
        self.members_control.text = fragments
        self.invalidate()

    def set_style(self, style: Any) -> None:
        self.application.style = style
        self.invalidate()

    def invalidate(self) -> None:
        self.application.invalidate()

    async def run_async(self) -> Any:
        return await self.application.run_async()

    def exit(self, result: str | None = None) -> None:
        if self.application.is_running:
            self.application.exit(result=result)
