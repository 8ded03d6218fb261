from typing import TYPE_CHECKING

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.lexers import Lexer

from linechat.commands.registry import COMMAND_HELP

if TYPE_CHECKING:
    from chat import ChatApp


class SlashCompleter(Completer):
    def __init__(self, app_ref: "ChatApp"):
        self.app_ref = app_ref

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if text.startswith("/nick "):
            prefix = text[6:]
            current = self.app_ref.session.nickname()
            if current and current.startswith(prefix) and current != prefix:
                yield Completion(
                    current,
                    start_position=-len(prefix),
                    display=current,
                    display_meta="current nickname",
                )
            return

        if text.startswith("/") and " " not in text:
            word = text.lower()
            for cmd, desc in COMMAND_HELP:
                if cmd.startswith(word):
                    yield Completion(
                        cmd, start_position=-len(word), display=cmd, display_meta=desc
                    )
            return

        words = text.split(" ")
        prefix = words[-1]
        if not prefix:
            return
        for member in self.app_ref.session.presence.view():
            if member.startswith(prefix) and member != prefix:
                yield Completion(
                    member, start_position=-len(prefix), display=member
                )


class ChatLexer(Lexer):
    def __init__(self, app_ref: "ChatApp"):
        self.app_ref = app_ref

    def lex_document(self, document):
        def get_line_tokens(line_num):
            try:
                return self.app_ref.lex_line(line_num)
            except IndexError:
                return [("", document.lines[line_num])]

        return get_line_tokens
