from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chat import ChatApp

COMMAND_HELP = [
    ("/nick", "Change your nickname (e.g. /nick alice)"),
    ("/who", "Ask the server who is online"),
    ("/theme", "Toggle between dark and light themes"),
    ("/clear", "Clear local chat history"),
    ("/help", "Show available commands"),
    ("/quit", "Quit the application"),
    ("/exit", "Quit the application"),
]


class CommandRegistry:
    def __init__(self, app: "ChatApp"):
        self.app = app

    def build(self) -> dict[str, Any]:
        return {
            "/nick": self.command_nick,
            "/who": self.command_who,
            "/theme": self.command_theme,
            "/clear": self.command_clear,
            "/help": self.command_help,
            "/exit": self.command_exit,
            "/quit": self.command_exit,
        }

    def command_nick(self, args: str) -> bool:
        name = args.strip()
        if not name:
            return True
        self.app.gateway.set_nickname(name)
        self.app.config.nickname = name
        self.app.save_config()
        return True

    def command_who(self, _args: str) -> bool:
        return self.app.gateway.query_membership()

    def command_theme(self, _args: str) -> bool:
        theme = self.app.toggle_theme()
        self.app.session.append_system(f"* theme set to {theme} *")
        return True

    def command_clear(self, _args: str) -> bool:
        self.app.session.clear_log()
        return True

    def command_help(self, _args: str) -> bool:
        for command, description in COMMAND_HELP:
            self.app.session.append_system(f"{command:<8} {description}")
        self.app.session.append_system("Anything else is sent to the room as-is.")
        return True

    def command_exit(self, _args: str) -> bool:
        self.app.request_exit()
        return True
