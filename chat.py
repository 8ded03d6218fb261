import argparse
import asyncio
import logging
import re
from typing import Any

from dependency_injector import providers  # type: ignore[import-not-found]
from prompt_toolkit.styles import Style

from linechat.connection import Connector, resolve_endpoint
from linechat.constants import CONFIG_FILE, DEFAULT_THEME, THEMES
from linechat.container import ChatAppContainer
from linechat.controller import ChatController
from linechat.events import ThemeChangedEvent
from linechat.models import ClientConfig, ConnectionState, LogEntry
from linechat.repositories import ConfigRepository

logger = logging.getLogger(__name__)

NICK_PREFIX_RE = re.compile(r"^\[([^\]]+)\]")


class ChatApp:
    def __init__(
        self,
        config_repository: ConfigRepository | None = None,
        overrides: dict[str, Any] | None = None,
        connector: Connector | None = None,
    ):
        self.config_repository = config_repository or ConfigRepository()
        self.config: ClientConfig = self.config_repository.load_config()
        self.settings = self.config.model_copy(update=overrides or {})
        self.endpoint = resolve_endpoint(
            self.settings.host, self.settings.port, self.settings.secure
        )

        self.container = ChatAppContainer(
            app=providers.Object(self), endpoint=providers.Object(self.endpoint)
        )
        if connector is not None:
            self.container.connector.override(providers.Object(connector))
        self.event_bus = self.container.event_bus()
        self.session = self.container.session()
        self.connection = self.container.connection()
        self.gateway = self.container.gateway()
        self.controller: ChatController = self.container.controller()
        self.view: Any = None

        if self.config.nickname:
            self.session.identity.request_rename(self.config.nickname)

    @property
    def current_theme(self) -> str:
        return self.config.theme

    def save_config(self) -> None:
        self.config_repository.save_config(self.config)

    def toggle_theme(self) -> str:
        self.config.theme = "dark" if self.config.theme == "light" else "light"
        self.save_config()
        self.event_bus.publish(
            ThemeChangedEvent(source="app", theme=self.config.theme)
        )
        return self.config.theme

    def get_style(self) -> Style:
        theme_dict = THEMES.get(self.current_theme, THEMES[DEFAULT_THEME])
        base_dict = {
            "scrollbar.background": "bg:#222222",
            "scrollbar.button": "bg:#777777",
        }
        base_dict.update(theme_dict)
        return Style.from_dict(base_dict)

    def apply_style(self) -> None:
        if self.view is not None:
            self.view.set_style(self.get_style())

    def render_entry(self, entry: LogEntry) -> str:
        return f"[{entry.ts}] {entry.text}".replace("\n", " ")

    def refresh_output(self) -> None:
        if self.view is None:
            return
        self.view.set_output("\n".join(self.render_entry(e) for e in self.session.log))

    def lex_line(self, line_num: int) -> list[tuple[str, str]]:
        entry = self.session.log[line_num]
        text = entry.text.replace("\n", " ")
        tokens: list[tuple[str, str]] = [("class:timestamp", f"[{entry.ts}] ")]
        if entry.tag == "system":
            tokens.append(("class:system", text))
            return tokens

        match = NICK_PREFIX_RE.match(text) if entry.author else None
        if match:
            color = self.session.colors.color_for(entry.author)
            tokens.append((f"fg:{color} bold", match.group(0)))
            tokens.append(("", text[match.end() :]))
        else:
            tokens.append(("", text))
        if entry.tag == "self":
            tokens = [(f"class:self {style}".strip(), value) for style, value in tokens]
        return tokens

    def update_sidebar(self) -> None:
        if self.view is None:
            return
        fragments: list[tuple[str, str]] = []
        members = self.session.members()
        for idx, member in enumerate(members):
            fragments.append((f"fg:{member.color}", "● "))
            label = f"{member.name} (you)" if member.is_self else member.name
            fragments.append(("bold" if member.is_self else "", label))
            if idx < len(members) - 1:
                fragments.append(("", "\n"))
        self.view.set_sidebar(fragments)

    def status_fragments(self) -> list[tuple[str, str]]:
        state = self.session.state
        style = "class:status"
        if state == ConnectionState.CONNECTED:
            style = "class:status.connected"
        elif state == ConnectionState.DISCONNECTED:
            style = "class:status.disconnected"
        nick = self.session.nickname() or "(no nickname)"
        return [
            (style, f" {self.session.status_label()} "),
            ("class:status", f" {self.endpoint.url}  as {nick} "),
        ]

    def request_exit(self) -> None:
        if self.view is not None:
            self.view.exit()

    async def run_async(self) -> Any:
        self.view = self.container.view()
        self.controller.register_event_handlers(self.event_bus)
        self.event_bus.start()
        self.session.append_system("* client started *")
        self.connection.start()
        try:
            return await self.view.run_async()
        finally:
            await self.connection.shutdown()
            await self.event_bus.stop()

    def run(self) -> None:
        try:
            asyncio.run(self.run_async())
        except KeyboardInterrupt:
            pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Line-oriented chat client.")
    parser.add_argument("--config", default=CONFIG_FILE)
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument(
        "--secure", action=argparse.BooleanOptionalAction, default=None
    )
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s: %(message)s",
    )
    overrides = {
        key: value
        for key, value in (
            ("host", args.host),
            ("port", args.port),
            ("secure", args.secure),
        )
        if value is not None
    }
    ChatApp(ConfigRepository(args.config), overrides=overrides).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
