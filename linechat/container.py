from __future__ import annotations

from dependency_injector import containers, providers  # type: ignore[import-not-found]

from linechat.classifier import LineClassifier
from linechat.colors import ColorAssigner
from linechat.connection import ConnectionManager
from linechat.controller import ChatController
from linechat.event_bus import EventBus
from linechat.identity import SessionIdentity
from linechat.presence import PresenceSet
from linechat.session import ChatSession
from linechat.view import PromptToolkitView


class ChatAppContainer(containers.DeclarativeContainer):
    app = providers.Dependency()
    endpoint = providers.Dependency()
    connector = providers.Object(None)

    event_bus = providers.Singleton(EventBus, maxsize=512)
    colors = providers.Singleton(ColorAssigner)
    presence = providers.Singleton(PresenceSet)
    identity = providers.Singleton(SessionIdentity)
    classifier = providers.Singleton(LineClassifier)

    session = providers.Singleton(
        ChatSession,
        colors=colors,
        presence=presence,
        identity=identity,
        classifier=classifier,
        event_bus=event_bus,
    )
    connection = providers.Singleton(
        ConnectionManager,
        session=session,
        endpoint=endpoint,
        connector=connector,
    )
    gateway = connection.provided.gateway

    controller = providers.Singleton(ChatController, app=app)
    view = providers.Singleton(
        PromptToolkitView,
        app=app,
        on_submit=providers.Callable(
            lambda controller: controller.handle_input, controller
        ),
    )
