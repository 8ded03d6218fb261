CONFIG_FILE = "chat_config.json"
DEFAULT_HOST = "localhost"
DEFAULT_SERVICE_PORT = 9101
ALLOWED_PORTS = (80, 443, DEFAULT_SERVICE_PORT)
WS_SUBPROTOCOL = "chat"

WHO_QUERY_DELAY_SECONDS = 0.2
RECONNECT_DELAY_SECONDS = 2.0
ABNORMAL_CLOSE_CODE = 1006

NICK_COMMAND = "/nick"
WHO_COMMAND = "/who"

COLOR_SATURATION = 0.60
COLOR_LIGHTNESS = 0.55
MAX_LOG_LINES = 2000

STATUS_LABELS = {
    "idle": "Idle",
    "connecting": "Connecting…",
    "connected": "Connected",
    "disconnected": "Disconnected",
}

DEFAULT_THEME = "dark"
THEMES = {
    "dark": {
        "chat-area": "bg:#101214 #d8dee9",
        "input-area": "bg:#1b1e22 #eceff4",
        "sidebar": "bg:#15181b #d8dee9",
        "frame.label": "bg:#2e3440 #eceff4 bold",
        "status": "bg:#3b4252 #eceff4",
        "status.connected": "bg:#2f6b3a #ffffff",
        "status.disconnected": "bg:#7a2e2e #ffffff",
        "completion-menu": "bg:#2e3440 #eceff4",
        "completion-menu.completion.current": "bg:#88c0d0 #101214",
        "timestamp": "fg:#6b7280",
        "system": "fg:#8b95a5 italic",
        "self": "bg:#1f2937",
    },
    "light": {
        "chat-area": "bg:#fafafa #1f2328",
        "input-area": "bg:#ffffff #1f2328",
        "sidebar": "bg:#f0f2f4 #1f2328",
        "frame.label": "bg:#d0d7de #1f2328 bold",
        "status": "bg:#d0d7de #1f2328",
        "status.connected": "bg:#b7e4c7 #1f2328",
        "status.disconnected": "bg:#f5c2c7 #1f2328",
        "completion-menu": "bg:#eaeef2 #1f2328",
        "completion-menu.completion.current": "bg:#0969da #ffffff",
        "timestamp": "fg:#8c959f",
        "system": "fg:#57606a italic",
        "self": "bg:#ddf4ff",
    },
}
