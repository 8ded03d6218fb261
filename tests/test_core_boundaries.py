from pathlib import Path

CORE_FILES = [
    "linechat/classifier.py",
    "linechat/colors.py",
    "linechat/connection.py",
    "linechat/gateway.py",
    "linechat/identity.py",
    "linechat/presence.py",
    "linechat/session.py",
    "linechat/timers.py",
]


def test_core_does_not_touch_the_ui() -> None:
    forbidden = [
        "prompt_toolkit",
        "from chat import",
        "import chat",
        "linechat.view",
        "linechat.ui",
    ]
    root = Path(__file__).resolve().parent.parent
    for rel_path in CORE_FILES:
        content = (root / rel_path).read_text(encoding="utf-8")
        for pattern in forbidden:
            assert pattern not in content, f"{rel_path} references '{pattern}'"
