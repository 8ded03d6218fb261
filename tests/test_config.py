import json
import logging
from unittest.mock import mock_open, patch

from linechat.models import ClientConfig
from linechat.repositories import ConfigRepository


def test_load_config_defaults_when_missing():
    with patch("os.path.exists", return_value=False):
        config = ConfigRepository().load_config()
    assert config == ClientConfig()
    assert config.theme == "dark"
    assert config.nickname is None


def test_load_config_existing():
    mock_data = json.dumps(
        {"theme": "light", "nickname": "Tester", "host": "chat.example", "port": 443}
    )
    with patch("os.path.exists", return_value=True):
        with patch("builtins.open", mock_open(read_data=mock_data)):
            config = ConfigRepository().load_config()
    assert config.theme == "light"
    assert config.nickname == "Tester"
    assert config.host == "chat.example"
    assert config.port == 443
    assert config.secure is False


def test_save_config_writes_json():
    config = ClientConfig(theme="light", nickname="Neo")
    with patch("builtins.open", mock_open()) as mocked_file:
        ConfigRepository().save_config(config)

    mocked_file.assert_called_with("chat_config.json", "w", encoding="utf-8")
    handle = mocked_file()
    written_chunks = [call.args[0] for call in handle.write.call_args_list]
    payload = json.loads("".join(written_chunks))
    assert payload["theme"] == "light"
    assert payload["nickname"] == "Neo"
    assert "port" not in payload


def test_load_config_invalid_json_logs_warning(caplog):
    with patch("os.path.exists", return_value=True):
        with patch("builtins.open", mock_open(read_data="{bad-json")):
            with caplog.at_level(logging.WARNING):
                config = ConfigRepository().load_config()
    assert config == ClientConfig()
    assert "Failed to load config from chat_config.json" in caplog.text


def test_load_config_invalid_values_logs_warning(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"theme": "purple"}), encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        config = ConfigRepository(str(path)).load_config()
    assert config.theme == "dark"
    assert "Invalid config" in caplog.text


def test_round_trip_through_file(tmp_path):
    repo = ConfigRepository(str(tmp_path / "config.json"))
    repo.save_config(ClientConfig(theme="light", nickname="zed", secure=True))
    loaded = repo.load_config()
    assert loaded.nickname == "zed"
    assert loaded.secure is True
