import os
from unittest.mock import patch

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

from tcpchat.config import ChatConfig  # noqa: E402
from tcpchat.settings import SettingsGUI  # noqa: E402


@pytest.fixture(scope="module")
def app():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def gui(app, tmp_path):
    return SettingsGUI(ChatConfig(str(tmp_path / "chat_config.json")))


def test_fields_show_current_values(gui):
    assert gui.port_input.text() == "5050"
    assert gui.limit_input.text() == "5"


def test_save_settings(gui):
    gui.host_input.setText("0.0.0.0")
    gui.port_input.setText("6000")
    gui.limit_input.setText("8")

    assert gui.save_settings() is True
    reloaded = ChatConfig(gui.config.config_file)
    assert reloaded.get("host") == "0.0.0.0"
    assert reloaded.get("port") == 6000
    assert reloaded.max_connections() == 8


def test_invalid_limit_is_not_saved(gui):
    gui.limit_input.setText("0")
    with patch('tcpchat.settings.QMessageBox.warning') as warning:
        assert gui.save_settings() is False
        warning.assert_called_once()
    assert gui.config.get("max_connections") == 5
