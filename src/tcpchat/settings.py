from PyQt5.QtWidgets import QApplication, QWidget, QVBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox

from tcpchat.config import ChatConfig


class SettingsGUI(QWidget):
    """GUI for modifying the chat server settings file."""

    def __init__(self, config=None):
        super().__init__()
        self.config = config or ChatConfig()
        self.init_ui()

    def init_ui(self):
        """Creates and arranges UI elements."""
        self.setWindowTitle("Chat Settings")
        self.setGeometry(100, 100, 300, 200)

        layout = QVBoxLayout()

        self.host_label = QLabel("Server Host:")
        self.host_input = QLineEdit(str(self.config.get("host")))

        self.port_label = QLabel("Server Port:")
        self.port_input = QLineEdit(str(self.config.get("port")))

        self.limit_label = QLabel("Max Connections:")
        self.limit_input = QLineEdit(str(self.config.get("max_connections")))

        self.log_label = QLabel("Log File:")
        self.log_input = QLineEdit(str(self.config.get("log_file")))

        self.save_button = QPushButton("Save")
        self.save_button.clicked.connect(self.save_settings)

        for widget in (
            self.host_label, self.host_input,
            self.port_label, self.port_input,
            self.limit_label, self.limit_input,
            self.log_label, self.log_input,
            self.save_button,
        ):
            layout.addWidget(widget)

        self.setLayout(layout)

    def save_settings(self):
        """Saves updated settings from the GUI to the config file.

        Returns:
            bool: False if a field was invalid and nothing was saved.
        """
        try:
            port = int(self.port_input.text())
            limit = ChatConfig.validate_limit(self.limit_input.text())
        except ValueError as e:
            QMessageBox.warning(self, "Invalid settings", str(e))
            return False

        self.config.update("host", self.host_input.text())
        self.config.update("port", port)
        self.config.update("max_connections", limit)
        self.config.update("log_file", self.log_input.text())
        return True


def main(config_file="chat_config.json"):
    app = QApplication([])
    settings_gui = SettingsGUI(ChatConfig(config_file))
    settings_gui.show()
    return app.exec_()
