from __future__ import annotations

from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from reinstall_hub.auth import ApiCredentials
from reinstall_hub.config import Settings

from .controller import ConfigurationController, ConfigurationSnapshot


class ConfigurationWidget(QWidget):
    """Form for the tenant URL, Hub app, tag and API credentials."""

    def __init__(
        self,
        controller: ConfigurationController,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        tenant_group = QGroupBox("Workspace ONE tenant")
        tenant_form = QFormLayout(tenant_group)
        self.url_input = QLineEdit()
        self.url_input.setPlaceholderText("https://asXXXX.awmdm.com")
        self.app_id_input = QLineEdit()
        self.app_id_input.setPlaceholderText("Internal app ID of the Hub package")
        self.tag_id_input = QLineEdit()
        self.tag_id_input.setPlaceholderText("Tag ID marking Macs without Hub")
        tenant_form.addRow("Tenant URL", self.url_input)
        tenant_form.addRow("App ID", self.app_id_input)
        tenant_form.addRow("Tag ID", self.tag_id_input)

        api_group = QGroupBox("REST API credentials")
        api_form = QFormLayout(api_group)
        self.api_key_input = QLineEdit()
        self.api_key_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.username_input = QLineEdit()
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        api_form.addRow("API key", self.api_key_input)
        api_form.addRow("API username", self.username_input)
        api_form.addRow("API password", self.password_input)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.save_button = QPushButton("Save")
        self.save_button.setDefault(True)
        buttons.addWidget(self.save_button)

        self.feedback_label = QLabel()
        self.feedback_label.setWordWrap(True)
        self.feedback_label.setStyleSheet("color: #c0392b;")

        layout.addWidget(tenant_group)
        layout.addWidget(api_group)
        layout.addLayout(buttons)
        layout.addWidget(self.feedback_label)
        layout.addStretch()

    def _connect_signals(self) -> None:
        self.save_button.clicked.connect(self._handle_save_clicked)
        self._controller.configurationLoaded.connect(self._apply_snapshot)
        self._controller.errorOccurred.connect(self.feedback_label.setText)

    def load(self) -> None:
        self._controller.load()

    def _apply_snapshot(self, snapshot: ConfigurationSnapshot) -> None:
        settings = snapshot.settings
        self.url_input.setText(settings.tenant_url or "")
        self.app_id_input.setText(settings.app_id or "")
        self.tag_id_input.setText(settings.tag_id or "")
        self.username_input.setText(snapshot.username or "")
        self.api_key_input.clear()
        self.password_input.clear()
        self.feedback_label.clear()

    def _handle_save_clicked(self) -> None:
        current = self._controller.settings_manager.load()
        settings = Settings(
            tenant_url=self.url_input.text().strip() or None,
            app_id=self.app_id_input.text().strip() or None,
            tag_id=self.tag_id_input.text().strip() or None,
            request_timeout=current.request_timeout,
            log_level=current.log_level,
        )
        credentials = ApiCredentials(
            username=self.username_input.text().strip(),
            password=self.password_input.text(),
            api_key=self.api_key_input.text().strip(),
        )
        if self._controller.save(settings, credentials):
            self.password_input.clear()
            self.api_key_input.clear()
            self.feedback_label.clear()


__all__ = ["ConfigurationWidget"]
