"""
Fenêtre de connexion.
"""
import logging
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QLabel, QPushButton,
    QMessageBox
)
from PyQt5.QtCore import Qt
from app.services.auth_service import auth_service
from config.settings import APP_TITLE, COMPANY_NAME, COMPANY_SUBTITLE

logger = logging.getLogger(__name__)

class LoginDialog(QDialog):
    """Demande les identifiants ; self.user contient l'utilisateur connecté."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.user = None
        self.setWindowTitle(f"Connexion - {APP_TITLE}")
        self.setFixedWidth(380)
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)

        title = QLabel(COMPANY_NAME)
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 22pt; font-weight: bold; color: #2c3e50;")
        layout.addWidget(title)

        subtitle = QLabel(COMPANY_SUBTITLE)
        subtitle.setAlignment(Qt.AlignCenter)
        subtitle.setWordWrap(True)
        subtitle.setStyleSheet("font-style: italic; color: #7f8c8d; padding-bottom: 10px;")
        layout.addWidget(subtitle)

        form = QFormLayout()
        self.login_edit = QLineEdit()
        self.login_edit.setPlaceholderText("Nom d'utilisateur")
        form.addRow("Utilisateur:", self.login_edit)

        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.Password)
        self.password_edit.setPlaceholderText("Mot de passe")
        self.password_edit.returnPressed.connect(self.accept_dialog)
        form.addRow("Mot de passe:", self.password_edit)
        layout.addLayout(form)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #e74c3c; font-weight: bold;")
        self.error_label.setWordWrap(True)
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        btn_login = QPushButton("Se connecter")
        btn_login.setDefault(True)
        btn_login.setStyleSheet(
            "background-color: #2980b9; color: white; font-weight: bold; padding: 6px;")
        btn_login.clicked.connect(self.accept_dialog)
        layout.addWidget(btn_login)

    def show_error(self, message):
        self.error_label.setText(message)
        self.error_label.setVisible(True)

    def accept_dialog(self):
        self.error_label.setVisible(False)
        try:
            user = auth_service.authentifier(self.login_edit.text(), self.password_edit.text())
        except ValueError as e:
            self.show_error(str(e))
            return
        except Exception as e:
            logger.error(f"Erreur authentification: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Connexion à la base impossible:\n{e}")
            return

        if user is None:
            self.show_error("Nom d'utilisateur ou mot de passe incorrect.")
            self.password_edit.clear()
            self.password_edit.setFocus()
            return

        self.user = user
        self.accept()
