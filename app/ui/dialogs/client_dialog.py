"""
Dialogue de création/édition de client.
"""
import logging
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QTextEdit,
    QDialogButtonBox, QMessageBox
)
from app.services.client_service import client_service

logger = logging.getLogger(__name__)

class ClientDialog(QDialog):
    """Dialogue de création/édition de client."""

    def __init__(self, parent=None, client=None):
        super().__init__(parent)
        self.client = client
        self.client_id = client['id'] if client else None
        self.setWindowTitle("Nouveau Client" if not client else "Modifier Client")
        self.setMinimumWidth(500)
        self.setup_ui()

        if client:
            self.nom_edit.setText(client.get('nom') or '')
            self.telephone_edit.setText(client.get('telephone') or '')
            self.email_edit.setText(client.get('email') or '')
            self.adresse_edit.setPlainText(client.get('adresse') or '')

    def setup_ui(self):
        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.nom_edit = QLineEdit()
        self.nom_edit.setPlaceholderText("Nom ou raison sociale")
        form.addRow("Nom *:", self.nom_edit)

        self.telephone_edit = QLineEdit()
        self.telephone_edit.setPlaceholderText("+213 ...")
        form.addRow("Téléphone:", self.telephone_edit)

        self.email_edit = QLineEdit()
        form.addRow("Email:", self.email_edit)

        self.adresse_edit = QTextEdit()
        self.adresse_edit.setMaximumHeight(80)
        form.addRow("Adresse:", self.adresse_edit)

        layout.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept_dialog)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def get_data(self):
        return {
            'nom': self.nom_edit.text().strip(),
            'telephone': self.telephone_edit.text().strip(),
            'email': self.email_edit.text().strip(),
            'adresse': self.adresse_edit.toPlainText().strip(),
        }

    def accept_dialog(self):
        """Valide et enregistre le client."""
        try:
            data = self.get_data()
            if not data['nom']:
                QMessageBox.warning(self, "Validation", "Le nom du client est obligatoire.")
                self.nom_edit.setFocus()
                return

            if self.client_id:
                client_service.update(self.client_id, data)
            else:
                self.client_id = client_service.create(data)

            self.accept()

        except ValueError as e:
            QMessageBox.warning(self, "Erreur", str(e))
        except Exception as e:
            logger.error(f"Erreur sauvegarde client: {e}")
            QMessageBox.critical(self, "Erreur", f"Impossible d'enregistrer le client:\n{e}")
