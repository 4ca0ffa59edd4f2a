"""
Dialogue de création/édition de fournisseur.
"""
import logging
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QPlainTextEdit,
    QDialogButtonBox, QMessageBox
)
from app.services.fournisseur_service import fournisseur_service

logger = logging.getLogger(__name__)


class FournisseurDialog(QDialog):

    def __init__(self, parent=None, fournisseur=None):
        super().__init__(parent)
        self.fournisseur_id = fournisseur['id'] if fournisseur else None
        self.setWindowTitle("Modifier le fournisseur" if fournisseur else "Nouveau fournisseur")
        self.setMinimumWidth(460)
        self.setup_ui()
        if fournisseur:
            self.nom_edit.setText(fournisseur.get('nom') or '')
            self.telephone_edit.setText(fournisseur.get('telephone') or '')
            self.email_edit.setText(fournisseur.get('email') or '')
            self.adresse_edit.setPlainText(fournisseur.get('adresse') or '')

    def setup_ui(self):
        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.nom_edit = QLineEdit()
        form.addRow("Raison sociale *:", self.nom_edit)
        self.telephone_edit = QLineEdit()
        self.telephone_edit.setPlaceholderText("+213 ...")
        form.addRow("Téléphone:", self.telephone_edit)
        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("ventes@fournisseur.dz")
        form.addRow("Email:", self.email_edit)
        self.adresse_edit = QPlainTextEdit()
        self.adresse_edit.setMaximumHeight(70)
        form.addRow("Adresse:", self.adresse_edit)
        layout.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept_dialog)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def accept_dialog(self):
        data = {
            'nom': self.nom_edit.text(),
            'telephone': self.telephone_edit.text(),
            'email': self.email_edit.text(),
            'adresse': self.adresse_edit.toPlainText(),
        }
        try:
            if self.fournisseur_id:
                fournisseur_service.update(self.fournisseur_id, data)
            else:
                self.fournisseur_id = fournisseur_service.create(data)
        except ValueError as e:
            QMessageBox.warning(self, "Validation", str(e))
            return
        except Exception as e:
            logger.error(f"Erreur sauvegarde fournisseur: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible d'enregistrer le fournisseur:\n{e}")
            return
        self.accept()
