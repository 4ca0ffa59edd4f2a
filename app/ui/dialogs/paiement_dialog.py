"""
Dialogue d'enregistrement d'un paiement sur un service.
"""
import logging
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLabel, QComboBox, QDoubleSpinBox,
    QDialogButtonBox, QMessageBox, QFrame
)
from app.services.service_service import service_service
from app.models.service import MODES_PAIEMENT, format_montant
from config.settings import CURRENCY

logger = logging.getLogger(__name__)

class PaiementDialog(QDialog):
    """Ajoute un paiement au service (mise à jour du reste à payer)."""

    def __init__(self, service, parent=None):
        super().__init__(parent)
        self.service = service
        self.setWindowTitle("💳 Mise à jour du Paiement")
        self.setMinimumWidth(420)
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        s = self.service

        header = QLabel(f"Service #{s.id} - {s.client}")
        header.setStyleSheet("font-size: 12pt; font-weight: bold;")
        layout.addWidget(header)

        for text, style in [
            (f"Prix total: {format_montant(s.prix_total, devise=True)}", ""),
            (f"Déjà payé: {format_montant(s.montant_paye, devise=True)}", ""),
            (f"Reste à payer: {format_montant(s.reste_a_payer, devise=True)}", " color: #e74c3c;"),
        ]:
            label = QLabel(text)
            label.setStyleSheet(f"font-weight: bold;{style}")
            layout.addWidget(label)

        line = QFrame()
        line.setFrameShape(QFrame.HLine)
        line.setFrameShadow(QFrame.Sunken)
        layout.addWidget(line)

        form = QFormLayout()
        self.montant_spin = QDoubleSpinBox()
        self.montant_spin.setRange(0, max(s.reste_a_payer, 0))
        self.montant_spin.setDecimals(2)
        self.montant_spin.setGroupSeparatorShown(True)
        self.montant_spin.setSuffix(f" {CURRENCY}")
        self.montant_spin.setValue(max(s.reste_a_payer, 0))
        form.addRow("Montant à ajouter:", self.montant_spin)

        self.mode_combo = QComboBox()
        self.mode_combo.addItems(MODES_PAIEMENT)
        form.addRow("Mode de paiement:", self.mode_combo)
        layout.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept_dialog)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def accept_dialog(self):
        try:
            self.service = service_service.enregistrer_paiement(
                self.service.id,
                self.montant_spin.value(),
                self.mode_combo.currentText()
            )
            self.accept()
        except ValueError as e:
            QMessageBox.warning(self, "Erreur", str(e))
        except Exception as e:
            logger.error(f"Erreur enregistrement paiement: {e}")
            QMessageBox.critical(self, "Erreur", f"Erreur lors de la mise à jour:\n{e}")
