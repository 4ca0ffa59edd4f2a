"""
Historique des paiements d'un service.
"""
import logging
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QTableWidget, QTableWidgetItem,
    QHeaderView, QDialogButtonBox, QAbstractItemView
)
from PyQt5.QtCore import Qt
from app.services.service_service import service_service
from app.models.service import format_montant
from config.settings import CURRENCY

logger = logging.getLogger(__name__)

class HistoriqueDialog(QDialog):
    """Liste des paiements d'un service, plus récents d'abord."""

    def __init__(self, service, parent=None):
        super().__init__(parent)
        self.service = service
        self.setWindowTitle("📋 Historique des Paiements")
        self.setMinimumSize(560, 380)
        self.setup_ui()
        self.load_data()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        s = self.service
        header = QLabel(
            f"Service #{s.id} - {s.client}\n"
            f"Total: {format_montant(s.prix_total, devise=True)} | "
            f"Payé: {format_montant(s.montant_paye, devise=True)} | "
            f"Reste: {format_montant(s.reste_a_payer, devise=True)}"
        )
        header.setStyleSheet("font-weight: bold; padding: 4px;")
        layout.addWidget(header)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Date", f"Montant ({CURRENCY})", "Mode"])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        layout.addWidget(self.table)

        self.total_label = QLabel()
        self.total_label.setAlignment(Qt.AlignRight)
        self.total_label.setStyleSheet("font-weight: bold; color: #27ae60; padding: 4px;")
        layout.addWidget(self.total_label)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def load_data(self):
        try:
            paiements = service_service.get_paiements(self.service.id)
        except Exception as e:
            logger.error(f"Erreur chargement historique service {self.service.id}: {e}", exc_info=True)
            self.total_label.setText(f"Erreur: {e}")
            return

        self.table.setRowCount(len(paiements))
        for row, p in enumerate(paiements):
            self.table.setItem(row, 0, QTableWidgetItem(p.date_formatee))
            montant = QTableWidgetItem(format_montant(p.montant))
            montant.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(row, 1, montant)
            self.table.setItem(row, 2, QTableWidgetItem(p.mode_paiement))

        if paiements:
            total = sum(p.montant for p in paiements)
            self.total_label.setText(f"TOTAL ENCAISSÉ: {format_montant(total, devise=True)}")
        else:
            self.total_label.setText("Aucun paiement enregistré")
