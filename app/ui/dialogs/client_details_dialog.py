"""
Fiche client : coordonnées et services vendus.
"""
import logging
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QGroupBox, QTableWidget, QTableWidgetItem,
    QHeaderView, QDialogButtonBox, QMessageBox, QAbstractItemView
)
from PyQt5.QtCore import Qt
from app.services.client_service import client_service
from app.services.service_service import service_service
from app.models.service import ETAT_LABELS, format_montant
from config.settings import CURRENCY

logger = logging.getLogger(__name__)

class ClientDetailsDialog(QDialog):
    """Affiche la fiche d'un client et ses services."""

    def __init__(self, client_id, parent=None):
        super().__init__(parent)
        self.client_id = client_id
        self.setWindowTitle("Détails du client")
        self.setMinimumSize(800, 500)
        self.setup_ui()
        self.load_data()

    def setup_ui(self):
        layout = QVBoxLayout(self)

        info_group = QGroupBox("👤 Coordonnées")
        info_layout = QVBoxLayout(info_group)
        self.info_label = QLabel()
        self.info_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.info_label.setStyleSheet("font-size: 11pt; padding: 5px;")
        info_layout.addWidget(self.info_label)
        layout.addWidget(info_group)

        services_group = QGroupBox("🖨️ Services")
        services_layout = QVBoxLayout(services_group)
        self.table = QTableWidget()
        self.table.setColumnCount(7)
        self.table.setHorizontalHeaderLabels([
            "N°", "Date", "Type", "Prix total", "Payé", "Reste", "État"
        ])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        services_layout.addWidget(self.table)

        self.totaux_label = QLabel()
        self.totaux_label.setStyleSheet("font-weight: bold; padding: 5px;")
        services_layout.addWidget(self.totaux_label)
        layout.addWidget(services_group)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def load_data(self):
        try:
            client = client_service.get_details(self.client_id)
            if client is None:
                self.info_label.setText("Client introuvable")
                return
            self.info_label.setText(client.details_formates())

            services = client_service.get_services(self.client_id)
            self.table.setRowCount(len(services))
            for row, s in enumerate(services):
                values = [s.numero_facture, s.date_formatee, s.type_service]
                for col, val in enumerate(values):
                    self.table.setItem(row, col, QTableWidgetItem(val))
                for col, montant in ((3, s.prix_total), (4, s.montant_paye), (5, s.reste_a_payer)):
                    item = QTableWidgetItem(format_montant(montant))
                    item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                    self.table.setItem(row, col, item)
                self.table.setItem(row, 6, QTableWidgetItem(ETAT_LABELS.get(s.etat_paiement, '')))

            stats = service_service.get_statistiques(services)
            self.totaux_label.setText(
                f"{stats.nombre_services} service(s) — Total: {format_montant(stats.total_montant)} {CURRENCY}"
                f" — Payé: {format_montant(stats.total_paye)} {CURRENCY}"
                f" — Reste: {format_montant(stats.total_reste)} {CURRENCY}"
            )
        except Exception as e:
            logger.error(f"Erreur chargement détails client {self.client_id}: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de charger le client:\n{e}")
