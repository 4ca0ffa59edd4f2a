"""
Vue Tableau de bord avec KPI et derniers paiements.
"""
import logging
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox, QScrollArea,
    QFrame, QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView
)
from PyQt5.QtCore import Qt
from app.services.dashboard_service import dashboard_service
from app.models.service import format_montant
from config.settings import CURRENCY

logger = logging.getLogger(__name__)

class KPIWidget(QFrame):
    """Widget pour afficher un KPI."""

    def __init__(self, title, value, icon="", parent=None):
        super().__init__(parent)
        self.icon = icon
        self.setFrameStyle(QFrame.StyledPanel | QFrame.Raised)
        self.setLineWidth(2)

        layout = QVBoxLayout(self)

        # Icône et valeur
        self.value_label = QLabel(f"{icon} {value}")
        self.value_label.setStyleSheet("font-size: 22pt; font-weight: bold;")
        self.value_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.value_label)

        # Titre
        title_label = QLabel(title)
        title_label.setStyleSheet("font-size: 11pt;")
        title_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(title_label)

        self.setMinimumHeight(120)

    def set_value(self, value, color=None):
        self.value_label.setText(f"{self.icon} {value}")
        style = "font-size: 22pt; font-weight: bold;"
        if color:
            style += f" color: {color};"
        self.value_label.setStyleSheet(style)

class DashboardView(QWidget):
    """Vue Tableau de bord principale."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setup_ui()
        self.load_data()

    def setup_ui(self):
        """Configure l'interface."""
        layout = QVBoxLayout(self)

        # Titre
        title = QLabel("📊 Tableau de bord - Vue d'ensemble")
        title.setStyleSheet("font-size: 18pt; font-weight: bold; padding: 10px;")
        layout.addWidget(title)

        # Scroll area pour le contenu
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)

        content = QWidget()
        content_layout = QVBoxLayout(content)

        # KPI principaux
        kpi_group = QGroupBox("📈 Indicateurs clés")
        kpi_layout = QGridLayout(kpi_group)

        self.kpi_services = KPIWidget("Services", "0", "🖨️")
        self.kpi_encaisse = KPIWidget(f"Total encaissé ({CURRENCY})", "0", "💰")
        self.kpi_du = KPIWidget(f"Reste à encaisser ({CURRENCY})", "0", "⏳")
        self.kpi_clients = KPIWidget("Clients actifs", "0", "👥")
        self.kpi_termines = KPIWidget("Services terminés", "0 %", "✅")
        self.kpi_paiement = KPIWidget("Taux de paiement", "0 %", "📈")

        kpi_layout.addWidget(self.kpi_services, 0, 0)
        kpi_layout.addWidget(self.kpi_encaisse, 0, 1)
        kpi_layout.addWidget(self.kpi_du, 0, 2)
        kpi_layout.addWidget(self.kpi_clients, 1, 0)
        kpi_layout.addWidget(self.kpi_termines, 1, 1)
        kpi_layout.addWidget(self.kpi_paiement, 1, 2)

        content_layout.addWidget(kpi_group)

        # Activité récente
        activite_group = QGroupBox("📝 Derniers paiements")
        activite_layout = QVBoxLayout(activite_group)

        self.paiements_table = QTableWidget()
        self.paiements_table.setColumnCount(5)
        self.paiements_table.setHorizontalHeaderLabels([
            "Date", "Client", "Service", f"Montant ({CURRENCY})", "Mode"
        ])
        self.paiements_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.paiements_table.setAlternatingRowColors(True)
        self.paiements_table.verticalHeader().setVisible(False)
        self.paiements_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.paiements_table.setMinimumHeight(250)
        activite_layout.addWidget(self.paiements_table)

        self.activite_label = QLabel("")
        activite_layout.addWidget(self.activite_label)

        content_layout.addWidget(activite_group)

        content_layout.addStretch()

        scroll.setWidget(content)
        layout.addWidget(scroll)

    def load_data(self):
        """Charge les données du tableau de bord."""
        try:
            kpis = dashboard_service.get_kpis()

            self.kpi_services.set_value(kpis['nb_services'])
            self.kpi_encaisse.set_value(format_montant(kpis['total_encaisse'], 0), "#27ae60")
            self.kpi_du.set_value(
                format_montant(kpis['total_du'], 0),
                "#e74c3c" if kpis['total_du'] > 0 else None
            )
            self.kpi_clients.set_value(kpis['clients_actifs'])
            self.kpi_termines.set_value(f"{kpis['taux_termines']:.0f} %")
            self.kpi_paiement.set_value(f"{kpis['taux_paiement']:.1f} %")

            paiements = dashboard_service.get_derniers_paiements()
            self.paiements_table.setRowCount(len(paiements))
            for row, p in enumerate(paiements):
                self.paiements_table.setItem(row, 0, QTableWidgetItem(p.date_formatee))
                self.paiements_table.setItem(row, 1, QTableWidgetItem(p.client))
                self.paiements_table.setItem(row, 2, QTableWidgetItem(p.type_service))
                montant = QTableWidgetItem(format_montant(p.montant))
                montant.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.paiements_table.setItem(row, 3, montant)
                self.paiements_table.setItem(row, 4, QTableWidgetItem(p.mode_paiement))

            self.activite_label.setText("" if paiements else "Aucun paiement enregistré")
            logger.info("Tableau de bord chargé")

        except Exception as e:
            logger.error(f"Erreur chargement tableau de bord: {e}", exc_info=True)
            self.activite_label.setText(f"Erreur: {e}")
