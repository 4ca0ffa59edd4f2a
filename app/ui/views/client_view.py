"""
Vue de gestion des clients.
"""
import logging
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem,
    QPushButton, QLabel, QComboBox, QLineEdit, QGroupBox, QMessageBox,
    QHeaderView
)
from PyQt5.QtCore import Qt, QTimer
from app.services.client_service import client_service
from app.ui.dialogs.client_dialog import ClientDialog
from app.ui.dialogs.client_details_dialog import ClientDetailsDialog

logger = logging.getLogger(__name__)

class ClientView(QWidget):
    """Vue de gestion des clients."""

    def __init__(self):
        super().__init__()
        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.timeout.connect(self.load_data)
        self.init_ui()
        QTimer.singleShot(100, self.load_data)

    def init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)

        title_label = QLabel("👥 Gestion des Clients")
        title_label.setStyleSheet("font-size: 18px; font-weight: bold; padding: 10px;")
        layout.addWidget(title_label)

        # Filtres
        group = QGroupBox("🔍 Filtres")
        filters = QHBoxLayout(group)
        filters.addWidget(QLabel("Recherche:"))
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Nom, téléphone, email, adresse...")
        self.search_edit.textChanged.connect(lambda _: self._search_timer.start(400))
        filters.addWidget(self.search_edit)

        filters.addWidget(QLabel("Services:"))
        self.services_filter = QComboBox()
        self.services_filter.addItem("Tous", None)
        self.services_filter.addItem("Avec services", True)
        self.services_filter.addItem("Sans service", False)
        self.services_filter.currentIndexChanged.connect(self.load_data)
        filters.addWidget(self.services_filter)
        filters.addStretch()
        layout.addWidget(group)

        # KPI
        kpi_group = QGroupBox("📊 Indicateurs")
        kpi_layout = QHBoxLayout(kpi_group)
        self.kpi_total = QLabel("Total: 0")
        self.kpi_actifs = QLabel("Avec services: 0")
        for kpi in [self.kpi_total, self.kpi_actifs]:
            kpi.setStyleSheet("font-weight: bold; padding: 5px 10px;")
            kpi_layout.addWidget(kpi)
        kpi_layout.addStretch()
        layout.addWidget(kpi_group)

        # Tableau
        self.table = QTableWidget()
        self.table.setColumnCount(5)
        self.table.setHorizontalHeaderLabels([
            "Nom", "Téléphone", "Email", "Adresse", "Services"
        ])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(3, QHeaderView.Stretch)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setSelectionMode(QTableWidget.SingleSelection)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.setSortingEnabled(True)
        self.table.doubleClicked.connect(self.show_details)
        layout.addWidget(self.table)

        # Boutons d'action
        buttons = QHBoxLayout()
        for label, slot in [
            ("➕ Nouveau", self.create_client),
            ("✏️ Modifier", self.edit_client),
            ("👁️ Détails", self.show_details),
            ("🗑️ Supprimer", self.delete_client),
            ("🔄 Rafraîchir", self.load_data),
        ]:
            btn = QPushButton(label)
            btn.clicked.connect(slot)
            buttons.addWidget(btn)
        buttons.addStretch()
        layout.addLayout(buttons)

    def get_filters(self):
        filters = {}
        search = self.search_edit.text().strip()
        if search:
            filters['search'] = search
        avec_services = self.services_filter.currentData()
        if avec_services is not None:
            filters['avec_services'] = avec_services
        return filters or None

    def load_data(self):
        """Charge les clients depuis la base de données."""
        try:
            clients = client_service.get_all(self.get_filters())

            self.table.setSortingEnabled(False)
            self.table.setRowCount(0)
            for row_idx, client in enumerate(clients):
                self.table.insertRow(row_idx)
                nom_item = QTableWidgetItem(client['nom'] or '')
                nom_item.setData(Qt.UserRole, client['id'])
                self.table.setItem(row_idx, 0, nom_item)
                for col, key in ((1, 'telephone'), (2, 'email'), (3, 'adresse')):
                    self.table.setItem(row_idx, col, QTableWidgetItem(client.get(key) or ''))
                nb_item = QTableWidgetItem()
                nb_item.setData(Qt.DisplayRole, int(client.get('nombre_services') or 0))
                nb_item.setTextAlignment(Qt.AlignCenter)
                self.table.setItem(row_idx, 4, nb_item)
            self.table.setSortingEnabled(True)

            stats = client_service.get_stats()
            self.kpi_total.setText(f"Total: {stats['total']}")
            self.kpi_actifs.setText(f"Avec services: {stats['avec_services']}")

            logger.info(f"{len(clients)} client(s) chargé(s)")
        except Exception as e:
            logger.error(f"Erreur chargement clients: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de charger les clients:\n{e}")

    def _selected_id(self):
        row = self.table.currentRow()
        if row < 0:
            QMessageBox.warning(self, "Attention", "Veuillez sélectionner un client.")
            return None
        return self.table.item(row, 0).data(Qt.UserRole)

    def create_client(self):
        dialog = ClientDialog(self)
        if dialog.exec_():
            self.load_data()

    def edit_client(self):
        try:
            client_id = self._selected_id()
            if client_id is None:
                return
            client = client_service.get_by_id(client_id)
            if not client:
                QMessageBox.warning(self, "Erreur", "Client introuvable.")
                return
            dialog = ClientDialog(self, client)
            if dialog.exec_():
                self.load_data()
        except Exception as e:
            logger.error(f"Erreur édition client: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de modifier le client:\n{e}")

    def show_details(self):
        client_id = self._selected_id()
        if client_id is not None:
            ClientDetailsDialog(client_id, self).exec_()

    def delete_client(self):
        try:
            client_id = self._selected_id()
            if client_id is None:
                return
            nom = self.table.item(self.table.currentRow(), 0).text()
            reply = QMessageBox.question(
                self, "Confirmation",
                f"Êtes-vous sûr de vouloir supprimer le client '{nom}' ?",
                QMessageBox.Yes | QMessageBox.No, QMessageBox.No
            )
            if reply != QMessageBox.Yes:
                return
            ok, msg = client_service.delete(client_id)
            if ok:
                self.load_data()
                QMessageBox.information(self, "Succès", msg)
            else:
                QMessageBox.warning(self, "Suppression impossible", msg)
        except Exception as e:
            logger.error(f"Erreur suppression client: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de supprimer le client:\n{e}")
