"""
Vue de gestion des services vendus et de leurs paiements.
"""
import logging
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QTableWidget, QTableWidgetItem,
    QPushButton, QLabel, QLineEdit, QGroupBox, QMessageBox, QHeaderView,
    QComboBox, QDateEdit, QCheckBox, QInputDialog
)
from PyQt5.QtCore import Qt, QTimer, QDate, QUrl
from PyQt5.QtGui import QColor, QBrush, QDesktopServices
from app.services.service_service import service_service
from app.services.client_service import client_service
from app.services.facture_service import facture_service
from app.models.service import (
    ETATS_PAIEMENT, ETAT_LABELS, STATUTS_SERVICE, STATUT_LABELS,
    PAYE, PARTIELLEMENT_PAYE, TERMINE, EN_COURS, format_montant,
)
from app.ui.dialogs.service_dialog import ServiceDialog
from app.ui.dialogs.paiement_dialog import PaiementDialog
from app.ui.dialogs.historique_dialog import HistoriqueDialog
from app.ui.widgets.statistiques_widget import StatistiquesWidget

logger = logging.getLogger(__name__)

ETAT_COLORS = {
    PAYE: QColor(144, 238, 144),
    PARTIELLEMENT_PAYE: QColor(255, 224, 130),
}
STATUT_COLORS = {
    TERMINE: QColor(144, 238, 144),
    EN_COURS: QColor(173, 216, 230),
}

class ServiceView(QWidget):
    """Vue de gestion des services."""

    def __init__(self):
        super().__init__()
        self.service_service = service_service
        self.services = []
        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.timeout.connect(self.load_data)
        self.init_ui()
        # Charger les services après un court délai
        QTimer.singleShot(100, self.load_data)

    def init_ui(self):
        """Initialise l'interface utilisateur."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)

        title_label = QLabel("🖨️ Gestion des Services")
        title_label.setStyleSheet("font-size: 18px; font-weight: bold; padding: 10px;")
        layout.addWidget(title_label)

        layout.addWidget(self.create_filters())

        self.stats_widget = StatistiquesWidget()
        layout.addWidget(self.stats_widget)

        # Tableau
        self.table = QTableWidget()
        self.table.setColumnCount(10)
        self.table.setHorizontalHeaderLabels([
            "N°", "Date", "Client", "Type", "Description",
            "Prix total", "Payé", "Reste", "État paiement", "Statut"
        ])
        self.table.horizontalHeader().setSectionResizeMode(4, QHeaderView.Stretch)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setSelectionMode(QTableWidget.SingleSelection)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.setSortingEnabled(True)
        self.table.doubleClicked.connect(self.show_historique)
        layout.addWidget(self.table)

        layout.addLayout(self.create_action_buttons())

    def create_filters(self):
        """Crée la section des filtres."""
        group = QGroupBox("🔍 Filtres")
        grid = QGridLayout(group)

        self.client_filter = QComboBox()
        self.client_filter.currentIndexChanged.connect(self.load_data)
        grid.addWidget(QLabel("Client:"), 0, 0)
        grid.addWidget(self.client_filter, 0, 1)

        self.type_filter = QComboBox()
        self.type_filter.currentIndexChanged.connect(self.load_data)
        grid.addWidget(QLabel("Type:"), 0, 2)
        grid.addWidget(self.type_filter, 0, 3)

        self.etat_filter = QComboBox()
        self.etat_filter.addItem("Tous", None)
        for etat in ETATS_PAIEMENT:
            self.etat_filter.addItem(ETAT_LABELS[etat], etat)
        self.etat_filter.currentIndexChanged.connect(self.load_data)
        grid.addWidget(QLabel("Paiement:"), 0, 4)
        grid.addWidget(self.etat_filter, 0, 5)

        self.statut_filter = QComboBox()
        self.statut_filter.addItem("Tous", None)
        for statut in STATUTS_SERVICE:
            self.statut_filter.addItem(STATUT_LABELS[statut], statut)
        self.statut_filter.currentIndexChanged.connect(self.load_data)
        grid.addWidget(QLabel("Statut:"), 0, 6)
        grid.addWidget(self.statut_filter, 0, 7)

        self.periode_check = QCheckBox("Période du")
        self.periode_check.toggled.connect(self._on_periode_toggled)
        grid.addWidget(self.periode_check, 1, 0)
        self.date_debut = QDateEdit(QDate.currentDate().addMonths(-1))
        self.date_fin = QDateEdit(QDate.currentDate())
        for edit in (self.date_debut, self.date_fin):
            edit.setCalendarPopup(True)
            edit.setDisplayFormat("dd/MM/yyyy")
            edit.setEnabled(False)
            edit.dateChanged.connect(self.load_data)
        grid.addWidget(self.date_debut, 1, 1)
        grid.addWidget(QLabel("au"), 1, 2)
        grid.addWidget(self.date_fin, 1, 3)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Description, client, type...")
        self.search_edit.textChanged.connect(lambda _: self._search_timer.start(400))
        grid.addWidget(QLabel("Recherche:"), 1, 4)
        grid.addWidget(self.search_edit, 1, 5, 1, 2)

        btn_reset = QPushButton("↺ Réinitialiser")
        btn_reset.clicked.connect(self.reset_filters)
        grid.addWidget(btn_reset, 1, 7)

        self.load_filter_data()
        return group

    def create_action_buttons(self):
        """Crée les boutons d'action."""
        layout = QHBoxLayout()

        btn_nouveau = QPushButton("➕ Nouveau service")
        btn_nouveau.setStyleSheet(
            "background-color: #27ae60; color: white; font-weight: bold; padding: 5px 10px;")
        btn_nouveau.clicked.connect(self.new_service)
        layout.addWidget(btn_nouveau)

        for label, slot in [
            ("💳 Paiement", self.add_paiement),
            ("🔄 Statut", self.change_statut),
            ("📋 Historique", self.show_historique),
            ("📄 Facture PDF", self.generate_facture),
            ("🗑️ Supprimer", self.delete_service),
            ("🔁 Rafraîchir", self.refresh),
        ]:
            btn = QPushButton(label)
            btn.clicked.connect(slot)
            layout.addWidget(btn)

        layout.addStretch()
        return layout

    def load_filter_data(self):
        """Remplit les listes client et type (conserve la sélection)."""
        client_id = self.client_filter.currentData()
        type_id = self.type_filter.currentData()
        for combo in (self.client_filter, self.type_filter):
            combo.blockSignals(True)
            combo.clear()
            combo.addItem("Tous", None)
        try:
            for c in client_service.get_all():
                self.client_filter.addItem(c['nom'], c['id'])
            for t in self.service_service.get_types():
                self.type_filter.addItem(t.nom_type, t.id)
        except Exception as e:
            logger.error(f"Erreur chargement filtres services: {e}")
        for combo, value in ((self.client_filter, client_id), (self.type_filter, type_id)):
            idx = combo.findData(value) if value is not None else 0
            combo.setCurrentIndex(max(idx, 0))
            combo.blockSignals(False)

    def _on_periode_toggled(self, checked):
        self.date_debut.setEnabled(checked)
        self.date_fin.setEnabled(checked)
        self.load_data()

    def reset_filters(self):
        widgets = (self.client_filter, self.type_filter, self.etat_filter, self.statut_filter,
                   self.periode_check, self.search_edit)
        for w in widgets:
            w.blockSignals(True)
        self.client_filter.setCurrentIndex(0)
        self.type_filter.setCurrentIndex(0)
        self.etat_filter.setCurrentIndex(0)
        self.statut_filter.setCurrentIndex(0)
        self.periode_check.setChecked(False)
        self.date_debut.setEnabled(False)
        self.date_fin.setEnabled(False)
        self.search_edit.clear()
        for w in widgets:
            w.blockSignals(False)
        self.load_data()

    def get_filters(self):
        """Récupère les filtres actifs."""
        filters = {
            'client_id': self.client_filter.currentData(),
            'type_id': self.type_filter.currentData(),
            'etat_paiement': self.etat_filter.currentData(),
            'statut_service': self.statut_filter.currentData(),
            'search': self.search_edit.text().strip(),
        }
        if self.periode_check.isChecked():
            filters['date_debut'] = self.date_debut.date().toPyDate()
            filters['date_fin'] = self.date_fin.date().toPyDate()
        filters = {k: v for k, v in filters.items() if v}
        return filters or None

    def refresh(self):
        self.load_filter_data()
        self.load_data()

    def load_data(self):
        """Charge les services depuis la base de données."""
        try:
            self.services = self.service_service.get_all(self.get_filters())
        except ValueError as e:
            QMessageBox.warning(self, "Filtres", str(e))
            return
        except Exception as e:
            logger.error(f"Erreur chargement services: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de charger les services:\n{e}")
            return

        self.table.setSortingEnabled(False)
        self.table.setRowCount(0)
        for row_idx, s in enumerate(self.services):
            self.table.insertRow(row_idx)

            num_item = QTableWidgetItem(s.numero_facture)
            num_item.setData(Qt.UserRole, s.id)
            self.table.setItem(row_idx, 0, num_item)
            self.table.setItem(row_idx, 1, QTableWidgetItem(s.date_formatee))
            self.table.setItem(row_idx, 2, QTableWidgetItem(s.client))
            self.table.setItem(row_idx, 3, QTableWidgetItem(s.type_service))
            self.table.setItem(row_idx, 4, QTableWidgetItem(s.description))

            for col, montant in ((5, s.prix_total), (6, s.montant_paye), (7, s.reste_a_payer)):
                item = QTableWidgetItem(format_montant(montant))
                item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.table.setItem(row_idx, col, item)
            if not s.est_paye:
                self.table.item(row_idx, 7).setForeground(QBrush(QColor("#e74c3c")))

            etat_item = QTableWidgetItem(ETAT_LABELS.get(s.etat_paiement, s.etat_paiement))
            etat_item.setTextAlignment(Qt.AlignCenter)
            etat_item.setBackground(QBrush(ETAT_COLORS.get(s.etat_paiement, QColor(255, 182, 193))))
            self.table.setItem(row_idx, 8, etat_item)

            statut_item = QTableWidgetItem(s.statut_label)
            statut_item.setTextAlignment(Qt.AlignCenter)
            if s.statut_service in STATUT_COLORS:
                statut_item.setBackground(QBrush(STATUT_COLORS[s.statut_service]))
            self.table.setItem(row_idx, 9, statut_item)
        self.table.setSortingEnabled(True)

        self.stats_widget.update_statistiques(self.service_service.get_statistiques(self.services))
        logger.info(f"{len(self.services)} service(s) chargé(s)")

    def _selected_service(self):
        """Service sélectionné, relu en base."""
        row = self.table.currentRow()
        if row < 0:
            QMessageBox.warning(self, "Attention", "Veuillez sélectionner un service.")
            return None
        service_id = self.table.item(row, 0).data(Qt.UserRole)
        service = self.service_service.get_by_id(service_id)
        if service is None:
            QMessageBox.warning(self, "Erreur", "Service introuvable.")
            self.load_data()
        return service

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def new_service(self):
        dialog = ServiceDialog(self)
        if dialog.exec_():
            self.refresh()
            QMessageBox.information(self, "Succès", "✅ Service ajouté avec succès")

    def add_paiement(self):
        try:
            service = self._selected_service()
            if service is None:
                return
            if service.est_paye:
                QMessageBox.information(self, "Paiement", "Ce service est déjà entièrement payé.")
                return
            dialog = PaiementDialog(service, self)
            if dialog.exec_():
                self.load_data()
                QMessageBox.information(self, "Succès", "✅ Paiement enregistré avec succès")
        except Exception as e:
            logger.error(f"Erreur paiement: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible d'enregistrer le paiement:\n{e}")

    def change_statut(self):
        try:
            service = self._selected_service()
            if service is None:
                return
            labels = [STATUT_LABELS[s] for s in STATUTS_SERVICE]
            label, ok = QInputDialog.getItem(
                self, "🔄 Changer le Statut du Service",
                f"Service #{service.id} - {service.client}\nNouveau statut :",
                labels, STATUTS_SERVICE.index(service.statut_service), False
            )
            if not ok:
                return
            statut = STATUTS_SERVICE[labels.index(label)]
            if statut != service.statut_service:
                self.service_service.update_statut(service.id, statut)
                self.load_data()
        except Exception as e:
            logger.error(f"Erreur changement statut: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de changer le statut:\n{e}")

    def show_historique(self):
        service = self._selected_service()
        if service is not None:
            HistoriqueDialog(service, self).exec_()

    def generate_facture(self):
        try:
            service = self._selected_service()
            if service is None:
                return
            paiements = self.service_service.get_paiements(service.id)
            client = client_service.get_details(service.id_client)
            path = facture_service.generer_facture(service, paiements, client)
            QDesktopServices.openUrl(QUrl.fromLocalFile(str(path)))
            QMessageBox.information(
                self, "Facture générée",
                f"✅ La facture a été générée avec succès !\nFichier : {path.name}"
            )
        except Exception as e:
            logger.error(f"Erreur génération facture: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de générer la facture:\n{e}")

    def delete_service(self):
        try:
            service = self._selected_service()
            if service is None:
                return
            reply = QMessageBox.question(
                self, "Confirmation de suppression",
                f"Supprimer le service #{service.id} ?\n\n"
                f"Êtes-vous sûr de vouloir supprimer ce service ?\n"
                f"Client: {service.client}\nType: {service.type_service}\n\n"
                f"Les paiements associés seront également supprimés.",
                QMessageBox.Yes | QMessageBox.No, QMessageBox.No
            )
            if reply != QMessageBox.Yes:
                return
            if self.service_service.delete(service.id):
                self.load_data()
                QMessageBox.information(self, "Succès", "Service supprimé avec succès")
        except Exception as e:
            logger.error(f"Erreur suppression service: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de supprimer le service:\n{e}")
