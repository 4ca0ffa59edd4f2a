"""
Vue de gestion des fournisseurs.
"""
import logging
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem,
    QPushButton, QLabel, QLineEdit, QGroupBox, QMessageBox, QHeaderView
)
from PyQt5.QtCore import Qt, QTimer
from app.services.fournisseur_service import fournisseur_service
from app.ui.dialogs.fournisseur_dialog import FournisseurDialog

logger = logging.getLogger(__name__)

COLONNES = (('nom', "Nom"), ('telephone', "Téléphone"), ('email', "Email"), ('adresse', "Adresse"))


class FournisseurView(QWidget):
    """Liste des fournisseurs avec recherche et indicateurs."""

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

        title_label = QLabel("🏢 Fournisseurs")
        title_label.setStyleSheet("font-size: 18px; font-weight: bold; padding: 10px;")
        layout.addWidget(title_label)

        barre = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("🔍 Rechercher un fournisseur...")
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(lambda _: self._search_timer.start(400))
        barre.addWidget(self.search_edit, 2)

        indicateurs = QGroupBox()
        kpi_layout = QHBoxLayout(indicateurs)
        kpi_layout.setContentsMargins(6, 2, 6, 2)
        self.kpi_labels = {}
        for key in ('total', 'avec_email', 'avec_telephone'):
            label = QLabel()
            label.setStyleSheet("font-weight: bold; padding: 2px 8px;")
            kpi_layout.addWidget(label)
            self.kpi_labels[key] = label
        barre.addWidget(indicateurs, 3)
        layout.addLayout(barre)

        self.table = QTableWidget(0, len(COLONNES))
        self.table.setHorizontalHeaderLabels([titre for _, titre in COLONNES])
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeToContents)
        header.setSectionResizeMode(0, QHeaderView.Stretch)
        header.setStretchLastSection(True)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setSelectionMode(QTableWidget.SingleSelection)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.doubleClicked.connect(self.edit_fournisseur)
        layout.addWidget(self.table)

        boutons = QHBoxLayout()
        for texte, slot in (("➕ Nouveau", self.create_fournisseur),
                            ("✏️ Modifier", self.edit_fournisseur),
                            ("🗑️ Supprimer", self.delete_fournisseur),
                            ("🔄 Rafraîchir", self.load_data)):
            btn = QPushButton(texte)
            btn.clicked.connect(slot)
            boutons.addWidget(btn)
        boutons.addStretch()
        layout.addLayout(boutons)

    def load_data(self):
        search = self.search_edit.text().strip()
        try:
            fournisseurs = fournisseur_service.get_all({'search': search} if search else None)
            stats = fournisseur_service.get_stats()
        except Exception as e:
            logger.error(f"Erreur chargement fournisseurs: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", f"Impossible de charger les fournisseurs:\n{e}")
            return

        self.table.setRowCount(len(fournisseurs))
        for row, fournisseur in enumerate(fournisseurs):
            for col, (key, _) in enumerate(COLONNES):
                item = QTableWidgetItem(fournisseur.get(key) or '')
                if col == 0:
                    item.setData(Qt.UserRole, fournisseur['id'])
                self.table.setItem(row, col, item)

        self.kpi_labels['total'].setText(f"Total: {stats['total']}")
        self.kpi_labels['avec_email'].setText(f"📧 {stats['avec_email']}")
        self.kpi_labels['avec_telephone'].setText(f"📞 {stats['avec_telephone']}")

    def _selected(self):
        """(id, nom) de la ligne sélectionnée, ou None après avertissement."""
        row = self.table.currentRow()
        if row < 0:
            QMessageBox.warning(self, "Attention", "Veuillez sélectionner un fournisseur.")
            return None
        item = self.table.item(row, 0)
        return item.data(Qt.UserRole), item.text()

    def create_fournisseur(self):
        if FournisseurDialog(self).exec_():
            self.load_data()

    def edit_fournisseur(self):
        selection = self._selected()
        if selection is None:
            return
        try:
            fournisseur = fournisseur_service.get_by_id(selection[0])
        except Exception as e:
            logger.error(f"Erreur lecture fournisseur {selection[0]}: {e}", exc_info=True)
            QMessageBox.critical(self, "Erreur", str(e))
            return
        if not fournisseur:
            QMessageBox.warning(self, "Erreur", "Ce fournisseur n'existe plus.")
            self.load_data()
            return
        if FournisseurDialog(self, fournisseur).exec_():
            self.load_data()

    def delete_fournisseur(self):
        selection = self._selected()
        if selection is None:
            return
        fournisseur_id, nom = selection
        reply = QMessageBox.question(
            self, "Confirmation", f"Supprimer le fournisseur '{nom}' ?",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        if reply != QMessageBox.Yes:
            return

        ok, msg = fournisseur_service.delete(fournisseur_id)
        if ok:
            self.load_data()
        else:
            QMessageBox.warning(self, "Suppression impossible", msg)
