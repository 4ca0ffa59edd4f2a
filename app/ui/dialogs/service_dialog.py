"""
Dialogue de création d'un service vendu (avec acompte éventuel).
"""
import logging
from PyQt5.QtWidgets import (
    QHBoxLayout, QDialog, QVBoxLayout, QFormLayout, QComboBox, QTextEdit,
    QDoubleSpinBox, QDialogButtonBox, QMessageBox, QPushButton, QInputDialog,
    QLabel
)
from PyQt5.QtCore import Qt
from app.services.client_service import client_service
from app.services.service_service import service_service
from app.models.service import STATUTS_SERVICE, STATUT_LABELS, EN_ATTENTE
from config.settings import CURRENCY

logger = logging.getLogger(__name__)

class ServiceDialog(QDialog):
    """Dialogue de création de service."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.service_id = None
        self.setWindowTitle("➕ Ajouter un Nouveau Service")
        self.setMinimumWidth(520)
        self.setup_ui()
        self.load_clients()
        self.load_types()

    def _searchable_combo(self, placeholder):
        combo = QComboBox()
        combo.setEditable(True)
        combo.setInsertPolicy(QComboBox.NoInsert)
        combo.completer().setFilterMode(Qt.MatchContains)
        combo.completer().setCaseSensitivity(Qt.CaseInsensitive)
        combo.lineEdit().setPlaceholderText(placeholder)
        return combo

    def _add_button(self, tooltip, slot):
        btn = QPushButton("➕")
        btn.setFixedWidth(32)
        btn.setToolTip(tooltip)
        btn.clicked.connect(slot)
        return btn

    def setup_ui(self):
        """Configure l'interface."""
        layout = QVBoxLayout(self)

        header = QLabel("Remplissez les informations du service")
        header.setStyleSheet("font-weight: bold; padding-bottom: 6px;")
        layout.addWidget(header)

        form = QFormLayout()

        # Client + création rapide
        client_row = QHBoxLayout()
        self.client_combo = self._searchable_combo("Tapez un nom...")
        client_row.addWidget(self.client_combo)
        client_row.addWidget(self._add_button("Nouveau client", self._nouveau_client))
        form.addRow("Client *:", client_row)

        # Type de service + création rapide
        type_row = QHBoxLayout()
        self.type_combo = self._searchable_combo("Type de service")
        type_row.addWidget(self.type_combo)
        type_row.addWidget(self._add_button("Nouveau type de service", self._nouveau_type))
        form.addRow("Type *:", type_row)

        self.description_edit = QTextEdit()
        self.description_edit.setPlaceholderText("Détails de la prestation")
        self.description_edit.setMaximumHeight(90)
        form.addRow("Description:", self.description_edit)

        self.prix_spin = QDoubleSpinBox()
        self.prix_spin.setRange(0, 1_000_000_000)
        self.prix_spin.setDecimals(2)
        self.prix_spin.setGroupSeparatorShown(True)
        self.prix_spin.setSuffix(f" {CURRENCY}")
        self.prix_spin.valueChanged.connect(self._update_reste)
        form.addRow("Prix total *:", self.prix_spin)

        self.paye_spin = QDoubleSpinBox()
        self.paye_spin.setRange(0, 1_000_000_000)
        self.paye_spin.setDecimals(2)
        self.paye_spin.setGroupSeparatorShown(True)
        self.paye_spin.setSuffix(f" {CURRENCY}")
        self.paye_spin.valueChanged.connect(self._update_reste)
        form.addRow("Acompte versé:", self.paye_spin)

        self.reste_label = QLabel()
        self.reste_label.setStyleSheet("font-weight: bold;")
        form.addRow("Reste à payer:", self.reste_label)

        self.statut_combo = QComboBox()
        for statut in STATUTS_SERVICE:
            self.statut_combo.addItem(STATUT_LABELS[statut], statut)
        self.statut_combo.setCurrentIndex(STATUTS_SERVICE.index(EN_ATTENTE))
        form.addRow("Statut:", self.statut_combo)

        layout.addLayout(form)
        self._update_reste()

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept_dialog)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _update_reste(self):
        reste = self.prix_spin.value() - self.paye_spin.value()
        color = "#e74c3c" if reste < 0 else "#2c3e50"
        self.reste_label.setStyleSheet(f"font-weight: bold; color: {color};")
        self.reste_label.setText(f"{reste:,.2f} {CURRENCY}")

    def load_clients(self, select_id=None):
        try:
            self.client_combo.clear()
            for c in client_service.get_all():
                self.client_combo.addItem(c['nom'], c['id'])
            self._select(self.client_combo, select_id)
        except Exception as e:
            logger.error(f"Erreur chargement clients: {e}")

    def load_types(self, select_id=None):
        try:
            self.type_combo.clear()
            for t in service_service.get_types():
                self.type_combo.addItem(t.nom_type, t.id)
            self._select(self.type_combo, select_id)
        except Exception as e:
            logger.error(f"Erreur chargement types de service: {e}")

    def _select(self, combo, item_id):
        idx = combo.findData(item_id) if item_id is not None else -1
        combo.setCurrentIndex(idx)

    def _current_id(self, combo):
        """Id de l'élément choisi (le texte saisi doit correspondre à un élément)."""
        idx = combo.findText(combo.currentText().strip(), Qt.MatchFixedString)
        return combo.itemData(idx) if idx >= 0 else None

    def _nouveau_client(self):
        from app.ui.dialogs.client_dialog import ClientDialog
        dialog = ClientDialog(self)
        if dialog.exec_():
            self.load_clients(select_id=dialog.client_id)

    def _nouveau_type(self):
        nom, ok = QInputDialog.getText(self, "Nouveau type de service",
                                       "Nom du nouveau type de service :")
        if not ok or not nom.strip():
            return
        try:
            type_id = service_service.create_type(nom)
            self.load_types(select_id=type_id)
        except ValueError as e:
            QMessageBox.warning(self, "Erreur", str(e))
        except Exception as e:
            logger.error(f"Erreur création type de service: {e}")
            QMessageBox.critical(self, "Erreur", f"Impossible de créer le type:\n{e}")

    def get_data(self):
        return {
            'id_client': self._current_id(self.client_combo),
            'id_type_service': self._current_id(self.type_combo),
            'description': self.description_edit.toPlainText().strip(),
            'prix_total': self.prix_spin.value(),
            'montant_paye': self.paye_spin.value(),
            'statut_service': self.statut_combo.currentData(),
        }

    def accept_dialog(self):
        """Valide et enregistre le service."""
        try:
            self.service_id = service_service.create(self.get_data())
            self.accept()
        except ValueError as e:
            QMessageBox.warning(self, "Validation", str(e))
        except Exception as e:
            logger.error(f"Erreur enregistrement service: {e}")
            QMessageBox.critical(self, "Erreur", f"Impossible d'enregistrer le service:\n{e}")
