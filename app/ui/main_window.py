"""
Fenêtre principale de l'application DECOPEINT Gestion.
"""
import logging
import importlib
import traceback
from datetime import datetime

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QAction, QStatusBar, QMessageBox,
    QToolBar, QPushButton, QTabWidget, QLabel, QFileDialog
)
from PyQt5.QtCore import Qt

from config.settings import APP_TITLE, COMPANY_NAME, COMPANY_SUBTITLE, EXPORT_DIR
from app.services.database_service import db_service
from app.services.export_service import export_service

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Fenêtre principale de l'application."""

    def __init__(self, user=None):
        super().__init__()
        self.user = user or {}
        self.logout_requested = False
        self.setWindowTitle(APP_TITLE)
        self.setGeometry(100, 100, 1300, 850)
        self.setup_ui()

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        self.tabs.currentChanged.connect(self._on_tab_changed)
        layout.addWidget(self.tabs)

        self.create_tabs()
        self.create_menu()
        self.create_toolbar()

        self.statusBar = QStatusBar()
        self.setStatusBar(self.statusBar)
        self.statusBar.showMessage("Prêt")
        if self.user:
            self.statusBar.addPermanentWidget(
                QLabel(f"👤 {self.user.get('nom') or self.user.get('login')}"))

    def _add_tab(self, module_path, class_name, label):
        """Charge un onglet dynamiquement avec gestion d'erreur."""
        try:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, class_name)
            view = cls()
            self.tabs.addTab(view, label)
            logger.info(f"✅ Onglet {label} chargé")
            return view
        except Exception as e:
            logger.error(f"❌ Erreur {label}: {e}\n{traceback.format_exc()}")
            err = QLabel(f"{label} non disponible:\n{e}")
            err.setAlignment(Qt.AlignCenter)
            err.setWordWrap(True)
            self.tabs.addTab(err, label)
            return None

    def create_tabs(self):
        self.dashboard_view = self._add_tab(
            "app.ui.views.dashboard_view", "DashboardView", "📊 Tableau de bord")

        self.service_view = self._add_tab(
            "app.ui.views.service_view", "ServiceView", "🖨️ Services")

        self.client_view = self._add_tab(
            "app.ui.views.client_view", "ClientView", "👥 Clients")

        self.fournisseur_view = self._add_tab(
            "app.ui.views.fournisseur_view", "FournisseurView", "🏢 Fournisseurs")

    def _tab_index(self, view_attr):
        """Retourne l'index d'un onglet par son attribut."""
        view = getattr(self, view_attr, None)
        if view:
            return self.tabs.indexOf(view)
        return 0

    def _on_tab_changed(self, index):
        # Les autres onglets ont pu modifier les données
        view = self.tabs.widget(index)
        if hasattr(view, "refresh"):
            view.refresh()
        elif hasattr(view, "load_data"):
            view.load_data()

    def create_menu(self):
        menubar = self.menuBar()

        # ── Fichier ────────────────────────────────────────────────────────
        file_menu = menubar.addMenu("&Fichier")

        export_clients = QAction("Exporter les &clients (CSV)...", self)
        export_clients.triggered.connect(self.export_clients)
        file_menu.addAction(export_clients)

        export_services = QAction("Exporter les &services (Excel)...", self)
        export_services.setShortcut("Ctrl+E")
        export_services.triggered.connect(self.export_services)
        file_menu.addAction(export_services)

        file_menu.addSeparator()
        logout_action = QAction("&Déconnexion", self)
        logout_action.triggered.connect(self.logout)
        file_menu.addAction(logout_action)

        quit_action = QAction("&Quitter", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        # ── Affichage ──────────────────────────────────────────────────────
        view_menu = menubar.addMenu("&Affichage")
        for label, attr in [
            ("&Tableau de bord", "dashboard_view"),
            ("&Services",        "service_view"),
            ("&Clients",         "client_view"),
            ("&Fournisseurs",    "fournisseur_view"),
        ]:
            a = QAction(label, self)
            a.triggered.connect(
                lambda _, x=attr: self.tabs.setCurrentIndex(self._tab_index(x)))
            view_menu.addAction(a)

        # ── Aide ──────────────────────────────────────────────────────────
        help_menu = menubar.addMenu("&Aide")
        about_action = QAction("À &propos", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def create_toolbar(self):
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        nav_items = [
            ("📊 Tableau de bord", "dashboard_view"),
            ("🖨️ Services",        "service_view"),
            ("👥 Clients",         "client_view"),
            ("🏢 Fournisseurs",    "fournisseur_view"),
        ]
        for label, attr in nav_items:
            btn = QPushButton(label)
            btn.clicked.connect(
                lambda _, x=attr: self.tabs.setCurrentIndex(self._tab_index(x)))
            toolbar.addWidget(btn)

        toolbar.addSeparator()

        btn_new_service = QPushButton("➕ Nouveau service")
        btn_new_service.setStyleSheet(
            "background-color: #27ae60; color: white; font-weight: bold; padding: 5px 10px;")
        btn_new_service.clicked.connect(self.new_service)
        toolbar.addWidget(btn_new_service)

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def new_service(self):
        v = self.service_view
        if v is None:
            return
        self.tabs.setCurrentIndex(self._tab_index("service_view"))
        v.new_service()

    def _save_path(self, titre, nom, filtre):
        EXPORT_DIR.mkdir(parents=True, exist_ok=True)
        path, _ = QFileDialog.getSaveFileName(self, titre, str(EXPORT_DIR / nom), filtre)
        return path

    def export_clients(self):
        stamp = datetime.now().strftime("%Y%m%d")
        path = self._save_path("Exporter les clients", f"clients_{stamp}.csv", "CSV (*.csv)")
        if not path:
            return
        ok, result = export_service.export_clients_csv(path)
        if ok:
            self.statusBar.showMessage(f"Export clients : {result}", 5000)
            QMessageBox.information(self, "Export", f"Clients exportés :\n{result}")
        else:
            QMessageBox.warning(self, "Erreur", f"Export impossible :\n{result}")

    def export_services(self):
        stamp = datetime.now().strftime("%Y%m%d")
        path = self._save_path("Exporter les services", f"services_{stamp}.xlsx",
                               "Excel (*.xlsx)")
        if not path:
            return
        filters = self.service_view.get_filters() if self.service_view else None
        ok, result = export_service.export_services_excel(filters, path)
        if ok:
            self.statusBar.showMessage(f"Export services : {result}", 5000)
            QMessageBox.information(self, "Export", f"Services exportés :\n{result}")
        else:
            QMessageBox.warning(self, "Erreur", f"Export impossible :\n{result}")

    def logout(self):
        reply = QMessageBox.question(self, "Déconnexion",
            "Voulez-vous vous déconnecter ?",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply == QMessageBox.Yes:
            logger.info(f"Déconnexion: {self.user.get('login', '')}")
            self.logout_requested = True
            self.close()

    def show_about(self):
        QMessageBox.about(self, "À propos",
            f"<h2>{APP_TITLE}</h2>"
            f"<p>{COMPANY_NAME} — {COMPANY_SUBTITLE}</p>"
            "<p><b>Fonctionnalités :</b></p>"
            "<ul>"
            "<li>Clients et fournisseurs</li>"
            "<li>Services vendus avec suivi des paiements</li>"
            "<li>Factures PDF et historique des encaissements</li>"
            "<li>Exports Excel / CSV</li>"
            "</ul>"
        )

    def closeEvent(self, event):
        if self.logout_requested:
            event.accept()
            return
        reply = QMessageBox.question(self, "Quitter",
            "Voulez-vous vraiment quitter ?",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply == QMessageBox.Yes:
            db_service.close()
            event.accept()
        else:
            event.ignore()
