"""
Point d'entrée de DECOPEINT Gestion
"""
import sys
import os
import logging

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from PyQt5.QtWidgets import QApplication, QDialog, QMessageBox
from PyQt5.QtCore import Qt
from config.settings import APP_TITLE, LOG_FILE, LOG_LEVEL

LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(LOG_FILE, encoding='utf-8'),
    ]
)
logger = logging.getLogger(__name__)

from app.services.database_service import db_service
from app.services.auth_service import auth_service
from app.ui.dialogs.login_dialog import LoginDialog
from app.ui.main_window import MainWindow


def init_database():
    """Ouvre la base (création du schéma) et crée le compte admin si besoin."""
    db_service.get_connection()
    if auth_service.ensure_admin():
        logger.info("✅ Premier lancement : compte administrateur initialisé")


def main():
    try:
        QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
        QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

        app = QApplication(sys.argv)
        app.setApplicationName(APP_TITLE)

        try:
            init_database()
        except Exception as e:
            logger.error(f"Erreur initialisation base: {e}", exc_info=True)
            QMessageBox.critical(None, "Erreur",
                f"Impossible d'initialiser la base de données:\n{e}")
            sys.exit(1)

        # Connexion, puis retour à l'écran de connexion après déconnexion
        while True:
            login = LoginDialog()
            if login.exec_() != QDialog.Accepted:
                break
            window = MainWindow(login.user)
            window.show()
            app.exec_()
            if not window.logout_requested:
                break

        db_service.close()
        sys.exit(0)
    except Exception as e:
        logging.error(f"Erreur lancement : {e}", exc_info=True)
        print(f"ERREUR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
