"""
Configuration globale de l'application DECOPEINT Gestion.
"""
import os
from pathlib import Path

# Chemins
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
CONFIG_DIR = BASE_DIR / "config"

# Base de données
# mysql : serveur WAMP/XAMPP local ; sqlite : fichier local (poste isolé, tests)
DB_ENGINE = os.getenv("DB_ENGINE", "mysql")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "3306"))
DB_NAME = os.getenv("DB_NAME", "decopeint")
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")  # vide par défaut sous WAMP
DATABASE_PATH = Path(os.getenv("DATABASE_PATH", DATA_DIR / "decopeint.db"))

# Application
APP_NAME = "DECOPEINT Gestion"
APP_VERSION = "1.0"
APP_TITLE = f"{APP_NAME} V{APP_VERSION}"

# Compte administrateur créé au premier lancement
ADMIN_LOGIN = os.getenv("ADMIN_LOGIN", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# Société (en-tête des factures)
COMPANY_NAME = "DECOPEINT"
COMPANY_SUBTITLE = "Services d'Impression & Publicité Professionnelle"
COMPANY_PHONE = "+213 XX XX XX XX"
COMPANY_EMAIL = "contact@decopeint.dz"
COMPANY_ADDRESS = "Alger, Algérie"
COMPANY_WEBSITE = "www.decopeint.dz"

# Monnaie et tolérance de calcul des paiements
CURRENCY = "DZD"
PAYMENT_EPSILON = 0.01
PAYMENT_DELAY_DAYS = 30

# Factures et exports
FACTURES_DIR = Path(os.getenv("FACTURES_DIR", BASE_DIR / "factures"))
EXPORT_DIR = Path(os.getenv("EXPORT_DIR", DATA_DIR / "exports"))

# Formats de date
DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y %H:%M"
DB_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = Path(os.getenv("LOG_FILE", DATA_DIR / "app.log"))
