"""
Authentification des utilisateurs (table utilisateurs, mots de passe bcrypt).
"""
import logging
from datetime import datetime

import bcrypt

from config import settings
from app.services.database_service import db_service

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


class AuthService:
    def __init__(self):
        self.db = db_service

    # ── COMPTE ADMIN ─────────────────────────────────────────

    def ensure_admin(self):
        """Crée le compte administrateur si aucun utilisateur n'existe."""
        row = self.db.fetch_one("SELECT COUNT(*) as nb FROM utilisateurs")
        if row and row['nb']:
            return False
        self.db.insert('utilisateurs', {
            'login': settings.ADMIN_LOGIN,
            'mot_de_passe': hash_password(settings.ADMIN_PASSWORD),
            'nom': 'Administrateur',
            'actif': 1,
            'date_creation': datetime.now().strftime(settings.DB_DATETIME_FORMAT),
        })
        logger.info(f"Compte administrateur créé: {settings.ADMIN_LOGIN}")
        return True

    # ── LOGIN ────────────────────────────────────────────────

    def authentifier(self, login: str, password: str):
        """
        Vérifie les identifiants.

        Returns:
            dict (id, login, nom) si valides, None sinon
        """
        login = (login or '').strip()
        if not login or not password:
            raise ValueError("Veuillez saisir le nom d'utilisateur et le mot de passe.")

        user = self.db.fetch_one(
            "SELECT id, login, nom, mot_de_passe, actif FROM utilisateurs WHERE login = ?",
            (login,)
        )
        if not user or not user.get('actif'):
            logger.warning(f"Connexion refusée: {login}")
            return None

        stored_hash = user['mot_de_passe']
        if isinstance(stored_hash, str):
            stored_hash = stored_hash.encode('utf-8')

        if not bcrypt.checkpw(password.encode('utf-8'), stored_hash):
            logger.warning(f"Mot de passe incorrect: {login}")
            return None

        logger.info(f"Utilisateur connecté: {login}")
        return {k: user[k] for k in ['id', 'login', 'nom']}

    # ── UTILISATEURS ─────────────────────────────────────────

    def create_user(self, login: str, password: str, nom: str = ''):
        login = (login or '').strip()
        if not login:
            raise ValueError("Le nom d'utilisateur est obligatoire")
        if len(password or '') < MIN_PASSWORD_LENGTH:
            raise ValueError('Le mot de passe doit contenir au moins 8 caractères')
        if self.db.fetch_one("SELECT id FROM utilisateurs WHERE login = ?", (login,)):
            raise ValueError(f"L'utilisateur {login} existe déjà")
        user_id = self.db.insert('utilisateurs', {
            'login': login,
            'mot_de_passe': hash_password(password),
            'nom': nom,
            'actif': 1,
            'date_creation': datetime.now().strftime(settings.DB_DATETIME_FORMAT),
        })
        logger.info(f"Utilisateur créé: {user_id} - {login}")
        return user_id


auth_service = AuthService()
