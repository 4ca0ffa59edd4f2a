"""
Service de gestion des fournisseurs.
"""
import logging
from datetime import datetime

from config.settings import DB_DATETIME_FORMAT
from app.services.database_service import db_service

logger = logging.getLogger(__name__)


class FournisseurService:
    """Service pour gérer les fournisseurs."""

    def __init__(self):
        self.db = db_service

    def get_all(self, filters=None):
        """
        Récupère tous les fournisseurs avec filtres optionnels.

        Args:
            filters: Dict avec clé optionnelle: search

        Returns:
            List of fournisseur dicts
        """
        try:
            query = "SELECT * FROM fournisseur f WHERE 1=1"
            params = []

            if filters and filters.get('search'):
                query += """ AND (LOWER(f.nom) LIKE ? OR LOWER(f.telephone) LIKE ?
                             OR LOWER(f.email) LIKE ? OR LOWER(f.adresse) LIKE ?)"""
                search = f"%{filters['search'].strip().lower()}%"
                params.extend([search] * 4)

            query += " ORDER BY f.nom"

            return self.db.fetch_all(query, params)
        except Exception as e:
            logger.error(f"Erreur récupération fournisseurs: {e}")
            raise

    def get_by_id(self, fournisseur_id):
        """
        Récupère un fournisseur par ID.

        Returns:
            Fournisseur dict ou None
        """
        try:
            return self.db.fetch_one("SELECT * FROM fournisseur WHERE id = ?", (fournisseur_id,))
        except Exception as e:
            logger.error(f"Erreur récupération fournisseur {fournisseur_id}: {e}")
            raise

    def _valider(self, data):
        values = {
            'nom': (data.get('nom') or '').strip(),
            'telephone': (data.get('telephone') or '').strip(),
            'email': (data.get('email') or '').strip(),
            'adresse': (data.get('adresse') or '').strip(),
        }
        if not values['nom']:
            raise ValueError("Le nom du fournisseur est obligatoire.")
        if values['email'] and '@' not in values['email']:
            raise ValueError("Adresse email invalide.")
        return values

    def create(self, data):
        """
        Crée un nouveau fournisseur.

        Returns:
            ID du fournisseur créé
        """
        try:
            values = self._valider(data)
            values['date_creation'] = datetime.now().strftime(DB_DATETIME_FORMAT)
            fournisseur_id = self.db.insert('fournisseur', values)
            logger.info(f"Fournisseur créé: {fournisseur_id} - {values['nom']}")
            return fournisseur_id
        except Exception as e:
            logger.error(f"Erreur création fournisseur: {e}")
            raise

    def update(self, fournisseur_id, data):
        try:
            self.db.update('fournisseur', self._valider(data), "id = ?", (fournisseur_id,))
            logger.info(f"Fournisseur mis à jour: {fournisseur_id}")
        except Exception as e:
            logger.error(f"Erreur mise à jour fournisseur {fournisseur_id}: {e}")
            raise

    def delete(self, fournisseur_id):
        """Supprime un fournisseur."""
        try:
            count = self.db.delete('fournisseur', "id = ?", (fournisseur_id,))
            if not count:
                return False, "Fournisseur introuvable"
            logger.info(f"Fournisseur supprimé: {fournisseur_id}")
            return True, "Fournisseur supprimé"
        except Exception as e:
            logger.error(f"Erreur suppression fournisseur {fournisseur_id}: {e}")
            return False, str(e)

    def get_stats(self):
        """Récupère les statistiques des fournisseurs."""
        try:
            row = self.db.fetch_one("""
                SELECT
                    COUNT(*) as total,
                    SUM(CASE WHEN email IS NOT NULL AND email <> '' THEN 1 ELSE 0 END) as avec_email,
                    SUM(CASE WHEN telephone IS NOT NULL AND telephone <> '' THEN 1 ELSE 0 END) as avec_telephone
                FROM fournisseur
            """)
            return {key: int(row[key] or 0) for key in ('total', 'avec_email', 'avec_telephone')}
        except Exception as e:
            logger.error(f'Erreur récupération stats fournisseurs: {e}')
            raise


# Instance globale
fournisseur_service = FournisseurService()
