"""
Service de gestion des clients.
"""
import logging
from datetime import datetime

from config.settings import DB_DATETIME_FORMAT
from app.services.database_service import db_service
from app.models.client import Client

logger = logging.getLogger(__name__)

CHAMPS_CLIENT = ('nom', 'telephone', 'email', 'adresse')


def _nettoyer(data):
    """Garde les colonnes connues, sans espaces superflus ; nom obligatoire."""
    propre = {champ: (data.get(champ) or '').strip() for champ in CHAMPS_CLIENT}
    if not propre['nom']:
        raise ValueError("Le nom du client est obligatoire.")
    return propre


class ClientService:
    """Service pour gérer les clients."""

    def __init__(self):
        self.db = db_service

    def get_all(self, filters=None):
        """
        Récupère tous les clients avec leur nombre de services.

        Args:
            filters: Dict avec clés optionnelles: search, avec_services (bool)

        Returns:
            List of client dicts
        """
        try:
            query = """
                SELECT
                    c.*,
                    (SELECT COUNT(*) FROM service WHERE id_client = c.id) as nombre_services
                FROM client c
                WHERE 1=1
            """
            params = []

            if filters:
                if filters.get('search'):
                    query += """ AND (LOWER(c.nom) LIKE ? OR LOWER(c.telephone) LIKE ?
                                 OR LOWER(c.email) LIKE ? OR LOWER(c.adresse) LIKE ?)"""
                    search = f"%{filters['search'].strip().lower()}%"
                    params.extend([search] * 4)

                avec_services = filters.get('avec_services')
                if avec_services is True:
                    query += " AND EXISTS (SELECT 1 FROM service WHERE id_client = c.id)"
                elif avec_services is False:
                    query += " AND NOT EXISTS (SELECT 1 FROM service WHERE id_client = c.id)"

            query += " ORDER BY c.nom"

            return self.db.fetch_all(query, params)
        except Exception as e:
            logger.error(f"Erreur récupération clients: {e}")
            raise

    def get_by_id(self, client_id):
        """
        Récupère un client par ID.

        Returns:
            Client dict ou None
        """
        try:
            return self.db.fetch_one("SELECT * FROM client WHERE id = ?", (client_id,))
        except Exception as e:
            logger.error(f"Erreur récupération client {client_id}: {e}")
            raise

    def create(self, data):
        """
        Crée un nouveau client.

        Returns:
            ID du client créé
        """
        try:
            values = _nettoyer(data)
            values['date_creation'] = datetime.now().strftime(DB_DATETIME_FORMAT)
            client_id = self.db.insert('client', values)
            logger.info(f"Client créé: {client_id} - {values['nom']}")
            return client_id
        except Exception as e:
            logger.error(f"Erreur création client: {e}")
            raise

    def update(self, client_id, data):
        try:
            values = _nettoyer(data)
            self.db.update('client', values, "id = ?", (client_id,))
            logger.info(f"Client mis à jour: {client_id}")
        except Exception as e:
            logger.error(f"Erreur mise à jour client {client_id}: {e}")
            raise

    def delete(self, client_id):
        """Supprime un client s'il ne possède aucun service."""
        try:
            row = self.db.fetch_one(
                "SELECT COUNT(*) as nb FROM service WHERE id_client = ?", (client_id,)
            )
            nb = row['nb'] if row else 0
            if nb:
                return False, f"Impossible de supprimer : ce client possède {nb} service(s)."
            count = self.db.delete('client', "id = ?", (client_id,))
            if not count:
                return False, "Client introuvable"
            logger.info(f"Client supprimé: {client_id}")
            return True, "Client supprimé"
        except Exception as e:
            logger.error(f"Erreur suppression client {client_id}: {e}")
            raise

    def get_services(self, client_id):
        """Services du client, plus récents d'abord."""
        from app.services.service_service import service_service
        return service_service.get_all({'client_id': client_id})

    def get_details(self, client_id):
        """
        Fiche complète du client (factures, fenêtre de détails).

        Returns:
            Client ou None
        """
        try:
            row = self.db.fetch_one(
                """SELECT c.*,
                          (SELECT COUNT(*) FROM service WHERE id_client = c.id) as nombre_services
                   FROM client c WHERE c.id = ?""",
                (client_id,)
            )
            return Client.from_dict(row) if row else None
        except Exception as e:
            logger.error(f"Erreur détails client {client_id}: {e}")
            raise

    def get_stats(self):
        """Nombre total de clients et clients ayant au moins un service."""
        try:
            row = self.db.fetch_one("""
                SELECT
                    COUNT(*) as total,
                    SUM(CASE WHEN EXISTS (SELECT 1 FROM service WHERE id_client = c.id)
                        THEN 1 ELSE 0 END) as avec_services
                FROM client c
            """)
            return {
                'total': int(row['total'] or 0) if row else 0,
                'avec_services': int(row['avec_services'] or 0) if row else 0,
            }
        except Exception as e:
            logger.error(f"Erreur récupération stats clients: {e}")
            raise


# Instance globale
client_service = ClientService()
