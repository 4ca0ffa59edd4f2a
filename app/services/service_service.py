"""
Service de gestion des services vendus et de leurs paiements.

Chaque écriture recalcule montant_paye, reste_a_payer et etat_paiement ;
l'ajout d'un paiement et la mise à jour du service se font dans la même
transaction.
"""
import logging
from datetime import date, datetime

from config.settings import DB_DATETIME_FORMAT
from app.services.database_service import db_service
from app.models.service import (
    Service, Paiement, TypeService, StatistiquesServices,
    calculer_etat_paiement, STATUTS_SERVICE, ETATS_PAIEMENT, EN_ATTENTE,
    MODES_PAIEMENT, MODE_PAIEMENT_INITIAL,
)

logger = logging.getLogger(__name__)

SELECT_SERVICES = """
    SELECT
        s.*,
        c.nom as client,
        t.nom_type as type_service
    FROM service s
    JOIN client c ON s.id_client = c.id
    JOIN type_service t ON s.id_type_service = t.id
"""


def _to_montant(valeur, champ):
    """Montant arrondi au centime ; le journal et le service stockent la même valeur."""
    try:
        return round(float(valeur), 2)
    except (TypeError, ValueError):
        raise ValueError(f"Montant invalide pour {champ}: {valeur!r}")


def _to_date(valeur):
    """Accepte date, datetime ou texte 'YYYY-MM-DD'."""
    if isinstance(valeur, datetime):
        return valeur.date()
    if isinstance(valeur, date):
        return valeur
    return datetime.strptime(str(valeur)[:10], '%Y-%m-%d').date()


def _maintenant():
    return datetime.now().strftime(DB_DATETIME_FORMAT)


class ServiceService:
    """Service pour gérer les services vendus aux clients."""

    def __init__(self):
        self.db = db_service

    def get_all(self, filters=None):
        """
        Récupère les services avec filtres optionnels, plus récents d'abord.

        Args:
            filters: Dict avec clés optionnelles: client_id, type_id,
                etat_paiement, statut_service, date_debut, date_fin, search

        Returns:
            List of Service
        """
        try:
            query = SELECT_SERVICES + " WHERE 1=1"
            params = []

            if filters:
                if filters.get('client_id'):
                    query += " AND s.id_client = ?"
                    params.append(filters['client_id'])

                if filters.get('type_id'):
                    query += " AND s.id_type_service = ?"
                    params.append(filters['type_id'])

                if filters.get('etat_paiement'):
                    if filters['etat_paiement'] not in ETATS_PAIEMENT:
                        raise ValueError(f"État de paiement inconnu: {filters['etat_paiement']}")
                    query += " AND s.etat_paiement = ?"
                    params.append(filters['etat_paiement'])

                if filters.get('statut_service'):
                    if filters['statut_service'] not in STATUTS_SERVICE:
                        raise ValueError(f"Statut inconnu: {filters['statut_service']}")
                    query += " AND s.statut_service = ?"
                    params.append(filters['statut_service'])

                date_debut = _to_date(filters['date_debut']) if filters.get('date_debut') else None
                date_fin = _to_date(filters['date_fin']) if filters.get('date_fin') else None
                if date_debut and date_fin and date_debut > date_fin:
                    raise ValueError("La date de début doit précéder la date de fin.")
                if date_debut:
                    query += " AND DATE(s.date_creation) >= ?"
                    params.append(date_debut.isoformat())
                if date_fin:
                    query += " AND DATE(s.date_creation) <= ?"
                    params.append(date_fin.isoformat())

                if filters.get('search'):
                    query += " AND (s.description LIKE ? OR c.nom LIKE ? OR t.nom_type LIKE ?)"
                    search = f"%{filters['search']}%"
                    params.extend([search, search, search])

            query += " ORDER BY s.date_creation DESC, s.id DESC"

            rows = self.db.fetch_all(query, params)
            return [Service.from_dict(row) for row in rows]
        except Exception as e:
            logger.error(f"Erreur récupération services: {e}")
            raise

    def get_by_id(self, service_id):
        """Récupère un service (avec client et type) ou None."""
        try:
            row = self.db.fetch_one(SELECT_SERVICES + " WHERE s.id = ?", (service_id,))
            return Service.from_dict(row) if row else None
        except Exception as e:
            logger.error(f"Erreur récupération service {service_id}: {e}")
            raise

    def create(self, data):
        """
        Crée un service et, si un acompte est versé, la première ligne
        du journal des paiements. Les deux insertions sont atomiques.

        Args:
            data: Dict avec id_client, id_type_service, description,
                prix_total, montant_paye (optionnel), statut_service (optionnel)

        Returns:
            ID du service créé
        """
        try:
            if not data.get('id_client'):
                raise ValueError("Veuillez sélectionner un client.")
            if not data.get('id_type_service'):
                raise ValueError("Veuillez sélectionner un type de service.")

            prix_total = _to_montant(data.get('prix_total'), 'le prix total')
            montant_paye = _to_montant(data.get('montant_paye') or 0, 'le montant payé')
            if prix_total <= 0:
                raise ValueError("Le prix total doit être supérieur à 0.")
            if montant_paye < 0:
                raise ValueError("Le montant payé ne peut pas être négatif.")
            if montant_paye > prix_total:
                raise ValueError("Le montant payé ne peut pas dépasser le prix total.")

            statut = data.get('statut_service') or EN_ATTENTE
            if statut not in STATUTS_SERVICE:
                raise ValueError(f"Statut inconnu: {statut}")

            maintenant = _maintenant()
            with self.db.transaction() as tx:
                service_id = tx.insert('service', {
                    'id_client': data['id_client'],
                    'id_type_service': data['id_type_service'],
                    'description': (data.get('description') or '').strip(),
                    'prix_total': prix_total,
                    'montant_paye': montant_paye,
                    'reste_a_payer': round(prix_total - montant_paye, 2),
                    'etat_paiement': calculer_etat_paiement(montant_paye, prix_total),
                    'statut_service': statut,
                    'date_creation': maintenant,
                })
                if montant_paye > 0:
                    tx.insert('paiement_vente', {
                        'id_service': service_id,
                        'montant': montant_paye,
                        'mode_paiement': MODE_PAIEMENT_INITIAL,
                        'date_paiement': maintenant,
                    })

            logger.info(f"Service créé: {service_id} - client {data['id_client']} - {prix_total:.2f}")
            return service_id
        except Exception as e:
            logger.error(f"Erreur création service: {e}")
            raise

    def enregistrer_paiement(self, service_id, montant, mode_paiement):
        """
        Ajoute un paiement : met à jour le service et le journal en une transaction.

        Returns:
            Service rafraîchi
        """
        try:
            montant = _to_montant(montant, 'le paiement')
            if montant <= 0:
                raise ValueError("Le montant doit être supérieur à 0.")
            if not mode_paiement:
                raise ValueError("Veuillez choisir un mode de paiement.")
            if mode_paiement not in MODES_PAIEMENT:
                raise ValueError(f"Mode de paiement inconnu: {mode_paiement}")

            with self.db.transaction() as tx:
                row = tx.fetch_one(
                    "SELECT prix_total, montant_paye FROM service WHERE id = ?",
                    (service_id,)
                )
                if row is None:
                    raise ValueError(f"Service introuvable: {service_id}")

                prix_total = float(row['prix_total'])
                nouveau_paye = round(float(row['montant_paye']) + montant, 2)
                if nouveau_paye > prix_total:
                    reste = round(prix_total - float(row['montant_paye']), 2)
                    raise ValueError(
                        f"Le paiement dépasse le reste à payer ({reste:,.2f})."
                    )

                tx.execute(
                    """UPDATE service
                       SET montant_paye = ?, reste_a_payer = ?, etat_paiement = ?
                       WHERE id = ?""",
                    (nouveau_paye, round(prix_total - nouveau_paye, 2),
                     calculer_etat_paiement(nouveau_paye, prix_total), service_id)
                )
                tx.insert('paiement_vente', {
                    'id_service': service_id,
                    'montant': montant,
                    'mode_paiement': mode_paiement,
                    'date_paiement': _maintenant(),
                })

            logger.info(f"Paiement enregistré: service {service_id} - {montant:.2f} ({mode_paiement})")
            return self.get_by_id(service_id)
        except Exception as e:
            logger.error(f"Erreur enregistrement paiement service {service_id}: {e}")
            raise

    def update_statut(self, service_id, statut):
        """Change le statut d'avancement. Retourne True si le service existe."""
        try:
            if statut not in STATUTS_SERVICE:
                raise ValueError(f"Statut inconnu: {statut}")
            count = self.db.update('service', {'statut_service': statut}, "id = ?", (service_id,))
            logger.info(f"Statut service {service_id}: {statut}")
            return count > 0
        except Exception as e:
            logger.error(f"Erreur mise à jour statut service {service_id}: {e}")
            raise

    def delete(self, service_id):
        """Supprime les paiements puis le service (même transaction)."""
        try:
            with self.db.transaction() as tx:
                tx.execute("DELETE FROM paiement_vente WHERE id_service = ?", (service_id,))
                count = tx.execute("DELETE FROM service WHERE id = ?", (service_id,)).rowcount
            logger.info(f"Service supprimé: {service_id}")
            return count > 0
        except Exception as e:
            logger.error(f"Erreur suppression service {service_id}: {e}")
            raise

    def get_paiements(self, service_id):
        """Journal des paiements d'un service, plus récents d'abord."""
        try:
            rows = self.db.fetch_all(
                """SELECT * FROM paiement_vente
                   WHERE id_service = ?
                   ORDER BY date_paiement DESC, id DESC""",
                (service_id,)
            )
            return [Paiement.from_dict(row) for row in rows]
        except Exception as e:
            logger.error(f"Erreur récupération paiements service {service_id}: {e}")
            raise

    def get_types(self):
        try:
            rows = self.db.fetch_all("SELECT * FROM type_service ORDER BY nom_type")
            return [TypeService.from_dict(row) for row in rows]
        except Exception as e:
            logger.error(f"Erreur récupération types de service: {e}")
            raise

    def create_type(self, nom_type):
        """Crée un type de service (nom unique)."""
        try:
            nom_type = (nom_type or '').strip()
            if not nom_type:
                raise ValueError("Le nom du type est obligatoire.")
            existing = self.db.fetch_one(
                "SELECT id FROM type_service WHERE nom_type = ?", (nom_type,)
            )
            if existing:
                raise ValueError(f"Le type {nom_type} existe déjà.")
            type_id = self.db.insert('type_service', {'nom_type': nom_type})
            logger.info(f"Type de service créé: {type_id} - {nom_type}")
            return type_id
        except Exception as e:
            logger.error(f"Erreur création type de service: {e}")
            raise

    def get_statistiques(self, services):
        """Totaux de la liste affichée."""
        return StatistiquesServices(services)


# Instance globale
service_service = ServiceService()
