"""
Indicateurs du tableau de bord.
"""
import logging

from app.services.database_service import db_service
from app.models.service import Paiement, pourcentage_paye

logger = logging.getLogger(__name__)


class DashboardService:
    """Calcule les KPI affichés sur l'onglet Tableau de bord."""

    def __init__(self):
        self.db = db_service

    def get_kpis(self):
        """
        Returns:
            Dict: nb_services, total_encaisse, total_du, montant_total,
            clients_actifs, taux_termines, taux_paiement
        """
        try:
            services = self.db.fetch_one("""
                SELECT
                    COUNT(*) as nb_services,
                    COALESCE(SUM(prix_total), 0) as montant_total,
                    COALESCE(SUM(reste_a_payer), 0) as total_du,
                    SUM(CASE WHEN statut_service = 'TERMINE' THEN 1 ELSE 0 END) as nb_termines,
                    COUNT(DISTINCT id_client) as clients_actifs
                FROM service
            """)
            encaisse = self.db.fetch_one(
                "SELECT COALESCE(SUM(montant), 0) as total FROM paiement_vente"
            )

            nb_services = int(services['nb_services'] or 0)
            montant_total = float(services['montant_total'] or 0)
            total_encaisse = float(encaisse['total'] or 0)
            nb_termines = int(services['nb_termines'] or 0)
            return {
                'nb_services': nb_services,
                'montant_total': montant_total,
                'total_encaisse': total_encaisse,
                'total_du': float(services['total_du'] or 0),
                'clients_actifs': int(services['clients_actifs'] or 0),
                'taux_termines': nb_termines / nb_services * 100 if nb_services else 0.0,
                'taux_paiement': pourcentage_paye(total_encaisse, montant_total),
            }
        except Exception as e:
            logger.error(f"Erreur calcul KPI tableau de bord: {e}")
            raise

    def get_derniers_paiements(self, limit=10):
        """Derniers paiements avec client et type de service."""
        try:
            rows = self.db.fetch_all("""
                SELECT p.*, c.nom as client, t.nom_type as type_service
                FROM paiement_vente p
                JOIN service s ON p.id_service = s.id
                JOIN client c ON s.id_client = c.id
                JOIN type_service t ON s.id_type_service = t.id
                ORDER BY p.date_paiement DESC, p.id DESC
                LIMIT ?
            """, (int(limit),))
            result = []
            for row in rows:
                paiement = Paiement.from_dict(row)
                paiement.client = row['client']
                paiement.type_service = row['type_service']
                result.append(paiement)
            return result
        except Exception as e:
            logger.error(f"Erreur récupération derniers paiements: {e}")
            raise


# Instance globale
dashboard_service = DashboardService()
