"""
Modèles Service (vente), TypeService et Paiement.

Règle de calcul de l'état de paiement : l'état n'est jamais saisi,
il est recalculé à partir du montant payé et du prix total.
"""
from datetime import date, datetime

from config.settings import PAYMENT_EPSILON, DATE_FORMAT, DATETIME_FORMAT, CURRENCY

# États de paiement (dérivés)
NON_PAYE = 'NON_PAYE'
PARTIELLEMENT_PAYE = 'PARTIELLEMENT_PAYE'
PAYE = 'PAYE'
ETATS_PAIEMENT = (NON_PAYE, PARTIELLEMENT_PAYE, PAYE)

# Statuts d'avancement du service
EN_ATTENTE = 'EN_ATTENTE'
EN_COURS = 'EN_COURS'
TERMINE = 'TERMINE'
STATUTS_SERVICE = (EN_ATTENTE, EN_COURS, TERMINE)

STATUT_LABELS = {
    EN_ATTENTE: 'En attente',
    EN_COURS: 'En cours',
    TERMINE: 'Terminé',
}

ETAT_LABELS = {
    NON_PAYE: 'Non payé',
    PARTIELLEMENT_PAYE: 'Partiellement payé',
    PAYE: 'Payé',
}

MODE_PAIEMENT_INITIAL = 'Paiement initial'
MODES_PAIEMENT = ('Espèces', 'Chèque', 'Virement', 'Carte', MODE_PAIEMENT_INITIAL)


def calculer_etat_paiement(paye, total):
    """PAYE si paye ≈ total (à 0.01 près), PARTIELLEMENT_PAYE si paye > 0, sinon NON_PAYE."""
    if abs(paye - total) < PAYMENT_EPSILON:
        return PAYE
    if paye > 0:
        return PARTIELLEMENT_PAYE
    return NON_PAYE


def pourcentage_paye(paye, total):
    """Part payée en pourcentage (0 si le total est nul)."""
    if not total:
        return 0.0
    return paye / total * 100


def couleur_progression(pourcentage):
    """Couleur de la barre de progression des paiements."""
    if pourcentage >= 100:
        return '#2ecc71'
    if pourcentage >= 70:
        return '#f39c12'
    if pourcentage >= 30:
        return '#e67e22'
    return '#e74c3c'


def parse_datetime(value):
    """Normalise une date lue en base (datetime MySQL ou texte SQLite)."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def format_montant(montant, decimales=2, devise=False):
    """1234.5 -> '1,234.50' (ou '1,234.50 DZD')."""
    texte = f"{float(montant or 0):,.{decimales}f}"
    return f"{texte} {CURRENCY}" if devise else texte


class TypeService:
    """Modèle représentant un type de service (impression, enseigne...)."""

    def __init__(self, id=None, nom_type=''):
        self.id = id
        self.nom_type = nom_type

    @classmethod
    def from_dict(cls, data):
        return cls(id=data.get('id'), nom_type=data.get('nom_type', ''))

    def __str__(self):
        return self.nom_type


class Service:
    """Modèle représentant un service vendu à un client."""

    def __init__(self, id=None, id_client=None, id_type_service=None, client='',
                 type_service='', description='', prix_total=0.0, montant_paye=0.0,
                 reste_a_payer=None, etat_paiement=NON_PAYE, statut_service=EN_ATTENTE,
                 date_creation=None):
        self.id = id
        self.id_client = id_client
        self.id_type_service = id_type_service
        self.client = client
        self.type_service = type_service
        self.description = description
        self.prix_total = float(prix_total or 0)
        self.montant_paye = float(montant_paye or 0)
        if reste_a_payer is None:
            reste_a_payer = self.prix_total - self.montant_paye
        self.reste_a_payer = float(reste_a_payer)
        self.etat_paiement = etat_paiement
        self.statut_service = statut_service
        self.date_creation = parse_datetime(date_creation)

    def to_dict(self):
        """Convertit le service en dictionnaire."""
        return {
            'id': self.id,
            'id_client': self.id_client,
            'id_type_service': self.id_type_service,
            'client': self.client,
            'type_service': self.type_service,
            'description': self.description,
            'prix_total': self.prix_total,
            'montant_paye': self.montant_paye,
            'reste_a_payer': self.reste_a_payer,
            'etat_paiement': self.etat_paiement,
            'statut_service': self.statut_service,
            'date_creation': self.date_creation,
        }

    @classmethod
    def from_dict(cls, data):
        """Crée un Service depuis une ligne de la requête de liste."""
        return cls(
            id=data.get('id'),
            id_client=data.get('id_client'),
            id_type_service=data.get('id_type_service'),
            client=data.get('client', ''),
            type_service=data.get('type_service', ''),
            description=data.get('description') or '',
            prix_total=data.get('prix_total'),
            montant_paye=data.get('montant_paye'),
            reste_a_payer=data.get('reste_a_payer'),
            etat_paiement=data.get('etat_paiement') or NON_PAYE,
            statut_service=data.get('statut_service') or EN_ATTENTE,
            date_creation=data.get('date_creation'),
        )

    @property
    def numero_facture(self):
        return f"{self.id:06d}"

    @property
    def est_paye(self):
        return self.reste_a_payer < PAYMENT_EPSILON

    @property
    def pourcentage_paye(self):
        return pourcentage_paye(self.montant_paye, self.prix_total)

    @property
    def statut_label(self):
        return STATUT_LABELS.get(self.statut_service, self.statut_service)

    @property
    def date_formatee(self):
        return self.date_creation.strftime(DATETIME_FORMAT) if self.date_creation else ''

    def __str__(self):
        return f"#{self.id} {self.type_service} - {self.client}"


class Paiement:
    """Ligne du journal des paiements (paiement_vente)."""

    def __init__(self, id=None, id_service=None, montant=0.0, mode_paiement='',
                 date_paiement=None):
        self.id = id
        self.id_service = id_service
        self.montant = float(montant or 0)
        self.mode_paiement = mode_paiement
        self.date_paiement = parse_datetime(date_paiement)

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get('id'),
            id_service=data.get('id_service'),
            montant=data.get('montant'),
            mode_paiement=data.get('mode_paiement', ''),
            date_paiement=data.get('date_paiement'),
        )

    @property
    def date_formatee(self):
        return self.date_paiement.strftime(DATETIME_FORMAT) if self.date_paiement else ''

    def __str__(self):
        jour = self.date_paiement.strftime(DATE_FORMAT) if self.date_paiement else '?'
        return f"{jour} {format_montant(self.montant, devise=True)} ({self.mode_paiement})"


class StatistiquesServices:
    """Totaux d'une liste de services (montant, payé, reste, avancement)."""

    def __init__(self, services):
        services = list(services)
        self.total_montant = sum(s.prix_total for s in services)
        self.total_paye = sum(s.montant_paye for s in services)
        self.total_reste = sum(s.reste_a_payer for s in services)
        self.nombre_services = len(services)

    @property
    def pourcentage_paye(self):
        """Avancement global des paiements (0-100)."""
        return pourcentage_paye(self.total_paye, self.total_montant)
