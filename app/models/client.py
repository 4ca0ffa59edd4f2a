"""
Modèle Client.
"""
from app.models.service import parse_datetime


class Client:
    """Modèle représentant un client de l'agence."""

    def __init__(self, id=None, nom='', telephone='', email='', adresse='',
                 nombre_services=0, date_creation=None):
        self.id = id
        self.nom = nom
        self.telephone = telephone
        self.email = email
        self.adresse = adresse
        self.nombre_services = nombre_services
        self.date_creation = parse_datetime(date_creation)

    def to_dict(self):
        """Convertit le client en dictionnaire (colonnes de la table)."""
        return {
            'id': self.id,
            'nom': self.nom,
            'telephone': self.telephone,
            'email': self.email,
            'adresse': self.adresse,
        }

    @classmethod
    def from_dict(cls, data):
        """Crée un Client depuis un dictionnaire."""
        return cls(
            id=data.get('id'),
            nom=data.get('nom', ''),
            telephone=data.get('telephone') or '',
            email=data.get('email') or '',
            adresse=data.get('adresse') or '',
            nombre_services=data.get('nombre_services') or 0,
            date_creation=data.get('date_creation'),
        )

    def correspond(self, texte):
        """Recherche insensible à la casse sur tous les champs de contact."""
        texte = (texte or '').strip().lower()
        if not texte:
            return True
        return any(texte in (champ or '').lower()
                   for champ in (self.nom, self.telephone, self.email, self.adresse))

    def details_formates(self):
        """Bloc de coordonnées (fiche client, factures)."""
        lignes = [self.nom or 'N/A']
        if self.telephone:
            lignes.append(f"Tél: {self.telephone}")
        if self.email:
            lignes.append(f"Email: {self.email}")
        if self.adresse:
            lignes.append(f"Adresse: {self.adresse}")
        return "\n".join(lignes)

    @property
    def a_des_services(self):
        return self.nombre_services > 0

    def __str__(self):
        return self.nom
