from datetime import datetime

import pytest

from app.models.client import Client
from app.models.service import (
    Service, Paiement, StatistiquesServices, calculer_etat_paiement,
    pourcentage_paye, couleur_progression, parse_datetime, format_montant,
    NON_PAYE, PARTIELLEMENT_PAYE, PAYE,
)


@pytest.mark.parametrize("paye,total,attendu", [
    (1000, 1000, PAYE),
    (999.995, 1000, PAYE),
    (0, 1000, NON_PAYE),
    (400, 1000, PARTIELLEMENT_PAYE),
    (999.5, 1000, PARTIELLEMENT_PAYE),
])
def test_calculer_etat_paiement(paye, total, attendu):
    assert calculer_etat_paiement(paye, total) == attendu


def test_pourcentage_paye_total_nul():
    assert pourcentage_paye(100, 0) == 0.0
    assert pourcentage_paye(250, 1000) == 25.0


@pytest.mark.parametrize("pct,couleur", [
    (100, '#2ecc71'),
    (85, '#f39c12'),
    (50, '#e67e22'),
    (10, '#e74c3c'),
])
def test_couleur_progression(pct, couleur):
    assert couleur_progression(pct) == couleur


def test_parse_datetime():
    assert parse_datetime(None) is None
    assert parse_datetime('') is None
    assert parse_datetime('2026-10-19 14:30:00') == datetime(2026, 10, 19, 14, 30)


def test_format_montant():
    assert format_montant(1234.5) == '1,234.50'
    assert format_montant(1234.5, devise=True) == '1,234.50 DZD'
    assert format_montant(None) == '0.00'


def test_service_depuis_ligne():
    service = Service.from_dict({
        'id': 42, 'id_client': 1, 'id_type_service': 2,
        'client': 'Atlas', 'type_service': 'Enseigne',
        'prix_total': 5000, 'montant_paye': 5000, 'reste_a_payer': 0,
        'etat_paiement': PAYE, 'statut_service': 'TERMINE',
        'date_creation': '2026-10-19 09:15:00',
    })
    assert service.numero_facture == '000042'
    assert service.est_paye
    assert service.statut_label == 'Terminé'
    assert service.date_formatee == '19/10/2026 09:15'
    assert service.pourcentage_paye == 100


def test_service_reste_calcule_par_defaut():
    service = Service(prix_total=800, montant_paye=300)
    assert service.reste_a_payer == 500
    assert not service.est_paye


def test_paiement_str():
    paiement = Paiement(montant=1500, mode_paiement='Espèces',
                        date_paiement='2026-10-01 10:00:00')
    assert str(paiement) == '01/10/2026 1,500.00 DZD (Espèces)'


def test_statistiques_services():
    services = [
        Service(prix_total=1000, montant_paye=1000),
        Service(prix_total=3000, montant_paye=1000),
    ]
    stats = StatistiquesServices(services)
    assert stats.nombre_services == 2
    assert stats.total_montant == 4000
    assert stats.total_paye == 2000
    assert stats.total_reste == 2000
    assert stats.pourcentage_paye == 50


def test_statistiques_liste_vide():
    stats = StatistiquesServices([])
    assert stats.nombre_services == 0
    assert stats.pourcentage_paye == 0.0


def test_client_details_formates():
    client = Client(nom='Atlas', telephone='0550', adresse='Oran')
    assert client.details_formates() == "Atlas\nTél: 0550\nAdresse: Oran"
    assert Client().details_formates() == 'N/A'


def test_client_correspond():
    client = Client(nom='Atlas', email='contact@atlas.dz')
    assert client.correspond('ATLAS')
    assert client.correspond('contact@')
    assert client.correspond('')
    assert not client.correspond('sahara')
