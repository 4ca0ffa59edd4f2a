from app.models.service import TERMINE
from app.services.client_service import client_service
from app.services.dashboard_service import dashboard_service
from app.services.service_service import service_service


def test_kpis_base_vide():
    kpis = dashboard_service.get_kpis()
    assert kpis['nb_services'] == 0
    assert kpis['total_encaisse'] == 0
    assert kpis['taux_termines'] == 0
    assert kpis['taux_paiement'] == 0


def test_kpis(nouveau_service):
    client_service.create({'nom': 'Client sans commande'})
    s1 = nouveau_service(prix_total=6000, montant_paye=6000)
    s2 = nouveau_service(prix_total=4000, montant_paye=1000)
    service_service.update_statut(s1, TERMINE)
    service_service.enregistrer_paiement(s2, 1000, 'Espèces')

    kpis = dashboard_service.get_kpis()
    assert kpis['nb_services'] == 2
    assert kpis['montant_total'] == 10000
    assert kpis['total_encaisse'] == 8000
    assert kpis['total_du'] == 2000
    assert kpis['clients_actifs'] == 1
    assert kpis['taux_termines'] == 50
    assert kpis['taux_paiement'] == 80


def test_derniers_paiements(nouveau_service):
    service_id = nouveau_service(montant_paye=1000)
    for montant in (500, 700, 900):
        service_service.enregistrer_paiement(service_id, montant, 'Espèces')

    paiements = dashboard_service.get_derniers_paiements(limit=2)
    assert [p.montant for p in paiements] == [900, 700]
    assert paiements[0].client == 'Imprimerie Atlas'
    assert paiements[0].type_service == 'Impression grand format'
