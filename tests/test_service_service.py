from datetime import date, timedelta

import pytest

from app.models.service import (
    NON_PAYE, PARTIELLEMENT_PAYE, PAYE, EN_ATTENTE, EN_COURS, TERMINE,
    MODE_PAIEMENT_INITIAL,
)
from app.services.database_service import Transaction, db_service
from app.services.client_service import client_service
from app.services.service_service import service_service


def _somme_journal(service_id):
    return round(sum(p.montant for p in service_service.get_paiements(service_id)), 2)


def test_create_sans_paiement_initial(nouveau_service):
    service_id = nouveau_service()
    service = service_service.get_by_id(service_id)

    assert service.client == 'Imprimerie Atlas'
    assert service.type_service == 'Impression grand format'
    assert service.montant_paye == 0
    assert service.reste_a_payer == 10000
    assert service.etat_paiement == NON_PAYE
    assert service.statut_service == EN_ATTENTE
    assert service_service.get_paiements(service_id) == []


def test_create_avec_paiement_initial(nouveau_service):
    service_id = nouveau_service(montant_paye=4000, statut_service=EN_COURS)
    service = service_service.get_by_id(service_id)

    assert service.etat_paiement == PARTIELLEMENT_PAYE
    assert service.reste_a_payer == 6000
    paiements = service_service.get_paiements(service_id)
    assert len(paiements) == 1
    assert paiements[0].montant == 4000
    assert paiements[0].mode_paiement == MODE_PAIEMENT_INITIAL


def test_create_paye_en_totalite(nouveau_service):
    service = service_service.get_by_id(nouveau_service(montant_paye=10000))
    assert service.etat_paiement == PAYE
    assert service.est_paye


@pytest.mark.parametrize("overrides", [
    {'prix_total': 0},
    {'prix_total': -50},
    {'montant_paye': -1},
    {'montant_paye': 10001},
    {'montant_paye': 10000.01},
    {'statut_service': 'LIVRE'},
    {'id_client': None},
    {'id_type_service': None},
    {'prix_total': 'abc'},
])
def test_create_refuse_donnees_invalides(nouveau_service, overrides):
    with pytest.raises(ValueError):
        nouveau_service(**overrides)
    assert service_service.get_all() == []


def test_create_annule_si_journal_echoue(nouveau_service, monkeypatch):
    insert = Transaction.insert

    def insert_en_echec(self, table, data):
        if table == 'paiement_vente':
            raise RuntimeError("disque plein")
        return insert(self, table, data)

    monkeypatch.setattr(Transaction, 'insert', insert_en_echec)
    with pytest.raises(RuntimeError):
        nouveau_service(montant_paye=2000)

    assert db_service.fetch_one("SELECT COUNT(*) as nb FROM service")['nb'] == 0
    assert db_service.fetch_one("SELECT COUNT(*) as nb FROM paiement_vente")['nb'] == 0


def test_enregistrer_paiement_met_a_jour_le_service(nouveau_service):
    service_id = nouveau_service(montant_paye=1000)

    service = service_service.enregistrer_paiement(service_id, 3000, 'Espèces')
    assert service.montant_paye == 4000
    assert service.reste_a_payer == 6000
    assert service.etat_paiement == PARTIELLEMENT_PAYE

    service = service_service.enregistrer_paiement(service_id, 6000, 'Virement')
    assert service.montant_paye == 10000
    assert service.reste_a_payer == 0
    assert service.etat_paiement == PAYE
    assert _somme_journal(service_id) == service.montant_paye


def test_paiements_plus_recents_en_premier(nouveau_service):
    service_id = nouveau_service(montant_paye=1000)
    service_service.enregistrer_paiement(service_id, 2000, 'Chèque')

    modes = [p.mode_paiement for p in service_service.get_paiements(service_id)]
    assert modes == ['Chèque', MODE_PAIEMENT_INITIAL]


@pytest.mark.parametrize("montant,mode", [
    (0, 'Espèces'),
    (-100, 'Espèces'),
    (9500, 'Espèces'),
    (100, ''),
    (100, 'Bitcoin'),
])
def test_enregistrer_paiement_refuse(nouveau_service, montant, mode):
    service_id = nouveau_service(montant_paye=1000)

    with pytest.raises(ValueError):
        service_service.enregistrer_paiement(service_id, montant, mode)

    service = service_service.get_by_id(service_id)
    assert service.montant_paye == 1000
    assert len(service_service.get_paiements(service_id)) == 1


def test_enregistrer_paiement_service_inconnu():
    with pytest.raises(ValueError, match="Service introuvable"):
        service_service.enregistrer_paiement(999, 100, 'Espèces')


def test_update_statut(nouveau_service):
    service_id = nouveau_service()
    assert service_service.update_statut(service_id, TERMINE)
    assert service_service.get_by_id(service_id).statut_service == TERMINE
    assert not service_service.update_statut(999, TERMINE)
    with pytest.raises(ValueError):
        service_service.update_statut(service_id, 'ANNULE')


def test_delete_supprime_le_journal(nouveau_service):
    service_id = nouveau_service(montant_paye=500)
    service_service.enregistrer_paiement(service_id, 500, 'Espèces')

    assert service_service.delete(service_id)
    assert service_service.get_by_id(service_id) is None
    assert db_service.fetch_one(
        "SELECT COUNT(*) as nb FROM paiement_vente WHERE id_service = ?", (service_id,)
    )['nb'] == 0
    assert not service_service.delete(service_id)


def test_get_all_filtres(nouveau_service, client_id, type_id):
    autre_client = client_service.create({'nom': 'Boulangerie Sahara'})
    autre_type = service_service.create_type('Enseigne lumineuse')
    s1 = nouveau_service(montant_paye=10000, statut_service=TERMINE)
    s2 = nouveau_service(id_client=autre_client, description='Flyers A5')
    s3 = nouveau_service(id_type_service=autre_type, montant_paye=500)

    def ids(filters):
        return {s.id for s in service_service.get_all(filters)}

    assert ids(None) == {s1, s2, s3}
    assert ids({'client_id': autre_client}) == {s2}
    assert ids({'type_id': autre_type}) == {s3}
    assert ids({'etat_paiement': PAYE}) == {s1}
    assert ids({'etat_paiement': PARTIELLEMENT_PAYE}) == {s3}
    assert ids({'statut_service': TERMINE}) == {s1}
    assert ids({'search': 'flyers'}) == {s2}
    assert ids({'search': 'Sahara'}) == {s2}
    assert ids({'search': 'lumineuse'}) == {s3}


def test_get_all_plus_recents_en_premier(nouveau_service):
    premier = nouveau_service()
    second = nouveau_service()
    assert [s.id for s in service_service.get_all()] == [second, premier]


def test_get_all_periode(nouveau_service):
    service_id = nouveau_service()
    aujourd_hui = date.today()
    hier = aujourd_hui - timedelta(days=1)

    assert [s.id for s in service_service.get_all(
        {'date_debut': aujourd_hui, 'date_fin': aujourd_hui})] == [service_id]
    assert service_service.get_all({'date_fin': hier}) == []
    assert [s.id for s in service_service.get_all(
        {'date_debut': hier.isoformat()})] == [service_id]


def test_get_all_periode_inversee():
    aujourd_hui = date.today()
    with pytest.raises(ValueError, match="date de début"):
        service_service.get_all({
            'date_debut': aujourd_hui,
            'date_fin': aujourd_hui - timedelta(days=3),
        })


def test_get_all_filtre_inconnu():
    with pytest.raises(ValueError):
        service_service.get_all({'etat_paiement': 'REMBOURSE'})


def test_types_de_service(type_id):
    service_service.create_type('  Carte de visite ')
    noms = [t.nom_type for t in service_service.get_types()]
    assert noms == ['Carte de visite', 'Impression grand format']

    with pytest.raises(ValueError):
        service_service.create_type('Impression grand format')
    with pytest.raises(ValueError):
        service_service.create_type('   ')


def test_statistiques_liste_filtree(nouveau_service):
    nouveau_service(prix_total=1000, montant_paye=1000)
    nouveau_service(prix_total=3000, montant_paye=500)

    stats = service_service.get_statistiques(service_service.get_all())
    assert stats.nombre_services == 2
    assert stats.total_montant == 4000
    assert stats.total_paye == 1500
    assert stats.total_reste == 2500

    stats = service_service.get_statistiques(
        service_service.get_all({'etat_paiement': PAYE}))
    assert stats.nombre_services == 1
    assert stats.pourcentage_paye == 100


def test_montants_arrondis_au_centime(nouveau_service):
    service_id = nouveau_service(prix_total=100, montant_paye=33.333)
    service = service_service.enregistrer_paiement(service_id, 66.674, 'Carte')

    assert service.montant_paye == 100
    assert service.reste_a_payer == 0
    assert service.etat_paiement == PAYE
    assert [p.montant for p in service_service.get_paiements(service_id)] == [66.67, 33.33]
    assert _somme_journal(service_id) == service.montant_paye


def test_paiement_inferieur_au_centime_refuse(nouveau_service):
    service_id = nouveau_service(prix_total=100)
    with pytest.raises(ValueError, match="supérieur à 0"):
        service_service.enregistrer_paiement(service_id, 0.004, 'Espèces')

    service = service_service.get_by_id(service_id)
    assert service.montant_paye == 0
    assert service.etat_paiement == NON_PAYE
    assert service_service.get_paiements(service_id) == []


def test_paiement_jamais_au_dela_du_prix(nouveau_service):
    service_id = nouveau_service(prix_total=100, montant_paye=60)
    with pytest.raises(ValueError, match="reste à payer"):
        service_service.enregistrer_paiement(service_id, 40.01, 'Espèces')

    service = service_service.enregistrer_paiement(service_id, 40, 'Espèces')
    assert service.montant_paye == service.prix_total
    assert service.reste_a_payer == 0


def test_paiement_annule_si_journal_echoue(nouveau_service, monkeypatch):
    service_id = nouveau_service(montant_paye=1000)
    insert = Transaction.insert

    def insert_en_echec(self, table, data):
        if table == 'paiement_vente':
            raise RuntimeError("disque plein")
        return insert(self, table, data)

    monkeypatch.setattr(Transaction, 'insert', insert_en_echec)
    with pytest.raises(RuntimeError):
        service_service.enregistrer_paiement(service_id, 2000, 'Espèces')
    monkeypatch.undo()

    service = service_service.get_by_id(service_id)
    assert service.montant_paye == 1000
    assert service.reste_a_payer == 9000
    assert service.etat_paiement == PARTIELLEMENT_PAYE
    assert _somme_journal(service_id) == 1000


def test_delete_annule_si_suppression_echoue(nouveau_service, monkeypatch):
    service_id = nouveau_service(montant_paye=500)
    service_service.enregistrer_paiement(service_id, 500, 'Chèque')
    execute = Transaction.execute

    def execute_en_echec(self, query, params=None):
        if query.startswith("DELETE FROM service"):
            raise RuntimeError("verrou")
        return execute(self, query, params)

    monkeypatch.setattr(Transaction, 'execute', execute_en_echec)
    with pytest.raises(RuntimeError):
        service_service.delete(service_id)
    monkeypatch.undo()

    assert service_service.get_by_id(service_id) is not None
    assert len(service_service.get_paiements(service_id)) == 2
