import pytest

from app.services.client_service import client_service
from app.services.service_service import service_service


def test_create_nettoie_les_champs():
    client_id = client_service.create({'nom': '  Atlas  ', 'email': ' a@b.dz '})
    client = client_service.get_by_id(client_id)
    assert client['nom'] == 'Atlas'
    assert client['email'] == 'a@b.dz'
    assert client['telephone'] == ''


@pytest.mark.parametrize("nom", ['', '   ', None])
def test_create_nom_obligatoire(nom):
    with pytest.raises(ValueError, match="nom du client"):
        client_service.create({'nom': nom})


def test_update(client_id):
    client_service.update(client_id, {'nom': 'Atlas SARL', 'telephone': '021 00 00 00'})
    client = client_service.get_by_id(client_id)
    assert client['nom'] == 'Atlas SARL'
    assert client['telephone'] == '021 00 00 00'
    with pytest.raises(ValueError):
        client_service.update(client_id, {'nom': ''})


def test_get_all_recherche_et_filtre(client_id, nouveau_service):
    sans_service = client_service.create({'nom': 'Boulangerie Sahara', 'adresse': 'Blida'})
    nouveau_service()

    noms = [c['nom'] for c in client_service.get_all()]
    assert noms == ['Boulangerie Sahara', 'Imprimerie Atlas']

    assert [c['id'] for c in client_service.get_all({'search': 'BLIDA'})] == [sans_service]
    assert [c['id'] for c in client_service.get_all({'search': 'atlas.dz'})] == [client_id]
    assert [c['id'] for c in client_service.get_all({'avec_services': True})] == [client_id]
    assert [c['id'] for c in client_service.get_all({'avec_services': False})] == [sans_service]

    atlas = client_service.get_all({'search': 'atlas'})[0]
    assert atlas['nombre_services'] == 1


def test_delete_refuse_si_services(client_id, nouveau_service):
    nouveau_service()
    ok, message = client_service.delete(client_id)
    assert not ok
    assert "1 service(s)" in message
    assert client_service.get_by_id(client_id) is not None


def test_delete(client_id):
    assert client_service.delete(client_id) == (True, "Client supprimé")
    assert client_service.get_by_id(client_id) is None
    assert client_service.delete(client_id) == (False, "Client introuvable")


def test_get_services(client_id, nouveau_service):
    service_id = nouveau_service()
    services = client_service.get_services(client_id)
    assert [s.id for s in services] == [service_id]
    assert services[0].type_service == 'Impression grand format'


def test_get_details(client_id, nouveau_service):
    nouveau_service()
    client = client_service.get_details(client_id)
    assert client.nom == 'Imprimerie Atlas'
    assert client.a_des_services
    assert "Email: contact@atlas.dz" in client.details_formates()
    assert client_service.get_details(999) is None


def test_get_stats(client_id, nouveau_service):
    assert client_service.get_stats() == {'total': 1, 'avec_services': 0}
    nouveau_service()
    client_service.create({'nom': 'Sahara'})
    assert client_service.get_stats() == {'total': 2, 'avec_services': 1}


def test_get_stats_base_vide():
    assert client_service.get_stats() == {'total': 0, 'avec_services': 0}


def test_service_sur_client_inexistant(type_id):
    with pytest.raises(Exception):
        service_service.create({'id_client': 999, 'id_type_service': type_id,
                                'prix_total': 100})
    assert service_service.get_all() == []
