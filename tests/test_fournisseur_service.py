import pytest

from app.services.fournisseur_service import fournisseur_service


def _create(**overrides):
    data = {'nom': 'Papeterie Nord', 'telephone': '0661 11 22 33',
            'email': 'ventes@papnord.dz', 'adresse': 'Alger'}
    data.update(overrides)
    return fournisseur_service.create(data)


def test_crud():
    fournisseur_id = _create()
    assert fournisseur_service.get_by_id(fournisseur_id)['nom'] == 'Papeterie Nord'

    fournisseur_service.update(fournisseur_id, {'nom': 'Papeterie du Nord'})
    fournisseur = fournisseur_service.get_by_id(fournisseur_id)
    assert fournisseur['nom'] == 'Papeterie du Nord'
    assert fournisseur['email'] == ''

    assert fournisseur_service.delete(fournisseur_id) == (True, "Fournisseur supprimé")
    assert fournisseur_service.get_by_id(fournisseur_id) is None
    assert fournisseur_service.delete(fournisseur_id) == (False, "Fournisseur introuvable")


@pytest.mark.parametrize("overrides", [{'nom': ''}, {'email': 'pas-un-email'}])
def test_validation(overrides):
    with pytest.raises(ValueError):
        _create(**overrides)


def test_recherche_et_tri():
    _create(nom='Encres Sud', email='', adresse='Ouargla')
    _create()
    assert [f['nom'] for f in fournisseur_service.get_all()] == ['Encres Sud', 'Papeterie Nord']
    assert [f['nom'] for f in fournisseur_service.get_all({'search': 'ouargla'})] == ['Encres Sud']
    assert fournisseur_service.get_all({'search': 'introuvable'}) == []


def test_get_stats():
    _create()
    _create(nom='Encres Sud', email='', telephone='')
    assert fournisseur_service.get_stats() == {
        'total': 2, 'avec_email': 1, 'avec_telephone': 1,
    }
