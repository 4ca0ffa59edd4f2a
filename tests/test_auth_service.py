import pytest

from config import settings
from app.services.auth_service import auth_service


def test_ensure_admin_une_seule_fois():
    assert auth_service.ensure_admin()
    assert not auth_service.ensure_admin()
    user = auth_service.authentifier(settings.ADMIN_LOGIN, settings.ADMIN_PASSWORD)
    assert user['login'] == settings.ADMIN_LOGIN
    assert set(user) == {'id', 'login', 'nom'}


def test_authentifier_mauvais_identifiants():
    auth_service.ensure_admin()
    assert auth_service.authentifier(settings.ADMIN_LOGIN, 'mauvais-mot') is None
    assert auth_service.authentifier('inconnu', 'peu-importe') is None


@pytest.mark.parametrize("login,password", [('', 'x'), ('admin', ''), ('  ', 'x')])
def test_authentifier_champs_vides(login, password):
    with pytest.raises(ValueError, match="Veuillez saisir"):
        auth_service.authentifier(login, password)


def test_create_user():
    auth_service.create_user('caisse', 'motdepasse1', 'Caissière')
    user = auth_service.authentifier('caisse', 'motdepasse1')
    assert user['nom'] == 'Caissière'

    with pytest.raises(ValueError):
        auth_service.create_user('caisse', 'autremotdepasse')
    with pytest.raises(ValueError):
        auth_service.create_user('court', '1234567')


def test_mot_de_passe_hache(database):
    auth_service.create_user('compta', 'motdepasse1')
    row = database.fetch_one("SELECT mot_de_passe FROM utilisateurs WHERE login = ?", ('compta',))
    assert row['mot_de_passe'] != 'motdepasse1'
    assert row['mot_de_passe'].startswith('$2')
