import pytest

from app.services.database_service import db_service
from app.services.client_service import client_service
from app.services.service_service import service_service


@pytest.fixture(autouse=True)
def database(tmp_path):
    """Base SQLite neuve pour chaque test."""
    db_service.configure(engine='sqlite', database_path=tmp_path / 'test.db')
    yield db_service
    db_service.close()


@pytest.fixture
def client_id():
    return client_service.create({
        'nom': 'Imprimerie Atlas',
        'telephone': '0550 12 34 56',
        'email': 'contact@atlas.dz',
        'adresse': 'Oran',
    })


@pytest.fixture
def type_id():
    return service_service.create_type('Impression grand format')


@pytest.fixture
def nouveau_service(client_id, type_id):
    """Crée un service ; les arguments nommés remplacent les valeurs par défaut."""
    def _create(**overrides):
        data = {
            'id_client': client_id,
            'id_type_service': type_id,
            'description': 'Bâche 3x2',
            'prix_total': 10000,
            'montant_paye': 0,
        }
        data.update(overrides)
        return service_service.create(data)
    return _create
