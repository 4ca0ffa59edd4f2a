import re
from datetime import datetime

from app.services.client_service import client_service
from app.services.facture_service import (
    FactureService, date_longue, nom_fichier_facture, phrase_completion,
)
from app.services.service_service import service_service


def test_date_longue():
    assert date_longue(datetime(2026, 10, 19)) == "19 octobre 2026"
    assert date_longue(datetime(2026, 2, 3)) == "03 février 2026"


def test_nom_fichier_facture():
    moment = datetime(2026, 10, 19, 14, 5, 9)
    assert nom_fichier_facture(42, moment) == "FACTURE_000042_20261019_140509.pdf"


def test_phrase_completion(nouveau_service):
    service = service_service.get_by_id(nouveau_service(montant_paye=2500))
    assert phrase_completion(service) == "Paiement complété à 25.0% - RESTE À PAYER"
    service = service_service.enregistrer_paiement(service.id, 7500, 'Espèces')
    assert phrase_completion(service) == "Paiement complété à 100% - PAYÉ"


def test_generer_facture(tmp_path, client_id, nouveau_service):
    service_id = nouveau_service(montant_paye=3000, description="Bâche <3x2>\nœillets")
    service_service.enregistrer_paiement(service_id, 2000, 'Chèque')

    facture = FactureService(output_dir=tmp_path / 'factures')
    chemin = facture.generer_facture(
        service_service.get_by_id(service_id),
        service_service.get_paiements(service_id),
        client_service.get_details(client_id),
    )

    assert chemin.parent == tmp_path / 'factures'
    assert re.fullmatch(rf"FACTURE_{service_id:06d}_\d{{8}}_\d{{6}}\.pdf", chemin.name)
    assert chemin.read_bytes().startswith(b'%PDF')


def test_generer_facture_sans_paiement(tmp_path, client_id, nouveau_service):
    service_id = nouveau_service(description='')
    chemin = FactureService(output_dir=tmp_path).generer_facture(
        service_service.get_by_id(service_id), [], client_service.get_details(client_id),
    )
    assert chemin.exists()
    assert chemin.stat().st_size > 0
