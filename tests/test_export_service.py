import csv

import openpyxl

from app.models.service import PAYE
from app.services.client_service import client_service
from app.services.export_service import export_service


def test_export_clients_csv(tmp_path, client_id):
    client_service.create({'nom': 'Sahara; Frères'})
    ok, chemin = export_service.export_clients_csv(tmp_path / 'clients.csv')
    assert ok

    with open(chemin, newline='', encoding='utf-8-sig') as f:
        lignes = list(csv.reader(f, delimiter=';'))
    assert lignes[0] == ["ID", "Nom", "Téléphone", "Email", "Adresse"]
    assert lignes[1][1:] == ['Imprimerie Atlas', '0550 12 34 56', 'contact@atlas.dz', 'Oran']
    assert lignes[2][1] == 'Sahara; Frères'


def test_export_services_excel(tmp_path, nouveau_service):
    service_id = nouveau_service(montant_paye=10000)
    nouveau_service(montant_paye=2000)

    ok, chemin = export_service.export_services_excel(None, tmp_path / 'services.xlsx')
    assert ok

    wb = openpyxl.load_workbook(chemin)
    assert wb.sheetnames == ["Services", "Paiements", "Synthèse"]
    assert wb["Services"].max_row == 3
    assert wb["Paiements"].max_row == 3
    synthese = wb["Synthèse"]
    assert synthese.cell(4, 2).value == 2
    assert synthese.cell(5, 2).value == 20000
    assert synthese.cell(6, 2).value == 12000
    assert synthese.cell(7, 2).value == 8000

    ok, chemin = export_service.export_services_excel(
        {'etat_paiement': PAYE}, tmp_path / 'payes.xlsx')
    ws = openpyxl.load_workbook(chemin)["Services"]
    assert ws.max_row == 2
    assert ws.cell(2, 1).value == f"{service_id:06d}"


def test_export_erreur_retourne_message(tmp_path):
    ok, message = export_service.export_services_excel(
        {'date_debut': '2026-10-19', 'date_fin': '2026-10-01'}, tmp_path / 'x.xlsx')
    assert not ok
    assert "date de début" in message
