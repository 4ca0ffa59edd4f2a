"""
export_service.py : exports Excel (services, paiements) et CSV (clients)
"""
import csv
import logging
from datetime import datetime
from pathlib import Path

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from config import settings
from app.models.service import ETAT_LABELS, STATUT_LABELS, couleur_progression

logger = logging.getLogger(__name__)

MONEY_FORMAT = f'#,##0.00 "{settings.CURRENCY}"'
BLUE = "2980b9"
GREEN = "27ae60"
RED = "e74c3c"
DARK = "2c3e50"


def _chemin(output_path, prefixe, extension):
    if output_path:
        return Path(output_path)
    settings.EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return settings.EXPORT_DIR / f"{prefixe}_{stamp}.{extension}"


def _hdr(ws, row, cols, bg=DARK):
    fill = PatternFill("solid", fgColor=bg)
    font = Font(bold=True, color="FFFFFF", size=11)
    for c in range(1, cols + 1):
        ws.cell(row, c).fill = fill
        ws.cell(row, c).font = font
        ws.cell(row, c).alignment = Alignment(horizontal="center")


def _colw(ws, widths):
    for i, w in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(i)].width = w


def _alt(ws, row, n):
    if row % 2 == 0:
        fill = PatternFill("solid", fgColor="f8f9fa")
        for c in range(1, n + 1):
            ws.cell(row, c).fill = fill


def _money(ws, row, col, value):
    cell = ws.cell(row, col, round(float(value or 0), 2))
    cell.number_format = MONEY_FORMAT
    cell.alignment = Alignment(horizontal="right")
    return cell


class ExportService:

    def export_clients_csv(self, output_path=None):
        """Export CSV des clients : ID, Nom, Téléphone, Email, Adresse."""
        from app.services.client_service import client_service
        try:
            path = _chemin(output_path, "clients", "csv")
            path.parent.mkdir(parents=True, exist_ok=True)
            clients = client_service.get_all()
            with open(path, "w", newline="", encoding="utf-8-sig") as f:
                writer = csv.writer(f, delimiter=";")
                writer.writerow(["ID", "Nom", "Téléphone", "Email", "Adresse"])
                for c in clients:
                    writer.writerow([c["id"], c["nom"], c.get("telephone") or "",
                                     c.get("email") or "", c.get("adresse") or ""])
            logger.info(f"Export clients CSV: {path} ({len(clients)} lignes)")
            return True, str(path)
        except Exception as e:
            logger.error(f"Erreur export clients CSV: {e}", exc_info=True)
            return False, str(e)

    def export_services_excel(self, filters=None, output_path=None):
        """Export Excel 3 onglets : Services, Paiements, Synthèse."""
        from app.services.service_service import service_service
        try:
            path = _chemin(output_path, "services", "xlsx")
            path.parent.mkdir(parents=True, exist_ok=True)
            services = service_service.get_all(filters)
            stats = service_service.get_statistiques(services)
            now = datetime.now().strftime(settings.DATETIME_FORMAT)

            wb = openpyxl.Workbook()

            # ── Onglet 1 : Services ───────────────────────────────────────
            ws1 = wb.active
            ws1.title = "Services"
            hdrs1 = ["N°", "Date", "Client", "Type", "Description", "Prix total",
                     "Payé", "Reste", "État paiement", "Statut"]
            for i, h in enumerate(hdrs1, 1):
                ws1.cell(1, i, h)
            _hdr(ws1, 1, len(hdrs1), BLUE)

            row = 2
            for s in services:
                ws1.cell(row, 1, s.numero_facture)
                ws1.cell(row, 2, s.date_formatee)
                ws1.cell(row, 3, s.client)
                ws1.cell(row, 4, s.type_service)
                ws1.cell(row, 5, s.description)
                _money(ws1, row, 6, s.prix_total)
                _money(ws1, row, 7, s.montant_paye)
                reste = _money(ws1, row, 8, s.reste_a_payer)
                if not s.est_paye:
                    reste.font = Font(bold=True, color=RED)
                ws1.cell(row, 9, ETAT_LABELS.get(s.etat_paiement, s.etat_paiement))
                ws1.cell(row, 10, STATUT_LABELS.get(s.statut_service, s.statut_service))
                _alt(ws1, row, len(hdrs1))
                row += 1
            ws1.freeze_panes = "A2"
            _colw(ws1, [10, 17, 24, 20, 36, 15, 15, 15, 20, 14])

            # ── Onglet 2 : Paiements ──────────────────────────────────────
            ws2 = wb.create_sheet("Paiements")
            hdrs2 = ["N° service", "Client", "Date", "Montant", "Mode"]
            for i, h in enumerate(hdrs2, 1):
                ws2.cell(1, i, h)
            _hdr(ws2, 1, len(hdrs2), GREEN)

            row = 2
            for s in services:
                for p in service_service.get_paiements(s.id):
                    ws2.cell(row, 1, s.numero_facture)
                    ws2.cell(row, 2, s.client)
                    ws2.cell(row, 3, p.date_formatee)
                    _money(ws2, row, 4, p.montant)
                    ws2.cell(row, 5, p.mode_paiement)
                    _alt(ws2, row, len(hdrs2))
                    row += 1
            ws2.freeze_panes = "A2"
            _colw(ws2, [12, 24, 17, 15, 18])

            # ── Onglet 3 : Synthèse ───────────────────────────────────────
            ws3 = wb.create_sheet("Synthèse")
            ws3.merge_cells("A1:B1")
            ws3["A1"] = f"SYNTHÈSE DES SERVICES — {settings.COMPANY_NAME}"
            ws3["A1"].font = Font(bold=True, size=14, color="FFFFFF")
            ws3["A1"].fill = PatternFill("solid", fgColor=DARK)
            ws3["A1"].alignment = Alignment(horizontal="center")
            ws3.row_dimensions[1].height = 30
            ws3["A2"] = f"Généré le {now}"
            ws3["A2"].font = Font(italic=True, color="7f8c8d", size=9)

            ws3.cell(4, 1, "Nombre de services")
            ws3.cell(4, 2, stats.nombre_services)
            for r, (label, value) in enumerate([
                ("Montant total", stats.total_montant),
                ("Total payé", stats.total_paye),
                ("Reste à payer", stats.total_reste),
            ], start=5):
                ws3.cell(r, 1, label)
                _money(ws3, r, 2, value)
            ws3.cell(8, 1, "Taux de paiement")
            ws3.cell(8, 2, stats.pourcentage_paye / 100)
            ws3.cell(8, 2).number_format = "0.0%"
            ws3.cell(8, 2).font = Font(bold=True,
                                       color=couleur_progression(stats.pourcentage_paye).lstrip("#"))
            for r in range(4, 9):
                ws3.cell(r, 1).font = Font(bold=True)
            _colw(ws3, [24, 22])

            wb.save(path)
            logger.info(f"Export services Excel: {path} ({len(services)} services)")
            return True, str(path)
        except Exception as e:
            logger.error(f"Erreur export services Excel: {e}", exc_info=True)
            return False, str(e)


export_service = ExportService()
