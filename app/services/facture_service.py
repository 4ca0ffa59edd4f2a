"""
Génération des factures PDF (reportlab / platypus).

Une facture reprend le service, les coordonnées du client, le résumé
financier et, s'il existe, l'historique des paiements.
"""
import logging
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle,
)

from config import settings
from app.models.service import STATUT_LABELS, format_montant

logger = logging.getLogger(__name__)

PRIMARY = colors.Color(44 / 255, 62 / 255, 80 / 255)
ACCENT = colors.Color(52 / 255, 152 / 255, 219 / 255)
SUCCESS = colors.Color(46 / 255, 204 / 255, 113 / 255)
DANGER = colors.Color(231 / 255, 76 / 255, 60 / 255)
WARNING = colors.Color(243 / 255, 156 / 255, 18 / 255)
LIGHT_GRAY = colors.Color(236 / 255, 240 / 255, 241 / 255)
DARK_GRAY = colors.Color(127 / 255, 140 / 255, 141 / 255)
PAID_BG = colors.Color(212 / 255, 237 / 255, 218 / 255)
DUE_BG = colors.Color(248 / 255, 215 / 255, 218 / 255)
NOTE_BG = colors.Color(1, 250 / 255, 230 / 255)

MOIS = ('janvier', 'février', 'mars', 'avril', 'mai', 'juin', 'juillet',
        'août', 'septembre', 'octobre', 'novembre', 'décembre')


def date_longue(dt):
    """19 octobre 2026"""
    return f"{dt.day:02d} {MOIS[dt.month - 1]} {dt.year}"


def nom_fichier_facture(service_id, moment=None):
    moment = moment or datetime.now()
    return f"FACTURE_{service_id:06d}_{moment.strftime('%Y%m%d_%H%M%S')}.pdf"


def phrase_completion(service):
    """Ligne d'état affichée sous le résumé financier."""
    if service.reste_a_payer < settings.PAYMENT_EPSILON:
        return "Paiement complété à 100% - PAYÉ"
    return f"Paiement complété à {service.pourcentage_paye:.1f}% - RESTE À PAYER"


class FactureService:
    """Construit le PDF d'une facture de service."""

    def __init__(self, output_dir=None):
        self.output_dir = Path(output_dir) if output_dir else settings.FACTURES_DIR
        base = getSampleStyleSheet()['Normal']
        self.styles = {
            'company': ParagraphStyle('company', parent=base, fontName='Helvetica-Bold',
                                      fontSize=26, leading=30, textColor=PRIMARY),
            'subtitle': ParagraphStyle('subtitle', parent=base, fontName='Helvetica-Oblique',
                                       fontSize=11, leading=14, textColor=DARK_GRAY),
            'small': ParagraphStyle('small', parent=base, fontSize=9, leading=12,
                                    textColor=colors.darkgray),
            'title': ParagraphStyle('title', parent=base, fontName='Helvetica-Bold',
                                    fontSize=32, leading=36, textColor=ACCENT, alignment=TA_RIGHT),
            'numero': ParagraphStyle('numero', parent=base, fontName='Helvetica-Bold',
                                     fontSize=16, leading=20, textColor=PRIMARY, alignment=TA_RIGHT),
            'date': ParagraphStyle('date', parent=base, fontSize=10, textColor=DARK_GRAY,
                                   alignment=TA_RIGHT),
            'header': ParagraphStyle('header', parent=base, fontName='Helvetica-Bold',
                                     fontSize=12, leading=15, textColor=colors.white),
            'header_right': ParagraphStyle('header_right', parent=base, fontName='Helvetica-Bold',
                                           fontSize=12, leading=15, textColor=colors.white,
                                           alignment=TA_RIGHT),
            'label': ParagraphStyle('label', parent=base, fontName='Helvetica-Bold',
                                    fontSize=10, textColor=PRIMARY),
            'normal': ParagraphStyle('normal', parent=base, fontSize=10, leading=13),
            'bold': ParagraphStyle('bold', parent=base, fontName='Helvetica-Bold',
                                   fontSize=11, leading=14),
            'section': ParagraphStyle('section', parent=base, fontName='Helvetica-Bold',
                                      fontSize=12, leading=15, textColor=PRIMARY),
            'center': ParagraphStyle('center', parent=base, fontSize=8, textColor=DARK_GRAY,
                                     alignment=TA_CENTER),
            'legal': ParagraphStyle('legal', parent=base, fontName='Helvetica-Oblique',
                                    fontSize=7, textColor=colors.gray, alignment=TA_CENTER),
        }

    def _p(self, texte, style='normal', **overrides):
        """Paragraph avec texte échappé (les sauts de ligne deviennent <br/>)."""
        st = self.styles[style]
        if overrides:
            st = ParagraphStyle(f"{style}_x", parent=st, **overrides)
        return Paragraph(escape(str(texte)).replace('\n', '<br/>'), st)

    def generer_facture(self, service, paiements, client):
        """
        Écrit la facture PDF d'un service.

        Args:
            service: Service
            paiements: List of Paiement (ordre du journal)
            client: Client (coordonnées)

        Returns:
            Path du fichier généré
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            maintenant = datetime.now()
            chemin = self.output_dir / nom_fichier_facture(service.id, maintenant)

            doc = SimpleDocTemplate(
                str(chemin), pagesize=A4,
                leftMargin=10 * mm, rightMargin=10 * mm,
                topMargin=10 * mm, bottomMargin=10 * mm,
                title=f"Facture {service.numero_facture}", author=settings.COMPANY_NAME,
            )
            largeur = doc.width

            elems = []
            elems += self._entete(service, maintenant, largeur)
            elems.append(HRFlowable(width='100%', thickness=3, color=ACCENT))
            elems.append(Spacer(1, 12))
            elems += self._bloc_client(client, largeur)
            elems.append(Spacer(1, 12))
            elems += self._details_service(service, largeur)
            elems.append(Spacer(1, 12))
            elems += self._resume_financier(service, largeur)
            elems.append(Spacer(1, 12))
            if paiements:
                elems += self._historique(paiements, largeur)
                elems.append(Spacer(1, 12))
            elems += self._instructions(service, largeur)
            elems.append(Spacer(1, 12))
            elems += self._pied_de_page(maintenant, largeur)

            doc.build(elems)
            logger.info(f"Facture générée: {chemin}")
            return chemin
        except Exception as e:
            logger.error(f"Erreur génération facture service {service.id}: {e}")
            raise

    def _entete(self, service, maintenant, largeur):
        societe = [
            self._p(settings.COMPANY_NAME, 'company'),
            self._p(settings.COMPANY_SUBTITLE, 'subtitle'),
            Spacer(1, 6),
            self._p(
                f"Tél: {settings.COMPANY_PHONE}\n"
                f"Email: {settings.COMPANY_EMAIL}\n"
                f"Adresse: {settings.COMPANY_ADDRESS}\n"
                f"Web: {settings.COMPANY_WEBSITE}",
                'small'
            ),
        ]
        facture = [
            self._p("FACTURE", 'title'),
            self._p(f"N° {service.numero_facture}", 'numero'),
            self._p(f"Date: {date_longue(maintenant)}", 'date'),
        ]
        table = Table([[societe, facture]], colWidths=[largeur * 0.6, largeur * 0.4])
        table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))
        return [table]

    def _bloc_client(self, client, largeur):
        details = client.details_formates() if client else 'N/A'
        table = Table(
            [[self._p("INFORMATIONS CLIENT", 'header')], [self._p(details)]],
            colWidths=[largeur * 0.6], hAlign='LEFT'
        )
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, 0), PRIMARY),
            ('BACKGROUND', (0, 1), (0, 1), LIGHT_GRAY),
            ('BOX', (0, 1), (0, 1), 1, DARK_GRAY),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('LEFTPADDING', (0, 1), (0, 1), 12),
        ]))
        return [table]

    def _details_service(self, service, largeur):
        lignes = [
            ("Type de service:", service.type_service),
            ("Description:", service.description or "N/A"),
            ("Statut:", STATUT_LABELS.get(service.statut_service, service.statut_service)),
            ("Date création:", service.date_formatee),
        ]
        data = [[self._p("DÉTAILS DU SERVICE", 'header'), '']]
        data += [[self._p(label, 'label'), self._p(valeur)] for label, valeur in lignes]
        table = Table(data, colWidths=[largeur * 0.3, largeur * 0.7])
        table.setStyle(TableStyle([
            ('SPAN', (0, 0), (1, 0)),
            ('BACKGROUND', (0, 0), (1, 0), PRIMARY),
            ('BACKGROUND', (0, 1), (0, -1), LIGHT_GRAY),
            ('GRID', (0, 1), (-1, -1), 0.5, colors.lightgrey),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
        ]))
        return [table]

    def _resume_financier(self, service, largeur):
        paye = service.reste_a_payer < settings.PAYMENT_EPSILON
        reste_bg = PAID_BG if paye else DUE_BG
        reste_color = SUCCESS if paye else DANGER

        data = [
            [self._p("RÉSUMÉ FINANCIER", 'header'),
             self._p(f"MONTANT ({settings.CURRENCY})", 'header_right')],
            [self._p(f"Service: {service.type_service}"),
             self._p(format_montant(service.prix_total), alignment=TA_RIGHT)],
            ['', ''],
            [self._p("SOUS-TOTAL", 'bold'),
             self._p(format_montant(service.prix_total), 'bold', alignment=TA_RIGHT)],
            [self._p("Montant déjà payé"),
             self._p(format_montant(service.montant_paye), textColor=SUCCESS, alignment=TA_RIGHT)],
            [self._p("RESTE À PAYER", 'section', fontSize=14, leading=17),
             self._p(format_montant(service.reste_a_payer), 'bold', fontSize=14, leading=17,
                     textColor=reste_color, alignment=TA_RIGHT)],
        ]
        table = Table(data, colWidths=[largeur * 0.7, largeur * 0.3])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), PRIMARY),
            ('GRID', (0, 1), (-1, 1), 0.5, colors.lightgrey),
            ('BACKGROUND', (0, 3), (-1, 3), LIGHT_GRAY),
            ('GRID', (0, 3), (-1, 4), 0.5, colors.lightgrey),
            ('BACKGROUND', (0, 4), (-1, 4), PAID_BG),
            ('BACKGROUND', (0, 5), (-1, 5), reste_bg),
            ('BOX', (0, 5), (-1, 5), 2, PRIMARY),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('TOPPADDING', (0, 2), (-1, 2), 1),
            ('BOTTOMPADDING', (0, 2), (-1, 2), 1),
        ]))
        statut = self._p(phrase_completion(service), 'bold',
                         textColor=SUCCESS if paye else DANGER, alignment=TA_RIGHT)
        return [table, Spacer(1, 5), statut]

    def _historique(self, paiements, largeur):
        entetes = ["N°", "DATE", f"MONTANT ({settings.CURRENCY})", "MODE"]
        data = [entetes]
        total = 0.0
        for index, paiement in enumerate(paiements, start=1):
            data.append([str(index), paiement.date_formatee,
                         format_montant(paiement.montant), paiement.mode_paiement])
            total += paiement.montant
        data.append(["TOTAL ENCAISSÉ", '', '', format_montant(total)])

        style = [
            ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('FONTSIZE', (0, 1), (-1, -2), 9),
            ('ALIGN', (0, 1), (0, -2), 'CENTER'),
            ('ALIGN', (2, 1), (2, -2), 'RIGHT'),
            ('GRID', (0, 1), (-1, -2), 0.5, colors.lightgrey),
            ('SPAN', (0, -1), (2, -1)),
            ('BACKGROUND', (0, -1), (-1, -1), SUCCESS),
            ('TEXTCOLOR', (0, -1), (-1, -1), colors.white),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('ALIGN', (0, -1), (-1, -1), 'RIGHT'),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]
        # Lignes alternées
        for row in range(1, len(data) - 1):
            if row % 2:
                style.append(('BACKGROUND', (0, row), (-1, row), LIGHT_GRAY))

        table = Table(data, colWidths=[largeur * 0.1, largeur * 0.4, largeur * 0.3, largeur * 0.2])
        table.setStyle(TableStyle(style))
        return [self._p("HISTORIQUE DES PAIEMENTS", 'section'), Spacer(1, 5), table]

    def _instructions(self, service, largeur):
        lignes = [
            f"Veuillez effectuer le paiement sous {settings.PAYMENT_DELAY_DAYS} jours "
            f"à compter de la date de facturation.",
            "Modes de paiement acceptés: Espèces, Chèque, Virement bancaire, Carte bancaire",
            f"Merci de mentionner le numéro de facture lors du paiement: {service.numero_facture}",
            f"Pour toute question, contactez-nous au {settings.COMPANY_PHONE}",
        ]
        contenu = [self._p("INFORMATIONS DE PAIEMENT", 'section', fontSize=11), Spacer(1, 6)]
        contenu += [self._p(f"• {ligne}", fontSize=9) for ligne in lignes]
        table = Table([[contenu]], colWidths=[largeur])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), NOTE_BG),
            ('BOX', (0, 0), (-1, -1), 1, WARNING),
            ('TOPPADDING', (0, 0), (-1, -1), 12),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 12),
            ('LEFTPADDING', (0, 0), (-1, -1), 12),
        ]))
        return [table]

    def _pied_de_page(self, maintenant, largeur):
        signature = [
            Spacer(1, 30),
            self._p("Signature et cachet", 'legal', fontSize=9, alignment=TA_RIGHT),
            self._p("Le Gérant", 'bold', fontSize=10, alignment=TA_RIGHT),
        ]
        table = Table([['', signature]], colWidths=[largeur * 0.5, largeur * 0.5])
        genere_le = maintenant.strftime("%d/%m/%Y à %H:%M")
        return [
            HRFlowable(width='100%', thickness=1, color=LIGHT_GRAY),
            Spacer(1, 8),
            self._p("Merci pour votre confiance", 'section', fontSize=13, alignment=TA_CENTER),
            Spacer(1, 4),
            self._p(
                f"Pour toute question: {settings.COMPANY_PHONE} | "
                f"{settings.COMPANY_EMAIL} | {settings.COMPANY_WEBSITE}",
                'center'
            ),
            Spacer(1, 10),
            table,
            HRFlowable(width='100%', thickness=0.5, color=LIGHT_GRAY),
            Spacer(1, 5),
            self._p(
                f"Document généré électroniquement le {genere_le} - Valable sans signature",
                'legal'
            ),
        ]


# Instance globale
facture_service = FactureService()
