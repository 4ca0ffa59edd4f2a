"""Panneau de statistiques des services affichés (total, payé, reste)."""
import logging
from PyQt5.QtWidgets import (
    QFrame, QVBoxLayout, QHBoxLayout, QLabel, QProgressBar
)
from PyQt5.QtCore import Qt

from app.models.service import couleur_progression, format_montant
from config.settings import CURRENCY

logger = logging.getLogger(__name__)


class StatistiquesWidget(QFrame):
    """Trois compteurs et une barre de progression des paiements."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setup_ui()
        self.reset()

    def _stat_box(self, title, color):
        box = QFrame()
        box.setStyleSheet(
            f"QFrame {{ background-color: {color}20; border: 2px solid {color};"
            f" border-radius: 6px; }}"
            f" QLabel {{ border: none; background: transparent; color: {color}; font-weight: bold; }}"
        )
        box.setMinimumWidth(170)
        layout = QVBoxLayout(box)
        title_label = QLabel(title)
        title_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(title_label)
        value_label = QLabel()
        value_label.setAlignment(Qt.AlignCenter)
        value_label.setStyleSheet("font-size: 14pt;")
        layout.addWidget(value_label)
        return box, value_label

    def setup_ui(self):
        self.setFrameShape(QFrame.StyledPanel)
        self.setObjectName('statistiquesWidget')
        self.setStyleSheet(
            "#statistiquesWidget { background-color: white; border: 1px solid #ddd; border-radius: 8px; }"
        )
        self.setMaximumHeight(170)

        main_layout = QVBoxLayout(self)

        row = QHBoxLayout()
        row.addStretch()
        total_box, self.total_label = self._stat_box("💰 TOTAL", "#3498db")
        paid_box, self.paid_label = self._stat_box("💵 PAYÉ", "#2ecc71")
        rest_box, self.remaining_label = self._stat_box("⚖️ RESTE", "#e74c3c")
        for box in (total_box, paid_box, rest_box):
            row.addWidget(box)
        row.addStretch()
        main_layout.addLayout(row)

        progress_title = QLabel("📊 Progression des paiements")
        progress_title.setAlignment(Qt.AlignCenter)
        progress_title.setStyleSheet("font-size: 9pt; font-weight: bold; color: #7f8c8d;")
        main_layout.addWidget(progress_title)

        self.progress = QProgressBar()
        self.progress.setRange(0, 1000)
        self.progress.setTextVisible(False)
        self.progress.setFixedHeight(16)
        main_layout.addWidget(self.progress)

        self.percent_label = QLabel()
        self.percent_label.setAlignment(Qt.AlignCenter)
        self.percent_label.setStyleSheet("font-weight: bold; color: #2c3e50;")
        main_layout.addWidget(self.percent_label)

    def _money(self, value):
        return f"{format_montant(value, 0)} {CURRENCY}"

    def update_statistiques(self, stats):
        """Met à jour l'affichage (stats: StatistiquesServices ou None)."""
        if stats is None:
            self.reset()
            return
        self.total_label.setText(self._money(stats.total_montant))
        self.paid_label.setText(self._money(stats.total_paye))
        self.remaining_label.setText(self._money(stats.total_reste))
        pct = stats.pourcentage_paye
        self.progress.setValue(int(max(0.0, min(100.0, pct)) * 10))
        self.percent_label.setText(f"{pct:.1f}%")
        self._set_color(couleur_progression(pct))

    def reset(self):
        for label in (self.total_label, self.paid_label, self.remaining_label):
            label.setText(self._money(0))
        self.progress.setValue(0)
        self.percent_label.setText("0%")
        self._set_color(couleur_progression(0))

    def _set_color(self, color):
        self.progress.setStyleSheet(
            f"QProgressBar {{ border: 1px solid #bbb; border-radius: 4px; background: #ecf0f1; }}"
            f" QProgressBar::chunk {{ background-color: {color}; border-radius: 4px; }}"
        )
