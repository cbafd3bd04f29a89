import datetime
import logging
import os

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

logger = logging.getLogger(__name__)

HEADER_STYLE = [
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#3498DB')),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
    ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, 0), 12),
    ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
    ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F7F9FA')]),
    ('BOX', (0, 0), (-1, -1), 2, colors.HexColor('#2C3E50')),
    ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#BDC3C7')),
]


def _gesture_name(gesture):
    return gesture.value.capitalize() if gesture is not None else "Not detected"


class ReportGenerator:
    def __init__(self, output_dir="reports"):
        self.output_dir = output_dir
        self.styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            'ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            spaceAfter=20,
            textColor=colors.HexColor('#2C3E50'),
            alignment=1,
            fontName='Helvetica-Bold'
        )
        self.footer_style = ParagraphStyle(
            'Footer',
            parent=self.styles['Normal'],
            fontSize=10,
            textColor=colors.HexColor('#7F8C8D'),
            alignment=1
        )

    def _summary_table(self, results, rounds):
        wins = sum(1 for r in rounds if r.outcome.value == "win")
        losses = sum(1 for r in rounds if r.outcome.value == "lose")
        ties = sum(1 for r in rounds if r.outcome.value == "tie")
        played = len(rounds)
        data = [
            ["Mode", "Best of " + results["mode"] if results["mode"] != "endless" else "Endless"],
            ["Difficulty", results.get("difficulty", "").capitalize()],
            ["Current Score", f"{results['player_score']} - {results['computer_score']}"],
            ["Rounds Played", str(played)],
            ["Wins / Losses / Ties", f"{wins} / {losses} / {ties}"],
            ["Win Rate", f"{wins / played * 100:.1f}%" if played else "0%"],
        ]
        table = Table(data, colWidths=[3 * inch, 2.5 * inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#ECF0F1')),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#2C3E50')),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 12),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 10),
            ('BOX', (0, 0), (-1, -1), 2, colors.HexColor('#2C3E50')),
            ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#BDC3C7')),
        ]))
        return table

    def _rounds_table(self, rounds):
        data = [["Match", "Round", "Player", "Computer", "Result", "Score"]]
        for r in rounds:
            data.append([
                str(r.match_number),
                str(r.round_number),
                _gesture_name(r.player_gesture),
                _gesture_name(r.computer_gesture),
                r.outcome.value.capitalize(),
                f"{r.player_score} - {r.computer_score}",
            ])
        table = Table(data, colWidths=[0.7 * inch, 0.7 * inch, 1.3 * inch, 1.3 * inch, 1 * inch, 1 * inch])
        table.setStyle(TableStyle(HEADER_STYLE))
        return table

    def _achievements_table(self, achievements):
        data = [["Achievement", "Description", "Status"]]
        for a in achievements:
            status = "Unlocked" if a.unlocked else f"{a.progress}/{a.target}"
            data.append([a.title, a.description, status])
        table = Table(data, colWidths=[1.8 * inch, 3.2 * inch, 1 * inch])
        table.setStyle(TableStyle(HEADER_STYLE))
        return table

    def generate_report(self, summary):
        """Write a PDF for a session summary and return its path"""
        os.makedirs(self.output_dir, exist_ok=True)
        timestamp = datetime.datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        filename = os.path.join(self.output_dir, f"match_report_{timestamp}.pdf")

        doc = SimpleDocTemplate(filename, pagesize=letter)
        results = summary["results"]
        rounds = summary.get("rounds", [])
        achievements = summary.get("achievements", [])

        content = [
            Paragraph("ROCK PAPER SCISSORS <br/> Match Report", self.title_style),
            Spacer(1, 10),
            self._summary_table(results, rounds),
            Spacer(1, 20),
            Paragraph("Rounds", self.styles['Heading2']),
        ]

        if rounds:
            content.append(self._rounds_table(rounds))
        else:
            content.append(Paragraph("No rounds played yet. Time to start playing!", self.styles['Normal']))

        content.append(Spacer(1, 20))
        content.append(Paragraph("Achievements", self.styles['Heading2']))
        content.append(self._achievements_table(achievements))

        content.append(Spacer(1, 30))
        content.append(Paragraph(
            f"Generated on {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            self.footer_style
        ))

        doc.build(content)
        logger.info("Report saved to %s", filename)
        return filename
