"""Printable recovery kit rendered with reportlab.

One kit recovers both the vault master password and the cloud-synced
workspace data, so the document carries the twelve words, the workspace name
and the generation time, and nothing else secret.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from cloudsync.domain.ports import RecoveryKitWriterPort

RECOVERY_WORD_COUNT = 12
_COLUMNS = 3

_INFO_TEXT = (
    "This document recovers BOTH your vault master password and your "
    "cloud-synced workspace data. A single set of 12 words protects all your "
    "encrypted data, local and cloud."
)
_WARNING_TEXT = (
    "Without these recovery words, your encrypted data CANNOT be recovered. "
    "Print this document and store it in a secure physical location. "
    "Do not store it digitally or share it with anyone."
)


class RecoveryKitPdf(RecoveryKitWriterPort):
    """Write the unified recovery kit as an A4 PDF."""

    def __init__(self, product_name: str = "PrivStack") -> None:
        self.product_name = product_name

    def write(
        self,
        words: Sequence[str],
        workspace_name: str,
        path: str | Path,
        *,
        generated_at: Optional[datetime] = None,
    ) -> Path:
        words = [str(word).strip() for word in words]
        if len(words) != RECOVERY_WORD_COUNT or not all(words):
            raise ValueError(f"Recovery kit needs exactly {RECOVERY_WORD_COUNT} words")

        target = Path(path).expanduser()
        if target.suffix.lower() != ".pdf":
            target = target.with_suffix(".pdf")
        target.parent.mkdir(parents=True, exist_ok=True)

        stamp = (generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M:%S UTC")
        styles = getSampleStyleSheet()
        box_style = ParagraphStyle("KitBox", parent=styles["BodyText"], fontSize=10, leading=13)

        story = [
            Paragraph(f"{self.product_name} Recovery Kit", styles["Title"]),
            Paragraph(f"Workspace: {_escape(workspace_name or self.product_name)}", styles["Normal"]),
            Paragraph(f"Generated: {stamp}", styles["Normal"]),
            Spacer(1, 8 * mm),
            _boxed("UNIFIED RECOVERY KEY", _INFO_TEXT, box_style, colors.HexColor("#E3F2FD")),
            Spacer(1, 4 * mm),
            _boxed("DO NOT LOSE THIS DOCUMENT", _WARNING_TEXT, box_style, colors.HexColor("#FFEBEE")),
            Spacer(1, 8 * mm),
            Paragraph("Your 12 Recovery Words", styles["Heading2"]),
            Spacer(1, 3 * mm),
            _word_grid(words),
        ]

        doc = SimpleDocTemplate(
            str(target),
            pagesize=A4,
            leftMargin=18 * mm,
            rightMargin=18 * mm,
            topMargin=14 * mm,
            bottomMargin=14 * mm,
            title=f"{self.product_name} Recovery Kit",
        )
        doc.build(story)
        return target


def _boxed(title: str, body: str, style: ParagraphStyle, background) -> Table:
    table = Table([[Paragraph(f"<b>{title}</b>", style)], [Paragraph(body, style)]], colWidths=[170 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), background),
                ("BOX", (0, 0), (-1, -1), 0.75, colors.grey),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("RIGHTPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def _word_grid(words: Sequence[str]) -> Table:
    rows = []
    per_column = len(words) // _COLUMNS
    for row in range(per_column):
        cells = []
        for col in range(_COLUMNS):
            index = col * per_column + row
            cells.append(f"{index + 1:>2}.  {words[index]}")
        rows.append(cells)
    table = Table(rows, colWidths=[56 * mm] * _COLUMNS, rowHeights=[10 * mm] * per_column)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), "Courier-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 13),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    return table


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


__all__ = ["RECOVERY_WORD_COUNT", "RecoveryKitPdf"]
