"""Server-side certificate PDF (A4 landscape) so it can be attached to an email"""

import io
from datetime import UTC, datetime
from typing import Optional

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from services.payments import CertificateMetadata

TITLE = "RANDOM SPOT CERTIFICATE"

LEGAL_LINES = [
    "This is a novelty certificate referencing a randomly generated geographic area tile.",
    "No ownership, property rights, access rights, or permissions are granted.",
    "The location may be private, restricted, closed, unsafe, or inaccessible.",
    "If you visit, follow local rules and obtain permission where required.",
    "See the website Terms page for full details.",
]

MARGIN = 48


def render_certificate_pdf(meta: CertificateMetadata, issued: Optional[datetime] = None) -> bytes:
    """Render the certificate for a paid session's metadata"""
    issued = issued or datetime.now(UTC)
    tile_m = meta.tile_meters
    area_m2 = f"{tile_m * tile_m:.2f}"

    buffer = io.BytesIO()
    page_size = landscape(A4)
    width, height = page_size
    pdf = canvas.Canvas(buffer, pagesize=page_size)
    pdf.setTitle(f"{TITLE.title()} {meta.seed}".strip())

    # Background and frame
    pdf.setFillColor(Color(0.06, 0.07, 0.09))
    pdf.rect(0, 0, width, height, stroke=0, fill=1)
    pdf.setStrokeColor(Color(0.9, 0.9, 0.9))
    pdf.setLineWidth(2)
    pdf.rect(24, 24, width - 48, height - 48, stroke=1, fill=0)

    def text(value: str, y: float, font: str, size: int, color: Color):
        pdf.setFont(font, size)
        pdf.setFillColor(color)
        pdf.drawString(MARGIN, y, value)

    text(TITLE, height - 86, "Helvetica-Bold", 28, Color(1, 1, 1))
    text(f"{meta.country or '?'} • {meta.mode or '?'}", height - 118, "Helvetica", 13, Color(0.8, 0.82, 0.85))
    text(f"{meta.lat or '?'}, {meta.lon or '?'}", height - 180, "Courier-Bold", 22, Color(1, 1, 1))
    text(f"Tile: {tile_m:g} m × {tile_m:g} m ({area_m2} m²)", height - 214, "Helvetica", 14, Color(0.9, 0.9, 0.95))
    text(f"Seed: {meta.seed or '?'}", height - 242, "Courier", 11, Color(0.75, 0.78, 0.82))

    y = height - 300
    for line in LEGAL_LINES:
        text(line, y, "Helvetica", 11, Color(0.7, 0.72, 0.76))
        y -= 18

    text(f"Issued: {issued.date().isoformat()}", 44, "Helvetica", 10, Color(0.6, 0.62, 0.65))

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
