"""
Shipping Label Renderer
=======================

Draws the canonical OrderDocument onto a fixed 4x6 inch label.

Zones, top to bottom:
1. Sender (FROM)
2. Destination (SHIP TO), the dominant block
3. Order id / order date
4. Code 128 barcode of the resolved identifier
5. Service level marker and a QR code carrying the same identifier

The canvas never grows: long names and addresses are wrapped to the zone
width and truncated to a fixed number of lines.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.code128 import Code128
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas as pdf_canvas

import config
from utils.logger import get_logger
from .errors import DocumentExportError
from .formatting import format_label_date
from .models import ADDRESS_PENDING, OrderDocument, OrganizationSettings
from .pdf_common import FONT_BOLD, FONT_REGULAR, SLATE_500, SLATE_600, ensure_parent_dir


LABEL_SIZE = (4 * inch, 6 * inch)
PADDING = 0.15 * inch
CONTENT_WIDTH = LABEL_SIZE[0] - 2 * PADDING

# (font, size, max lines) per wrapped field
SENDER_ADDRESS_FONT = (FONT_REGULAR, 7, 2)
RECIPIENT_NAME_FONT = (FONT_BOLD, 15, 2)
DESTINATION_FONT = (FONT_REGULAR, 10, 4)
SENDER_NAME_FONT = (FONT_BOLD, 8.5, 1)
ORDER_ID_FONT = (FONT_BOLD, 10, 2)

# Order id shares its row with the order date
ORDER_ID_WIDTH = CONTENT_WIDTH / 2 - 6

BARCODE_HEIGHT = 50
BARCODE_BAR_WIDTH = 1.5
QR_SIZE = 64

SERVICE_LEVEL = "STANDARD SHIPPING"
PACKAGE_COUNT = "PACKAGE 1 OF 1"
SCAN_HINT = "SCAN FOR ORDER DETAILS"
QR_CAPTION = "CHECKPOINT"


def _break_token(line: str, font_name: str, font_size: float, width: float) -> List[str]:
    """Split a line character by character until every piece fits width."""
    if stringWidth(line, font_name, font_size) <= width:
        return [line]
    pieces: List[str] = []
    current = ""
    for char in line:
        if current and stringWidth(current + char, font_name, font_size) > width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def fit_lines(text: str, font: Tuple[str, float, int], width: float = CONTENT_WIDTH) -> Tuple[str, ...]:
    """
    Wrap text to the given width and truncate to the font's line budget.

    Explicit newlines are kept as line breaks. Words wider than the zone
    (long hyphenated addresses, long order numbers) are broken mid-word.
    A truncated block ends in '...'. Every returned line fits width.
    """
    font_name, font_size, max_lines = font
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        for line in simpleSplit(paragraph, font_name, font_size, width) or [""]:
            lines.extend(_break_token(line, font_name, font_size, width))

    if len(lines) <= max_lines:
        return tuple(lines)

    kept = lines[:max_lines]
    last = kept[-1].rstrip()
    while last and stringWidth(last + "...", font_name, font_size) > width:
        last = last[:-1].rstrip()
    kept[-1] = last + "..."
    return tuple(kept)


@dataclass(frozen=True)
class LabelLayout:
    sender_name: str
    sender_address: Tuple[str, ...]
    sender_phone: str
    recipient_name: Tuple[str, ...]
    destination: Tuple[str, ...]
    phone_line: str
    order_id: Tuple[str, ...]
    date_text: str
    barcode_value: str
    qr_value: str
    service_level: str = SERVICE_LEVEL
    package_count: str = PACKAGE_COUNT
    carrier: str = ""


def build_label_layout(
    document: OrderDocument,
    settings: Optional[OrganizationSettings] = None,
) -> LabelLayout:
    """
    Lay out a shipping label without drawing it.

    Destination prefers the shipping address, then the billing address, then
    the pending placeholder. The phone line is always present, even when the
    phone number is empty.
    """
    settings = settings or OrganizationSettings.label_defaults()
    sender_name = settings.name or config.LABEL_SENDER_NAME
    sender_address = settings.address or config.LABEL_SENDER_ADDRESS

    destination = document.shipping_address or document.billing_address or ADDRESS_PENDING

    return LabelLayout(
        sender_name=fit_lines(sender_name.upper(), SENDER_NAME_FONT)[0],
        sender_address=fit_lines(sender_address, SENDER_ADDRESS_FONT),
        sender_phone=settings.phone,
        recipient_name=fit_lines(document.customer_name.upper(), RECIPIENT_NAME_FONT),
        destination=fit_lines(destination.upper(), DESTINATION_FONT),
        # Printed even when empty; flagged for product review
        phone_line=f"PH: {document.phone}",
        order_id=fit_lines(document.id, ORDER_ID_FONT, width=ORDER_ID_WIDTH),
        date_text=format_label_date(document.created_at),
        barcode_value=document.id,
        qr_value=document.id,
        carrier=f"{config.ORG_SHORT_NAME} LOGISTICS",
    )


def build_barcode(value: str, max_width: float = CONTENT_WIDTH) -> Code128:
    """Code 128 barcode for value, narrowed until it fits max_width."""
    bar_width = BARCODE_BAR_WIDTH
    barcode = Code128(value, barWidth=bar_width, barHeight=BARCODE_HEIGHT, humanReadable=False, quiet=False)
    while barcode.width > max_width and bar_width > 0.5:
        bar_width -= 0.1
        barcode = Code128(value, barWidth=bar_width, barHeight=BARCODE_HEIGHT, humanReadable=False, quiet=False)
    return barcode


def build_qr_drawing(value: str, size: float = QR_SIZE) -> Drawing:
    """QR code drawing of value scaled to a size x size square."""
    widget = QrCodeWidget(value)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


class ShippingLabelRenderer:
    """Draws LabelLayouts onto a 4x6 inch PDF page"""

    def render(
        self,
        document: OrderDocument,
        settings: Optional[OrganizationSettings],
        output_path: str,
    ) -> str:
        """
        Render the shipping label PDF.

        Returns:
            Path to the generated PDF

        Raises:
            DocumentExportError: reportlab could not build the file
        """
        layout = build_label_layout(document, settings)
        try:
            ensure_parent_dir(output_path)
            c = pdf_canvas.Canvas(output_path, pagesize=LABEL_SIZE)
            c.setTitle(f"Label-{document.id}")
            self.draw(c, layout)
            c.showPage()
            c.save()
        except Exception as e:
            get_logger().error(f"Label {document.id} - PDF build failed: {e}",
                               component="LabelRenderer", exc_info=True)
            raise DocumentExportError("Label", document.id, str(e)) from e
        return output_path

    def draw(self, c, layout: LabelLayout) -> None:
        """Draw every zone onto canvas c."""
        left = PADDING
        right = LABEL_SIZE[0] - PADDING
        y = LABEL_SIZE[1] - PADDING

        # ── 1. Sender ──────────────────────────────────────────
        y = self._text(c, "FROM:", FONT_BOLD, 6.5, left, y, SLATE_500)
        y = self._text(c, layout.sender_name, FONT_BOLD, 8.5, left, y)
        for line in layout.sender_address:
            y = self._text(c, line, FONT_REGULAR, 7, left, y)
        if layout.sender_phone:
            y = self._text(c, layout.sender_phone, FONT_REGULAR, 7, left, y)
        y -= 4
        self._rule(c, left, right, y, 2)
        y -= 8

        # ── 2. Destination (dominant) ──────────────────────────
        y = self._text(c, "SHIP TO:", FONT_BOLD, 6.5, left, y, SLATE_500)
        indent = left + 6
        for line in layout.recipient_name:
            y = self._text(c, line, RECIPIENT_NAME_FONT[0], RECIPIENT_NAME_FONT[1], indent, y)
        for line in layout.destination:
            y = self._text(c, line, DESTINATION_FONT[0], DESTINATION_FONT[1], indent, y, SLATE_600)
        y -= 3
        y = self._text(c, layout.phone_line, FONT_BOLD, 10, indent, y)
        y -= 6
        self._rule(c, left, right, y, 4)
        y -= 10

        # ── 3. Order id / date ─────────────────────────────────
        middle = left + CONTENT_WIDTH / 2
        top = y
        y_left = self._text(c, "ORDER ID:", FONT_BOLD, 6.5, left, top, SLATE_500)
        for line in layout.order_id:
            y_left = self._text(c, line, ORDER_ID_FONT[0], ORDER_ID_FONT[1], left, y_left)
        y_right = self._text(c, "ORDER DATE:", FONT_BOLD, 6.5, middle, top, SLATE_500)
        y_right = self._text(c, layout.date_text, FONT_BOLD, 10, middle, y_right)
        y = min(y_left, y_right) - 4
        self._rule(c, left, right, y, 2)
        y -= 12

        # ── 4. Barcode ─────────────────────────────────────────
        barcode = build_barcode(layout.barcode_value)
        y -= BARCODE_HEIGHT
        barcode.drawOn(c, left + (CONTENT_WIDTH - barcode.width) / 2, y)
        y -= 11
        c.setFont(FONT_BOLD, 6.5)
        c.setFillColor(SLATE_600)
        c.drawCentredString(LABEL_SIZE[0] / 2, y, SCAN_HINT)
        y -= 8
        c.setDash(2, 2)
        self._rule(c, left, right, y, 0.5, colors.lightgrey)
        c.setDash()

        # ── 5. Service level + QR ──────────────────────────────
        bottom = PADDING
        qr = build_qr_drawing(layout.qr_value)
        renderPDF.draw(qr, c, right - QR_SIZE, bottom + 10)
        c.setFont(FONT_BOLD, 5.5)
        c.setFillColor(colors.black)
        c.drawCentredString(right - QR_SIZE / 2, bottom + 2, QR_CAPTION)

        box_y = bottom + 40
        c.setFont(FONT_BOLD, 8)
        box_width = c.stringWidth(layout.service_level, FONT_BOLD, 8) + 10
        c.setLineWidth(1.5)
        c.rect(left, box_y, box_width, 14, stroke=1, fill=0)
        c.drawString(left + 5, box_y + 4, layout.service_level)
        c.drawString(left, bottom + 24, layout.package_count)
        c.setFont(FONT_REGULAR, 6.5)
        c.setFillColor(SLATE_500)
        c.drawString(left, bottom + 12, layout.carrier.upper())

    @staticmethod
    def _text(c, text, font, size, x, y, color=colors.black):
        """Draw one line below y and return the next baseline cursor."""
        leading = size * 1.2
        y -= leading
        c.setFont(font, size)
        c.setFillColor(color)
        c.drawString(x, y, text)
        return y

    @staticmethod
    def _rule(c, x1, x2, y, width, color=colors.black):
        c.setStrokeColor(color)
        c.setLineWidth(width)
        c.line(x1, y, x2, y)
        c.setStrokeColor(colors.black)
