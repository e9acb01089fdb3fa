"""
Invoice Renderer
================

Lays out the canonical OrderDocument as an A4 commercial invoice.

Layout (top to bottom):
- Brand bar, sender block (logo / name / address / contact) and the
  INVOICE meta block (identifier, date, payment-status pill).
- Bill To / Ship To, always present (placeholders when data is missing).
- Line-item table: Description | Qty | Price | Total for priced orders,
  Description | Qty for custom quotes.
- Totals (subtotal + highlighted total due) or the custom-quote notice.
- Terms footer.

build_invoice_layout() is pure; InvoiceRenderer.render() draws it with
reportlab platypus.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

import config
from utils.logger import get_logger
from .errors import DocumentExportError
from .formatting import format_contact, format_currency, format_invoice_date
from .models import (
    ADDRESS_PENDING,
    CUSTOM_QUOTE_NOTICE,
    CUSTOM_QUOTE_TITLE,
    OrderDocument,
    OrganizationSettings,
)
from .pdf_common import (
    AMBER_50,
    AMBER_700,
    BRAND_ORANGE,
    EMERALD_100,
    EMERALD_800,
    FONT_BOLD,
    FONT_REGULAR,
    SLATE_50,
    SLATE_100,
    SLATE_200,
    SLATE_400,
    SLATE_500,
    SLATE_600,
    SLATE_800,
    SLATE_900,
    ensure_parent_dir,
    existing_file,
    markup,
)
from .pricing import PricingResolver


PRICED_COLUMNS = ("Description", "Qty", "Price", "Total")
QUOTE_COLUMNS = ("Description", "Qty")
INVOICE_TERMS = "Payment due within 30 days. Please include invoice number on your check."


@dataclass(frozen=True)
class PartyBlock:
    heading: str
    name: str
    address: str
    contact: str = ""
    company: str = ""


@dataclass(frozen=True)
class InvoiceRow:
    description: str
    quantity: str
    note: Optional[str] = None
    price: Optional[str] = None
    total: Optional[str] = None

    def cells(self, shows_prices: bool) -> Tuple[str, ...]:
        if shows_prices:
            return (self.description, self.quantity, self.price or "", self.total or "")
        return (self.description, self.quantity)


@dataclass(frozen=True)
class InvoiceLayout:
    sender_name: str
    sender_address: str
    sender_contact: Tuple[str, ...]
    logo_path: str
    identifier: str
    date_text: str
    payment_label: str
    payment_is_paid: bool
    bill_to: PartyBlock
    ship_to: PartyBlock
    columns: Tuple[str, ...]
    rows: Tuple[InvoiceRow, ...]
    shows_prices: bool
    subtotal_text: Optional[str]
    total_text: Optional[str]
    quote_title: Optional[str]
    quote_notice: Optional[str]
    terms: str = INVOICE_TERMS
    footer_brand: str = ""
    footer_tagline: str = ""


def _company_line(document: OrderDocument) -> str:
    """Company and GSTIN on one line, whichever are present."""
    parts = [document.company]
    if document.gst_number:
        parts.append(f"GSTIN: {document.gst_number}")
    return " | ".join(part for part in parts if part)


def build_invoice_layout(
    document: OrderDocument,
    settings: Optional[OrganizationSettings] = None,
    pricing_resolver: PricingResolver = None,
) -> InvoiceLayout:
    """
    Lay out an invoice without drawing it.

    Args:
        document: Canonical order document
        settings: Organization branding; None falls back to configured defaults

    Returns:
        InvoiceLayout whose pricing branch comes from document.is_custom_quote
    """
    settings = OrganizationSettings.defaults() if settings is None else settings
    defaults = OrganizationSettings.defaults()
    summary = (pricing_resolver or PricingResolver()).resolve(document.items, document.is_custom_quote)
    shows_prices = summary.shows_prices

    rows = []
    for item in document.items:
        rows.append(InvoiceRow(
            description=item.name,
            quantity=str(item.quantity),
            note=f"Specs: {item.customization_note}" if item.customization_note else None,
            price=format_currency(item.unit_price) if shows_prices else None,
            total=format_currency(item.line_total) if shows_prices else None,
        ))

    contact = tuple(value for value in (settings.email, settings.phone) if value)

    return InvoiceLayout(
        sender_name=settings.name or defaults.name,
        sender_address=settings.address or defaults.address,
        sender_contact=contact,
        logo_path=settings.logo_path,
        identifier=document.id,
        date_text=format_invoice_date(document.created_at),
        payment_label="Paid" if document.is_paid else "Payment Pending",
        payment_is_paid=document.is_paid,
        bill_to=PartyBlock(
            heading="Bill To",
            name=document.customer_name,
            address=document.billing_address or ADDRESS_PENDING,
            contact=format_contact(document.email, document.phone),
            company=_company_line(document),
        ),
        ship_to=PartyBlock(
            heading="Ship To",
            name=document.customer_name,
            address=document.shipping_address or document.billing_address or ADDRESS_PENDING,
        ),
        columns=PRICED_COLUMNS if shows_prices else QUOTE_COLUMNS,
        rows=tuple(rows),
        shows_prices=shows_prices,
        subtotal_text=format_currency(summary.subtotal) if shows_prices else None,
        total_text=format_currency(summary.total) if shows_prices else None,
        quote_title=None if shows_prices else CUSTOM_QUOTE_TITLE,
        quote_notice=None if shows_prices else CUSTOM_QUOTE_NOTICE,
        footer_brand=config.ORG_SHORT_NAME,
        footer_tagline=settings.tagline or defaults.tagline,
    )


class InvoiceRenderer:
    """Draws InvoiceLayouts as A4 PDFs"""

    def __init__(self, pricing_resolver: PricingResolver = None):
        self.pricing_resolver = pricing_resolver or PricingResolver()
        self.styles = self._build_styles()

    @staticmethod
    def _build_styles():
        base = getSampleStyleSheet()
        normal = base["Normal"]
        return {
            "brand": ParagraphStyle("InvBrand", parent=normal, fontName=FONT_BOLD, fontSize=24,
                                    leading=28, textColor=SLATE_900),
            "sender_name": ParagraphStyle("InvSenderName", parent=normal, fontName=FONT_BOLD, fontSize=13,
                                          leading=16, textColor=SLATE_900, spaceAfter=2),
            "sender": ParagraphStyle("InvSender", parent=normal, fontName=FONT_REGULAR, fontSize=9,
                                     leading=12, textColor=SLATE_500),
            "title": ParagraphStyle("InvTitle", parent=normal, fontName=FONT_REGULAR, fontSize=30,
                                    leading=34, alignment=TA_RIGHT, textColor=SLATE_200),
            "meta_id": ParagraphStyle("InvMetaId", parent=normal, fontName=FONT_BOLD, fontSize=11,
                                      leading=14, alignment=TA_RIGHT, textColor=SLATE_800),
            "meta": ParagraphStyle("InvMeta", parent=normal, fontName=FONT_REGULAR, fontSize=9,
                                   leading=12, alignment=TA_RIGHT, textColor=SLATE_500),
            "pill": ParagraphStyle("InvPill", parent=normal, fontName=FONT_BOLD, fontSize=8,
                                   leading=10, alignment=TA_CENTER),
            "heading": ParagraphStyle("InvHeading", parent=normal, fontName=FONT_BOLD, fontSize=8,
                                      leading=10, textColor=SLATE_400, spaceAfter=4),
            "party_name": ParagraphStyle("InvPartyName", parent=normal, fontName=FONT_BOLD, fontSize=12,
                                         leading=15, textColor=SLATE_800),
            "party": ParagraphStyle("InvParty", parent=normal, fontName=FONT_REGULAR, fontSize=9,
                                    leading=12, textColor=SLATE_600),
            "th": ParagraphStyle("InvTh", parent=normal, fontName=FONT_BOLD, fontSize=8,
                                 leading=10, textColor=SLATE_500),
            "cell": ParagraphStyle("InvCell", parent=normal, fontName=FONT_REGULAR, fontSize=9,
                                   leading=12, textColor=SLATE_600),
            "cell_item": ParagraphStyle("InvCellItem", parent=normal, fontName=FONT_BOLD, fontSize=9,
                                        leading=12, textColor=SLATE_800),
            "cell_note": ParagraphStyle("InvCellNote", parent=normal, fontName=FONT_REGULAR, fontSize=7.5,
                                        leading=10, textColor=SLATE_500),
            "total_label": ParagraphStyle("InvTotalLabel", parent=normal, fontName=FONT_BOLD, fontSize=11,
                                          leading=14, textColor=SLATE_900),
            "total_value": ParagraphStyle("InvTotalValue", parent=normal, fontName=FONT_BOLD, fontSize=14,
                                          leading=18, alignment=TA_RIGHT, textColor=BRAND_ORANGE),
            "quote_title": ParagraphStyle("InvQuoteTitle", parent=normal, fontName=FONT_BOLD, fontSize=10,
                                          leading=13, alignment=TA_CENTER, textColor=SLATE_800),
            "quote_notice": ParagraphStyle("InvQuoteNotice", parent=normal, fontName=FONT_REGULAR, fontSize=8,
                                           leading=10, alignment=TA_CENTER, textColor=SLATE_500),
            "footer": ParagraphStyle("InvFooter", parent=normal, fontName=FONT_REGULAR, fontSize=7.5,
                                     leading=10, alignment=TA_LEFT, textColor=SLATE_400),
            "footer_brand": ParagraphStyle("InvFooterBrand", parent=normal, fontName=FONT_BOLD, fontSize=13,
                                           leading=15, alignment=TA_RIGHT, textColor=SLATE_200),
        }

    def render(
        self,
        document: OrderDocument,
        settings: Optional[OrganizationSettings],
        output_path: str,
    ) -> str:
        """
        Render the invoice PDF.

        Args:
            document: Canonical order document
            settings: Organization branding (None -> defaults)
            output_path: Target PDF path

        Returns:
            Path to the generated PDF

        Raises:
            DocumentExportError: reportlab could not build the file
        """
        layout = build_invoice_layout(document, settings, self.pricing_resolver)
        try:
            ensure_parent_dir(output_path)
            doc = SimpleDocTemplate(
                output_path,
                pagesize=A4,
                leftMargin=15 * mm,
                rightMargin=15 * mm,
                topMargin=12 * mm,
                bottomMargin=15 * mm,
                title=f"Invoice-{layout.identifier}",
                author=layout.sender_name,
            )
            doc.build(self._flowables(layout, doc.width))
        except Exception as e:
            get_logger().error(f"Invoice {layout.identifier} - PDF build failed: {e}",
                               component="InvoiceRenderer", exc_info=True)
            raise DocumentExportError("Invoice", layout.identifier, str(e)) from e

        return output_path

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _flowables(self, layout: InvoiceLayout, width: float):
        elements = []

        # Brand bar
        bar = Table([[""]], colWidths=[width], rowHeights=[2 * mm])
        bar.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), BRAND_ORANGE)]))
        elements.append(bar)
        elements.append(Spacer(1, 8 * mm))

        elements.append(self._header(layout, width))
        elements.append(Spacer(1, 8 * mm))
        elements.append(self._parties(layout, width))
        elements.append(Spacer(1, 8 * mm))
        elements.append(self._items(layout, width))
        elements.append(Spacer(1, 6 * mm))
        elements.append(self._totals(layout, width))
        elements.append(Spacer(1, 14 * mm))
        elements.append(self._footer(layout, width))
        return elements

    def _header(self, layout: InvoiceLayout, width: float) -> Table:
        s = self.styles
        left = []
        logo = existing_file(layout.logo_path)
        if logo:
            image = Image(logo)
            ratio = (18 * mm) / float(image.imageHeight or 1)
            image.drawHeight = 18 * mm
            image.drawWidth = image.imageWidth * ratio
            image.hAlign = "LEFT"
            left.append(image)
        else:
            left.append(Paragraph(markup(config.ORG_SHORT_NAME), s["brand"]))
        left.append(Spacer(1, 3 * mm))
        left.append(Paragraph(markup(layout.sender_name), s["sender_name"]))
        left.append(Paragraph(markup(layout.sender_address), s["sender"]))
        for line in layout.sender_contact:
            left.append(Paragraph(markup(line), s["sender"]))

        pill_bg, pill_fg = (EMERALD_100, EMERALD_800) if layout.payment_is_paid else (AMBER_50, AMBER_700)
        pill_style = ParagraphStyle("InvPillColored", parent=s["pill"], textColor=pill_fg)
        pill = Table([[Paragraph(markup(layout.payment_label.upper()), pill_style)]], colWidths=[34 * mm])
        pill.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), pill_bg),
            ("BOX", (0, 0), (-1, -1), 0.5, pill_fg),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]))
        pill.hAlign = "RIGHT"

        right = [
            Paragraph("INVOICE", s["title"]),
            Paragraph(markup(f"#{layout.identifier}"), s["meta_id"]),
            Paragraph(markup(f"Date: {layout.date_text}"), s["meta"]),
            Spacer(1, 2 * mm),
            pill,
        ]

        table = Table([[left, right]], colWidths=[width * 0.58, width * 0.42])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return table

    def _party_cell(self, party: PartyBlock):
        s = self.styles
        cell = [
            Paragraph(markup(party.heading.upper()), s["heading"]),
            Paragraph(markup(party.name), s["party_name"]),
        ]
        if party.company:
            cell.append(Paragraph(markup(party.company), s["party"]))
        cell.append(Paragraph(markup(party.address), s["party"]))
        if party.contact:
            cell.append(Spacer(1, 2 * mm))
            cell.append(Paragraph(markup(party.contact), s["party"]))
        return cell

    def _parties(self, layout: InvoiceLayout, width: float) -> Table:
        table = Table(
            [[self._party_cell(layout.bill_to), self._party_cell(layout.ship_to)]],
            colWidths=[width / 2, width / 2],
        )
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEABOVE", (0, 0), (-1, 0), 0.5, SLATE_100),
            ("LINEBELOW", (0, -1), (-1, -1), 0.5, SLATE_100),
            ("TOPPADDING", (0, 0), (-1, -1), 10),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return table

    def _items(self, layout: InvoiceLayout, width: float) -> Table:
        s = self.styles
        header = [Paragraph(markup(col.upper()), s["th"]) for col in layout.columns]
        data = [header]
        for row in layout.rows:
            description = [Paragraph(markup(row.description), s["cell_item"])]
            if row.note:
                description.append(Paragraph(markup(row.note), s["cell_note"]))
            cells = [description] + [Paragraph(markup(value), s["cell"]) for value in row.cells(layout.shows_prices)[1:]]
            data.append(cells)

        if layout.shows_prices:
            col_widths = [width * 0.50, width * 0.14, width * 0.18, width * 0.18]
        else:
            col_widths = [width * 0.80, width * 0.20]

        table = Table(data, colWidths=col_widths, repeatRows=1)
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), SLATE_50),
            ("LINEBELOW", (0, 0), (-1, 0), 0.75, SLATE_200),
            ("LINEBELOW", (0, 1), (-1, -1), 0.25, SLATE_100),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ("ALIGN", (1, 0), (1, -1), "CENTER"),
        ]
        if layout.shows_prices:
            style.append(("ALIGN", (2, 0), (-1, -1), "RIGHT"))
        table.setStyle(TableStyle(style))
        return table

    def _totals(self, layout: InvoiceLayout, width: float) -> Table:
        s = self.styles
        if layout.shows_prices:
            data = [
                [Paragraph("Subtotal", s["cell"]),
                 Paragraph(markup(layout.subtotal_text), ParagraphStyle("InvSubVal", parent=s["cell"], alignment=TA_RIGHT))],
                [Paragraph("Total Due", s["total_label"]), Paragraph(markup(layout.total_text), s["total_value"])],
            ]
            block = Table(data, colWidths=[40 * mm, 40 * mm])
            block.setStyle(TableStyle([
                ("LINEBELOW", (0, 0), (-1, 0), 0.5, SLATE_100),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("TOPPADDING", (0, 0), (-1, -1), 5),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
            ]))
        else:
            data = [
                [Paragraph(markup(layout.quote_title), s["quote_title"])],
                [Paragraph(markup(layout.quote_notice), s["quote_notice"])],
            ]
            block = Table(data, colWidths=[80 * mm])
            block.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, -1), SLATE_50),
                ("BOX", (0, 0), (-1, -1), 0.5, SLATE_100),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]))

        wrapper = Table([["", block]], colWidths=[width - 84 * mm, 84 * mm])
        wrapper.setStyle(TableStyle([
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return wrapper

    def _footer(self, layout: InvoiceLayout, width: float) -> Table:
        s = self.styles
        left = [
            Paragraph("<b>Terms &amp; Conditions</b>", s["footer"]),
            Paragraph(markup(layout.terms), s["footer"]),
        ]
        right = [
            Paragraph(markup(layout.footer_brand), s["footer_brand"]),
            Paragraph(markup(layout.footer_tagline.upper()),
                      ParagraphStyle("InvFooterTag", parent=s["footer"], alignment=TA_RIGHT)),
        ]
        table = Table([[left, right]], colWidths=[width * 0.65, width * 0.35])
        table.setStyle(TableStyle([
            ("LINEABOVE", (0, 0), (-1, 0), 1.5, SLATE_100),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return table
