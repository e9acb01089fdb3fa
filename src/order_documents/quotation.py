"""
FaaS Quotation Document Generator
=================================

Maps a flat quotation record near 1:1 into a QuotationDocument and draws it
as an A4 PDF: branded header, Bill To, delivery address, product/rental
table, stored price breakdown, total payable, terms and footer.

There is no normalization stage; the four monetary fields are printed as
stored and never recomputed.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

import config
from utils.logger import get_logger
from .errors import DocumentExportError
from .formatting import (
    format_amount,
    format_quotation_date,
    parse_timestamp,
    to_decimal,
)
from .models import OrganizationSettings, QuotationDocument
from .pdf_common import (
    BRAND_ORANGE,
    FONT_BOLD,
    FONT_REGULAR,
    SLATE_100,
    SLATE_500,
    ensure_parent_dir,
    markup,
)


DEFAULT_METAL_TYPE = "Industrial Grade"

QUOTATION_TERMS = (
    "1. Monthly rental is billed in advance",
    "2. Security deposit is refundable upon return of equipment",
    "3. Free maintenance and repairs included",
    "4. Minimum rental period: 1 month",
    "5. Delivery and installation included",
    "6. This quotation is valid for 30 days",
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _quantity(value: Any) -> int:
    try:
        return int(to_decimal(value))
    except (ValueError, ArithmeticError):
        return 0


def build_quotation_document(record: Dict[str, Any]) -> QuotationDocument:
    """
    Map a quotation row onto the document sections.

    Args:
        record: Row from the quotations table

    Returns:
        QuotationDocument; a missing valid_until becomes "30 Days from Date"
    """
    valid_until = parse_timestamp(record.get("valid_until"))
    if valid_until is not None:
        valid_until_text = format_quotation_date(valid_until)
    else:
        valid_until_text = _text(record.get("valid_until")) or config.QUOTATION_DEFAULT_VALIDITY

    return QuotationDocument(
        quotation_number=_text(record.get("quotation_number")),
        date=format_quotation_date(parse_timestamp(record.get("created_at"))),
        valid_until=valid_until_text,
        customer_name=_text(record.get("customer_name")),
        customer_email=_text(record.get("customer_email")),
        customer_phone=_text(record.get("customer_phone")),
        company_name=_text(record.get("company_name")),
        gst_number=_text(record.get("gst_number")),
        delivery_address=_text(record.get("delivery_address")),
        city=_text(record.get("city")),
        state=_text(record.get("state")),
        pincode=_text(record.get("pincode")),
        product_name=_text(record.get("product_name")),
        metal_type=_text(record.get("metal_type")) or DEFAULT_METAL_TYPE,
        rental_duration=_text(record.get("rental_duration")),
        quantity=_quantity(record.get("quantity")),
        monthly_rental=to_decimal(record.get("monthly_rental_amount", record.get("monthly_rental"))),
        setup_fee=to_decimal(record.get("setup_fee")),
        deposit_amount=to_decimal(record.get("deposit_amount")),
        total_amount=to_decimal(record.get("total_amount")),
        special_requirements=_text(record.get("special_requirements")),
        status=_text(record.get("status")),
    )


def inr(amount) -> str:
    """Quotation money format, e.g. 'INR 1,25,000'."""
    return f"{config.QUOTATION_CURRENCY_LABEL} {format_amount(amount, 'en_IN')}"


class QuotationDocumentGenerator:
    """Generates downloadable FaaS quotation PDFs"""

    def __init__(self):
        normal = getSampleStyleSheet()["Normal"]
        self.styles = {
            "brand": ParagraphStyle("QBrand", parent=normal, fontName=FONT_BOLD, fontSize=22,
                                    leading=26, textColor=colors.white),
            "brand_sub": ParagraphStyle("QBrandSub", parent=normal, fontName=FONT_REGULAR, fontSize=9,
                                        leading=12, textColor=colors.white),
            "number": ParagraphStyle("QNumber", parent=normal, fontName=FONT_BOLD, fontSize=13,
                                     leading=16, alignment=TA_RIGHT, textColor=colors.white),
            "meta": ParagraphStyle("QMeta", parent=normal, fontName=FONT_REGULAR, fontSize=8.5,
                                   leading=11, alignment=TA_RIGHT, textColor=colors.white),
            "heading": ParagraphStyle("QHeading", parent=normal, fontName=FONT_BOLD, fontSize=11,
                                      leading=14, spaceAfter=3),
            "body": ParagraphStyle("QBody", parent=normal, fontName=FONT_REGULAR, fontSize=9.5,
                                   leading=13),
            "terms": ParagraphStyle("QTerms", parent=normal, fontName=FONT_REGULAR, fontSize=8,
                                    leading=11),
            "footer": ParagraphStyle("QFooter", parent=normal, fontName=FONT_REGULAR, fontSize=8,
                                     leading=11, alignment=TA_CENTER, textColor=SLATE_500),
        }

    def render(
        self,
        quotation: QuotationDocument,
        output_path: str,
        settings: Optional[OrganizationSettings] = None,
    ) -> str:
        """
        Render the quotation PDF.

        Returns:
            Path to the generated PDF

        Raises:
            DocumentExportError: reportlab could not build the file
        """
        settings = settings or OrganizationSettings.defaults()
        try:
            ensure_parent_dir(output_path)
            doc = SimpleDocTemplate(
                output_path,
                pagesize=A4,
                leftMargin=15 * mm,
                rightMargin=15 * mm,
                topMargin=10 * mm,
                bottomMargin=15 * mm,
                title=f"Quotation-{quotation.quotation_number}",
            )
            doc.build(self._flowables(quotation, settings, doc.width))
        except Exception as e:
            get_logger().error(f"Quotation {quotation.quotation_number} - PDF build failed: {e}",
                               component="QuotationGenerator", exc_info=True)
            raise DocumentExportError("Quotation", quotation.quotation_number, str(e)) from e
        return output_path

    def _flowables(self, q: QuotationDocument, settings: OrganizationSettings, width: float):
        s = self.styles
        elements = []

        # ── Header band ─────────────────────────────────────────
        brand = [
            Paragraph(markup(config.ORG_SHORT_NAME), s["brand"]),
            Paragraph("Ai Robo Fab Solutions", s["brand_sub"]),
            Paragraph("Furniture as a Service", s["brand_sub"]),
        ]
        meta = [
            Paragraph(markup(f"Quotation #{q.quotation_number}"), s["number"]),
            Paragraph(markup(f"Date: {q.date}"), s["meta"]),
            Paragraph(markup(f"Valid Until: {q.valid_until}"), s["meta"]),
        ]
        header = Table([[brand, meta]], colWidths=[width * 0.5, width * 0.5])
        header.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), BRAND_ORANGE),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), 10),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
        ]))
        elements.append(header)
        elements.append(Spacer(1, 8 * mm))

        # ── Bill To ─────────────────────────────────────────────
        elements.append(Paragraph("Bill To:", s["heading"]))
        for line in (q.customer_name, q.company_name, q.customer_email, q.customer_phone):
            if line:
                elements.append(Paragraph(markup(line), s["body"]))
        if q.gst_number:
            elements.append(Paragraph(markup(f"GST: {q.gst_number}"), s["body"]))
        elements.append(Spacer(1, 4 * mm))

        # ── Delivery address ───────────────────────────────────
        elements.append(Paragraph("Delivery Address:", s["heading"]))
        if q.delivery_address:
            elements.append(Paragraph(markup(q.delivery_address), s["body"]))
        elements.append(Paragraph(markup(q.city_line), s["body"]))
        elements.append(Spacer(1, 6 * mm))

        # ── Product / rental terms ─────────────────────────────
        product = Table(
            [
                ["Product", "Metal Type", "Duration", "Quantity", "Monthly Rate"],
                [
                    Paragraph(markup(q.product_name), s["body"]),
                    q.metal_type,
                    q.rental_duration[:1].upper() + q.rental_duration[1:],
                    f"{q.quantity} units",
                    inr(q.monthly_rental),
                ],
            ],
            colWidths=[width * 0.32, width * 0.18, width * 0.14, width * 0.14, width * 0.22],
        )
        product.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), BRAND_ORANGE),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
            ("FONTNAME", (0, 1), (-1, -1), FONT_REGULAR),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        elements.append(product)
        elements.append(Spacer(1, 6 * mm))

        if q.special_requirements:
            elements.append(Paragraph("Special Requirements:", s["heading"]))
            elements.append(Paragraph(markup(q.special_requirements), s["body"]))
            elements.append(Spacer(1, 4 * mm))

        # ── Price breakdown (stored values) ────────────────────
        breakdown = Table(
            [
                ["Monthly Rental", inr(q.monthly_rental)],
                ["Setup Fee (One-time)", inr(q.setup_fee)],
                ["Security Deposit (Refundable)", inr(q.deposit_amount)],
            ],
            colWidths=[width * 0.75, width * 0.25],
        )
        breakdown.setStyle(TableStyle([
            ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
            ("FONTNAME", (0, 0), (0, -1), FONT_REGULAR),
            ("FONTNAME", (1, 0), (1, -1), FONT_BOLD),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
        ]))
        elements.append(breakdown)
        elements.append(Spacer(1, 2 * mm))

        total = Table([["Total Amount Payable", inr(q.total_amount)]], colWidths=[width * 0.75, width * 0.25])
        total.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), BRAND_ORANGE),
            ("TEXTCOLOR", (0, 0), (-1, -1), colors.white),
            ("FONTNAME", (0, 0), (-1, -1), FONT_BOLD),
            ("FONTSIZE", (0, 0), (-1, -1), 11),
            ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]))
        elements.append(total)
        elements.append(Spacer(1, 8 * mm))

        # ── Terms ──────────────────────────────────────────────
        elements.append(Paragraph("Terms &amp; Conditions:", s["heading"]))
        for term in QUOTATION_TERMS:
            elements.append(Paragraph(markup(term), s["terms"]))
        elements.append(Spacer(1, 10 * mm))

        # ── Footer ─────────────────────────────────────────────
        contact_email = settings.email or config.ORG_CONTACT_EMAIL
        footer = Table(
            [
                [Paragraph(markup(f"{settings.name} | {settings.website} | {contact_email}"), s["footer"])],
                [Paragraph("Thank you for choosing FaaS!", s["footer"])],
            ],
            colWidths=[width],
        )
        footer.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), SLATE_100)]))
        elements.append(footer)
        return elements
