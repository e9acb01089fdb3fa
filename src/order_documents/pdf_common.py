"""
Shared reportlab helpers for the document renderers.
"""
from __future__ import annotations

import os
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont


# ── Unicode font registration ──────────────────────────────────
# The rupee glyph is missing from the standard Type 1 fonts. We register a
# TTF with U+20B9 when one is installed; otherwise Helvetica is used and the
# glyph renders as a box, but the PDF is still valid.

_CANDIDATE_FONTS = [
    # (regular name, regular path, bold name, bold path)
    ("DejaVuSans", "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
     "DejaVuSans-Bold", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
    ("NotoSans", "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
     "NotoSans-Bold", "/usr/share/fonts/truetype/noto/NotoSans-Bold.ttf"),
    ("NirmalaUI", os.path.join(os.environ.get("WINDIR", "C:\\Windows"), "Fonts", "Nirmala.ttf"),
     "NirmalaUI-Bold", os.path.join(os.environ.get("WINDIR", "C:\\Windows"), "Fonts", "NirmalaB.ttf")),
]

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

for _name, _path, _bold_name, _bold_path in _CANDIDATE_FONTS:
    if os.path.exists(_path):
        try:
            pdfmetrics.registerFont(TTFont(_name, _path))
            FONT_REGULAR = _name
            FONT_BOLD = _name
            if os.path.exists(_bold_path):
                pdfmetrics.registerFont(TTFont(_bold_name, _bold_path))
                FONT_BOLD = _bold_name
            # Lets <b> markup inside Paragraphs resolve to the bold face
            pdfmetrics.registerFontFamily(
                FONT_REGULAR, normal=FONT_REGULAR, bold=FONT_BOLD,
                italic=FONT_REGULAR, boldItalic=FONT_BOLD,
            )
            break
        except Exception:
            continue


# Brand palette
BRAND_ORANGE = colors.HexColor("#FB923C")
SLATE_900 = colors.HexColor("#0F172A")
SLATE_800 = colors.HexColor("#1E293B")
SLATE_600 = colors.HexColor("#475569")
SLATE_500 = colors.HexColor("#64748B")
SLATE_400 = colors.HexColor("#94A3B8")
SLATE_200 = colors.HexColor("#E2E8F0")
SLATE_100 = colors.HexColor("#F1F5F9")
SLATE_50 = colors.HexColor("#F8FAFC")
EMERALD_100 = colors.HexColor("#D1FAE5")
EMERALD_800 = colors.HexColor("#065F46")
AMBER_50 = colors.HexColor("#FFFBEB")
AMBER_700 = colors.HexColor("#B45309")


def markup(text: Optional[str]) -> str:
    """Escape text for a Paragraph and keep its line breaks."""
    if not text:
        return ""
    return escape(str(text)).replace("\n", "<br/>")


def existing_file(path: Optional[str]) -> Optional[str]:
    """Return path when it points at a readable local file."""
    if path and os.path.isfile(path):
        return path
    return None


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
