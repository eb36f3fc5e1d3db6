"""Box barcode generation and label rendering.

Barcodes are derived from a base value: the digits of the base followed by
the 1-based box number, zero-padded. Rendering uses python-barcode for
single SVG images and reportlab for printable PDF label sheets.
"""

import io
import re
from dataclasses import dataclass

import barcode
from barcode.errors import BarcodeError
from barcode.writer import SVGWriter
from reportlab.graphics.barcode import code128
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from wms.core.exceptions import ValidationError

_NON_DIGITS = re.compile(r"\D")

# Label sheet geometry (A4, 3 x 8 labels)
LABEL_COLUMNS = 3
LABEL_ROWS = 8
LABEL_MARGIN_X = 8 * mm
LABEL_MARGIN_Y = 12 * mm
MAX_LABEL_NAME_LENGTH = 30


@dataclass(frozen=True)
class LabelData:
    """Content printed on one box label."""

    barcode: str
    product_name: str
    quantity: int
    batch_number: str
    color: str | None = None
    size: str | None = None


def barcode_stem(
    base_barcode: str | None,
    *,
    prefix: str,
    stock_in_id: int,
    batch_sequence: int,
) -> str:
    """Stem that box numbers are appended to.

    With a base barcode the stem is its numeric part. Without one, a stem is
    derived from the configured prefix, the stock-in id and the batch's
    position in the request, which keeps it unique per batch.

    Raises:
        ValidationError: If the base barcode contains no digits.
    """
    if base_barcode:
        digits = _NON_DIGITS.sub("", base_barcode)
        if not digits:
            raise ValidationError(
                message=f"Base barcode '{base_barcode}' contains no digits",
                details={"base_barcode": base_barcode},
            )
        return digits
    return f"{prefix}{stock_in_id:06d}{batch_sequence:02d}"


def box_barcode(stem: str, box_number: int, width: int = 3) -> str:
    """Barcode of one box: stem plus zero-padded 1-based box number."""
    if box_number < 1:
        raise ValueError("box_number is 1-based")
    return f"{stem}{box_number:0{width}d}"


def box_barcodes(stem: str, box_count: int, width: int = 3) -> list[str]:
    """Barcodes for boxes 1..box_count of a batch."""
    return [box_barcode(stem, n, width) for n in range(1, box_count + 1)]


def find_duplicates(values: list[str]) -> list[str]:
    """Values occurring more than once, in first-seen order."""
    seen: set[str] = set()
    dupes: dict[str, None] = {}
    for value in values:
        if value in seen:
            dupes[value] = None
        seen.add(value)
    return list(dupes)


def render_svg(value: str, symbology: str = "code128", *, write_text: bool = True) -> bytes:
    """Render a single barcode as an SVG document.

    Raises:
        ValidationError: If the value cannot be encoded in the symbology.
    """
    try:
        barcode_class = barcode.get_barcode_class(symbology)
        instance = barcode_class(value, writer=SVGWriter())
        buffer = io.BytesIO()
        instance.write(
            buffer,
            options={
                "write_text": write_text,
                "module_width": 0.3,
                "module_height": 15.0,
                "quiet_zone": 2.0,
                "font_size": 8,
                "text_distance": 4.0,
            },
        )
    except (BarcodeError, ValueError) as e:
        raise ValidationError(
            message=f"Cannot encode '{value}' as {symbology}: {e}",
            details={"barcode": value, "symbology": symbology},
        ) from e
    return buffer.getvalue()


def _truncate(text: str, limit: int = MAX_LABEL_NAME_LENGTH) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def render_label_sheet(labels: list[LabelData], title: str | None = None) -> bytes:
    """Render box labels onto A4 pages as a PDF.

    Each label shows the product name, a Code128 barcode with its value,
    the box quantity with color/size, and the batch number.
    """
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    if title:
        pdf.setTitle(title)

    page_width, page_height = A4
    label_width = (page_width - 2 * LABEL_MARGIN_X) / LABEL_COLUMNS
    label_height = (page_height - 2 * LABEL_MARGIN_Y) / LABEL_ROWS
    per_page = LABEL_COLUMNS * LABEL_ROWS

    for index, label in enumerate(labels):
        if index and index % per_page == 0:
            pdf.showPage()

        slot = index % per_page
        column, row = slot % LABEL_COLUMNS, slot // LABEL_COLUMNS
        x = LABEL_MARGIN_X + column * label_width
        y = page_height - LABEL_MARGIN_Y - (row + 1) * label_height

        pdf.setLineWidth(0.3)
        pdf.rect(x + 1 * mm, y + 1 * mm, label_width - 2 * mm, label_height - 2 * mm)

        centre = x + label_width / 2
        pdf.setFont("Helvetica-Bold", 8)
        pdf.drawCentredString(centre, y + label_height - 6 * mm, _truncate(label.product_name))

        symbol = code128.Code128(label.barcode, barHeight=10 * mm, barWidth=0.28 * mm)
        bar_x = centre - symbol.width / 2
        symbol.drawOn(pdf, bar_x, y + 10 * mm)

        pdf.setFont("Helvetica", 7)
        pdf.drawCentredString(centre, y + 7 * mm, label.barcode)

        attributes = [f"Qty: {label.quantity}"]
        if label.color:
            attributes.append(label.color)
        if label.size:
            attributes.append(label.size)
        pdf.setFont("Helvetica", 6)
        pdf.drawCentredString(
            centre, y + 3.5 * mm, f"{' | '.join(attributes)}  ({label.batch_number})"
        )

    if not labels:
        pdf.setFont("Helvetica", 10)
        pdf.drawString(LABEL_MARGIN_X, page_height - LABEL_MARGIN_Y, "No boxes to label")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
