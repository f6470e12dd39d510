"""Export service: invoice PDFs for completed checkouts."""

import io
import logging
import uuid
from datetime import date

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.services.payment_service import payment_service
from travelmart.services.whatsapp_service import format_idr

logger = logging.getLogger(__name__)

BOOKING_TYPE_LABELS = {
    "baggage": "Baggage Storage",
    "airport_transfer": "Airport Transfer",
    "car": "Car Rental",
}


class ExportService:
    """Generates invoice PDFs."""

    async def generate_invoice_pdf(self, db: AsyncSession, payment_id: uuid.UUID) -> bytes:
        receipt = await payment_service.get_receipt(db, payment_id)
        if receipt is None:
            raise ValueError("Payment not found")
        return self.render_invoice(receipt)

    def render_invoice(self, receipt: dict) -> bytes:
        payment = receipt["payment"]
        bookings = receipt["bookings"]

        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=A4, topMargin=0.5 * inch)
        styles = getSampleStyleSheet()
        elements = []

        elements.append(Paragraph("TravelMart Invoice", styles["Title"]))
        elements.append(Spacer(1, 12))

        created = payment.created_at.date().isoformat() if payment.created_at else date.today().isoformat()
        info = [
            f"<b>Payment ID:</b> {payment.id}",
            f"<b>Customer:</b> {payment.customer_name or '-'}",
            f"<b>Email:</b> {payment.customer_email or '-'}",
            f"<b>Phone:</b> {payment.customer_phone or '-'}",
            f"<b>Payment method:</b> {payment.payment_method}"
            + (f" ({payment.bank_name})" if payment.bank_name else ""),
            f"<b>Status:</b> {payment.status}",
            f"<b>Date:</b> {created}",
        ]
        for line in info:
            elements.append(Paragraph(line, styles["Normal"]))
        elements.append(Spacer(1, 12))

        if bookings:
            elements.append(Paragraph("<b>Bookings</b>", styles["Heading2"]))
            rows = [["Service", "Booking", "Item", "Date", "Price"]]
            for b in bookings:
                rows.append([
                    BOOKING_TYPE_LABELS.get(b["booking_type"], b["booking_type"]),
                    b["booking_id"],
                    (b.get("item_name") or "")[:40],
                    b.get("start_date") or "",
                    format_idr(b["price"]),
                ])
            rows.append(["", "", "", "Total", format_idr(payment.amount)])

            table = Table(rows, colWidths=[1.2 * inch, 1.8 * inch, 2.0 * inch, 0.9 * inch, 1.1 * inch])
            table.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1D4ED8")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("GRID", (0, 0), (-1, -2), 0.5, colors.grey),
                ("ALIGN", (4, 1), (4, -1), "RIGHT"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ]))
            elements.append(table)
        else:
            elements.append(Paragraph(f"<b>Amount:</b> {format_idr(payment.amount)}", styles["Normal"]))

        doc.build(elements)
        logger.info(f"Invoice generated for payment {payment.id}")
        return buf.getvalue()


export_service = ExportService()
