"""Invoice PDF rendering.

Production renders through a template-rendering API: the structured invoice
data is posted against a template id, which yields a render id whose PDF is
then downloaded. Without API credentials a local ReportLab document is built
instead, so development and sandbox runs still attach a real PDF.
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import requests
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from negotiator.core.config import Config
from negotiator.core.exceptions import InvoiceRenderError
from negotiator.utils.ids import prefixed_id

logger = logging.getLogger(__name__)

COMPANY = {
    "name": "Debt Collection Services",
    "address": "123 Business Street, Suite 100",
    "city": "Business City, BC 12345",
    "phone": "(555) 123-4567",
    "email": "billing@debtcollection.com",
}


@dataclass(frozen=True)
class InvoiceData:
    user_id: str
    user_name: str
    user_email: str
    phone_number: str
    amount: float
    debt_before: float
    debt_after: float
    invoice_date: date
    due_date: date

    @property
    def is_full_payment(self) -> bool:
        return self.debt_after == 0


@dataclass(frozen=True)
class RenderedInvoice:
    invoice_id: str
    filename: str
    content_base64: str

    @property
    def content(self) -> bytes:
        return base64.b64decode(self.content_base64)


def build_template_data(invoice_id: str, data: InvoiceData) -> dict[str, Any]:
    """Structured payload the invoice template is rendered against."""
    return {
        "invoice_number": invoice_id,
        "invoice_date": data.invoice_date.isoformat(),
        "due_date": data.due_date.isoformat(),
        "customer": {
            "name": data.user_name,
            "email": data.user_email,
            "phone": data.phone_number,
        },
        "payment": {
            "amount": f"{data.amount:.2f}",
            "debt_before": f"{data.debt_before:.2f}",
            "debt_after": f"{data.debt_after:.2f}",
        },
        "company": dict(COMPANY),
    }


class InvoiceRenderer:
    """Render invoice PDFs remotely (template API) or locally (ReportLab)."""

    def __init__(self, config: Config, http: requests.Session | None = None) -> None:
        self.config = config
        self.http = http or requests.Session()

    def render(self, data: InvoiceData) -> RenderedInvoice:
        invoice_id = prefixed_id("INV")
        try:
            if self.config.invoice_rendering_enabled:
                pdf_bytes = self._render_remote(invoice_id, data)
            else:
                pdf_bytes = self._render_local(invoice_id, data)
        except InvoiceRenderError:
            raise
        except (requests.exceptions.RequestException, ValueError, OSError) as exc:
            logger.error(
                "invoice.render.failed",
                extra={"event": "invoice.render.failed", "user_id": data.user_id, "error": str(exc)},
            )
            raise InvoiceRenderError(f"Invoice PDF generation failed: {exc}") from exc

        logger.info(
            "invoice.render.succeeded",
            extra={"event": "invoice.render.succeeded", "user_id": data.user_id, "invoice_id": invoice_id},
        )
        return RenderedInvoice(
            invoice_id=invoice_id,
            filename=f"{invoice_id}.pdf",
            content_base64=base64.b64encode(pdf_bytes).decode("ascii"),
        )

    def _render_remote(self, invoice_id: str, data: InvoiceData) -> bytes:
        base_url = self.config.INVOICE_RENDER_URL
        headers = {"Authorization": f"Bearer {self.config.INVOICE_RENDER_API_KEY}"}
        timeout = (5, self.config.HTTP_TIMEOUT_SECONDS)

        response = self.http.post(
            f"{base_url}/render/{self.config.INVOICE_TEMPLATE_ID}",
            json={"data": build_template_data(invoice_id, data), "convertTo": "pdf"},
            headers=headers,
            timeout=timeout,
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise InvoiceRenderError("Invoice PDF generation failed: unexpected render response")
        nested = body.get("data")
        render_id = body.get("renderId") or (nested.get("renderId") if isinstance(nested, dict) else None)
        if not render_id:
            raise InvoiceRenderError("Invoice PDF generation failed: render response has no renderId")

        download = self.http.get(f"{base_url}/render/{render_id}", headers=headers, timeout=timeout)
        download.raise_for_status()
        if not download.content:
            raise InvoiceRenderError("Invoice PDF generation failed: empty document")
        return download.content

    def _render_local(self, invoice_id: str, data: InvoiceData) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=inch,
            leftMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
            title=f"Invoice {invoice_id}",
        )
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "InvoiceTitle",
            parent=styles["Heading1"],
            fontSize=22,
            textColor=colors.HexColor("#2C3E50"),
            spaceAfter=24,
            alignment=TA_CENTER,
        )
        footer_style = ParagraphStyle(
            "Footer",
            parent=styles["Normal"],
            fontSize=9,
            textColor=colors.grey,
            alignment=TA_CENTER,
        )

        elements = [
            Paragraph(COMPANY["name"], title_style),
            Paragraph(
                f"{COMPANY['address']}<br/>{COMPANY['city']}<br/>{COMPANY['email']} | {COMPANY['phone']}",
                styles["Normal"],
            ),
            Spacer(1, 0.3 * inch),
            Paragraph(f"INVOICE {invoice_id}", styles["Heading1"]),
            Spacer(1, 0.2 * inch),
        ]

        bill_to = Table(
            [
                ["Bill To:", "", "Invoice Date:", data.invoice_date.strftime("%B %d, %Y")],
                [data.user_name, "", "Due Date:", data.due_date.strftime("%B %d, %Y")],
                [data.user_email, "", "Amount Due:", f"${data.amount:,.2f}"],
                [data.phone_number, "", "", ""],
            ],
            colWidths=[2.5 * inch, 0.5 * inch, 1.5 * inch, 2 * inch],
        )
        bill_to.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (0, 0), "Helvetica-Bold"),
            ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 12),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]))
        elements.extend([bill_to, Spacer(1, 0.4 * inch)])

        balance = Table(
            [
                ["Description", "Amount"],
                ["Outstanding balance before payment", f"${data.debt_before:,.2f}"],
                ["Agreed payment", f"${data.amount:,.2f}"],
                ["Remaining balance after payment", f"${data.debt_after:,.2f}"],
            ],
            colWidths=[4.5 * inch, 2 * inch],
        )
        balance.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        elements.extend([balance, Spacer(1, 0.5 * inch)])

        elements.append(Paragraph("<b>Payment Instructions:</b>", styles["Heading2"]))
        elements.append(Paragraph(
            f"Please complete the payment by {data.due_date.strftime('%B %d, %Y')}.<br/>"
            f"Reference: {invoice_id}",
            styles["Normal"],
        ))
        elements.append(Spacer(1, 0.5 * inch))
        elements.append(Paragraph(
            f"Questions? Contact us at {COMPANY['email']} or {COMPANY['phone']}",
            footer_style,
        ))

        doc.build(elements)
        return buffer.getvalue()
