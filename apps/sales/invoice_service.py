"""
Invoice PDF generation for bills.

Generates an A4 invoice with:
- Shop branding header
- Partial payment banner for bills with a balance due
- Invoice and customer details
- Items table and totals block
- Payment status badge
- QR code linking to the public invoice page
"""

import io
import logging
import os
from typing import Optional

from django.conf import settings
from django.utils import timezone

import qrcode
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch, mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from .models import Bill

logger = logging.getLogger(__name__)

PAID_COLOR = colors.HexColor("#15803d")
PENDING_COLOR = colors.HexColor("#b45309")


def format_amount(value) -> str:
    return f"Rs. {value:,.2f}"


class InvoiceGenerator:
    """
    Invoice generator for a single bill.
    """

    MARGIN = 20 * mm
    CONTENT_WIDTH = A4[0] - 2 * MARGIN

    def __init__(self, bill: Bill):
        """Initialize invoice generator with bill data."""
        self.bill = bill
        self.styles = getSampleStyleSheet()

        self._create_custom_styles()

    def _create_custom_styles(self):
        """Create custom paragraph styles for invoices."""
        self.shop_name_style = ParagraphStyle(
            "ShopName",
            parent=self.styles["Heading1"],
            fontSize=20,
            spaceAfter=6,
            alignment=1,  # Center alignment
            textColor=colors.black,
            fontName="Helvetica-Bold",
        )

        self.header_style = ParagraphStyle(
            "InvoiceHeader",
            parent=self.styles["Heading1"],
            fontSize=16,
            spaceAfter=12,
            alignment=1,
            textColor=colors.black,
            fontName="Helvetica-Bold",
        )

        self.body_style = ParagraphStyle(
            "InvoiceBody",
            parent=self.styles["Normal"],
            fontSize=10,
            spaceAfter=6,
            alignment=0,  # Left alignment
            textColor=colors.black,
        )

        self.banner_style = ParagraphStyle(
            "PendingBanner",
            parent=self.styles["Normal"],
            fontSize=11,
            alignment=1,
            textColor=colors.white,
            fontName="Helvetica-Bold",
        )

    def generate_pdf(self) -> bytes:
        """
        Generate the invoice PDF.

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=self.MARGIN,
            leftMargin=self.MARGIN,
            topMargin=self.MARGIN,
            bottomMargin=self.MARGIN,
            title=f"Invoice {self.bill.bill_id}",
        )

        story = []
        story.extend(self._build_shop_header())
        if self.bill.is_pending:
            story.extend(self._build_pending_banner())
        story.append(Paragraph("INVOICE", self.header_style))
        story.extend(self._build_invoice_info())
        story.extend(self._build_items_table())
        story.extend(self._build_totals_section())
        story.extend(self._build_status_badge())
        story.extend(self._build_footer())

        doc.build(story)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _build_shop_header(self):
        elements = [Paragraph(settings.SHOP_NAME, self.shop_name_style)]

        shop_info = [settings.SHOP_ADDRESS]
        if settings.SHOP_PHONE:
            shop_info.append(f"Phone: {settings.SHOP_PHONE}")
        if settings.SHOP_EMAIL:
            shop_info.append(f"Email: {settings.SHOP_EMAIL}")

        for info in filter(None, shop_info):
            elements.append(Paragraph(f"<para align='center'>{info}</para>", self.body_style))

        elements.append(Spacer(1, 12))
        elements.append(HRFlowable(width="100%", thickness=1, color=colors.black))
        elements.append(Spacer(1, 12))

        return elements

    def _build_pending_banner(self):
        text = f"PARTIAL PAYMENT - Balance due: {format_amount(self.bill.amount_due)}"
        if self.bill.due_date:
            text += f" by {self.bill.due_date.strftime('%d %b %Y')}"

        banner = Table([[Paragraph(text, self.banner_style)]], colWidths=[self.CONTENT_WIDTH])
        banner.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), PENDING_COLOR),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        return [banner, Spacer(1, 12)]

    def _build_invoice_info(self):
        created = timezone.localtime(self.bill.created_at)
        customer = self.bill.customer

        data = [
            [f"Invoice #: {self.bill.bill_id}", f"Customer: {customer.name}"],
            [f"Date: {created.strftime('%d %b %Y %H:%M')}", f"Phone: {customer.phone}"],
        ]

        table = Table(data, colWidths=[self.CONTENT_WIDTH / 2, self.CONTENT_WIDTH / 2])
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ]
            )
        )
        return [table, Spacer(1, 12)]

    def _build_items_table(self):
        data = [["#", "Item", "SKU", "Qty", "Price", "Total"]]

        for index, item in enumerate(self.bill.items.all(), start=1):
            data.append(
                [
                    str(index),
                    item.product_name,
                    item.sku or "-",
                    str(item.quantity),
                    format_amount(item.price),
                    format_amount(item.line_total),
                ]
            )

        col_widths = [10 * mm, 60 * mm, 35 * mm, 15 * mm, 25 * mm, 25 * mm]
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (3, 0), (-1, -1), "RIGHT"),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )

        return [table, Spacer(1, 12)]

    def _build_totals_section(self):
        bill = self.bill
        rows = [["Subtotal", format_amount(bill.subtotal)]]
        if bill.discount_amount > 0:
            rows.append(
                [f"Discount ({bill.discount_percent:g}%)", f"- {format_amount(bill.discount_amount)}"]
            )
        rows.append(["Total", format_amount(bill.final_amount)])
        rows.append(["Amount Paid", format_amount(bill.amount_paid)])
        if bill.amount_due > 0:
            rows.append(["Balance Due", format_amount(bill.amount_due)])
            if bill.due_date:
                rows.append(["Due Date", bill.due_date.strftime("%d %b %Y")])

        total_row = 1 if bill.discount_amount == 0 else 2
        table = Table(rows, colWidths=[120 * mm, 50 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("FONTNAME", (0, total_row), (-1, total_row), "Helvetica-Bold"),
                    ("LINEABOVE", (0, total_row), (-1, total_row), 1.5, colors.black),
                ]
            )
        )
        return [table, Spacer(1, 12)]

    def _build_status_badge(self):
        color = PENDING_COLOR if self.bill.is_pending else PAID_COLOR
        badge = Table(
            [[Paragraph(self.bill.payment_status, self.banner_style)]],
            colWidths=[40 * mm],
            hAlign="RIGHT",
        )
        badge.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), color),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return [badge, Spacer(1, 18)]

    def _build_footer(self):
        elements = [HRFlowable(width="100%", thickness=1, color=colors.black), Spacer(1, 12)]
        elements.append(
            Paragraph(
                f"<para align='center'>Thank you for shopping at {settings.SHOP_NAME}!</para>",
                self.body_style,
            )
        )

        qr_code = self._generate_qr_code()
        if qr_code:
            elements.append(Spacer(1, 12))
            elements.append(qr_code)
            elements.append(
                Paragraph("<para align='center'>Scan to view this invoice online</para>", self.body_style)
            )

        return elements

    def _generate_qr_code(self) -> Optional[Image]:
        """Generate QR code linking to the public invoice page."""
        try:
            qr = qrcode.QRCode(
                version=1,
                error_correction=qrcode.constants.ERROR_CORRECT_L,
                box_size=3,
                border=2,
            )
            qr.add_data(InvoiceService.get_invoice_url(self.bill))
            qr.make(fit=True)

            qr_img = qr.make_image(fill_color="black", back_color="white")

            buffer = io.BytesIO()
            qr_img.save(buffer, format="PNG")
            buffer.seek(0)

            img = Image(buffer, width=1 * inch, height=1 * inch)
            img.hAlign = "CENTER"

            return img

        except Exception as e:
            # The invoice is still usable without the QR code
            logger.warning(f"Error generating QR code for {self.bill.bill_id}: {e}")
            return None


class InvoiceService:
    """
    Service class for invoice operations.

    Provides invoice generation, storage and the URLs a bill is published at.
    """

    @staticmethod
    def filename(bill: Bill) -> str:
        return f"invoice_{bill.bill_id}.pdf"

    @staticmethod
    def generate_invoice(bill: Bill) -> bytes:
        return InvoiceGenerator(bill).generate_pdf()

    @staticmethod
    def save_invoice(bill: Bill) -> str:
        """
        Generate and save the invoice PDF, replacing any earlier version.

        Returns:
            File path of saved invoice
        """
        invoice_bytes = InvoiceService.generate_invoice(bill)

        invoices_dir = os.path.join(settings.MEDIA_ROOT, settings.INVOICE_DIRNAME)
        os.makedirs(invoices_dir, exist_ok=True)

        file_path = os.path.join(invoices_dir, InvoiceService.filename(bill))

        with open(file_path, "wb") as f:
            f.write(invoice_bytes)

        logger.info(f"Invoice PDF saved: {file_path}")
        return file_path

    @staticmethod
    def generate_and_save(bill: Bill) -> Optional[str]:
        """
        Best-effort variant of ``save_invoice`` used after a bill is committed.

        Returns:
            Public PDF URL, or None if the PDF could not be produced
        """
        try:
            InvoiceService.save_invoice(bill)
        except Exception as e:
            logger.error(f"Invoice PDF generation failed for {bill.bill_id}: {e}", exc_info=True)
            return None

        return InvoiceService.get_pdf_url(bill)

    @staticmethod
    def pdf_exists(bill: Bill) -> bool:
        path = os.path.join(settings.MEDIA_ROOT, settings.INVOICE_DIRNAME, InvoiceService.filename(bill))
        return os.path.exists(path)

    @staticmethod
    def get_pdf_url(bill: Bill) -> str:
        # Django prefixes a relative MEDIA_URL with "/" at runtime.
        media_path = settings.MEDIA_URL.strip("/")
        return (
            f"{settings.API_BASE_URL}/{media_path}/"
            f"{settings.INVOICE_DIRNAME}/{InvoiceService.filename(bill)}"
        )

    @staticmethod
    def get_invoice_url(bill: Bill) -> str:
        """Public invoice page on the storefront app."""
        return f"{settings.APP_BASE_URL}/invoice/{bill.public_token}"
