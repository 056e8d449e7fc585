# core/statement_exporter.py
"""
Customer Statement Exporter
Exports one customer's loan statement to PDF and DOCX.

PDF  -> reportlab
DOCX -> python-docx
"""

from pathlib import Path
from datetime import datetime
from typing import Dict, Any, List
from xml.sax.saxutils import escape

from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet

from docx import Document

from core import settings
from core.loan_metrics import classify_status, progress_percentage, sorted_monthly_totals
from utils.dates import month_key_to_label
from utils.formatting import money


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def _export_path(customer: Dict[str, Any], suffix: str) -> Path:
    settings.EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    loan_no = "".join(ch for ch in customer.get("loan_no", "") if ch.isalnum()) or "loan"
    return settings.EXPORT_DIR / f"statement_{loan_no}_{_timestamp()}.{suffix}"


# ==================================================
# STATEMENT CONTENT
# ==================================================
def statement_lines(
    customer: Dict[str, Any],
    summary: Dict[str, Any],
    payments: List[Dict[str, Any]],
) -> List[str]:
    """
    Shared plain-text body for both formats.
    Section headings are the lines ending with ":".
    """
    progress = progress_percentage(summary["total_paid"], summary["loan_amount"])
    status = classify_status(progress, summary["remaining"])

    lines = [
        f"Loan Statement: {customer.get('name', '')}",
        f"Loan No: {customer.get('loan_no', '')}",
        f"Mobile: {customer.get('mobile', '')}",
        f"Address: {customer.get('address') or '—'}",
        "",
        "Summary:",
        f"Loan Amount: {money(summary['loan_amount'])}",
        f"Total Paid: {money(summary['total_paid'])}",
        f"Remaining: {money(summary['remaining'])}",
        f"Progress: {progress:.1f}% ({status})",
        "",
        "Monthly Totals:",
    ]

    totals = sorted_monthly_totals(summary["monthly_totals"])
    if not totals:
        lines.append("No payments yet.")
    for key, amount in totals:
        lines.append(f"{month_key_to_label(key)}: {money(amount)}")

    lines += ["", "Payments:"]
    if not payments:
        lines.append("No payments yet.")
    for p in sorted(payments, key=lambda p: p["date"], reverse=True):
        lines.append(
            f"#{p.get('id')}  {p['date'].strftime('%d %b %Y %H:%M')}  {money(p['amount'])}"
        )

    return lines


# ==================================================
# PDF EXPORT
# ==================================================
def export_statement_pdf(customer, summary, payments) -> Path:
    """
    Export statement to PDF.
    Returns generated file path.
    """
    path = _export_path(customer, "pdf")

    styles = getSampleStyleSheet()
    story = []

    for i, line in enumerate(statement_lines(customer, summary, payments)):
        if i == 0:
            story.append(Paragraph(escape(line), styles["Title"]))
        elif line.endswith(":"):
            story.append(Paragraph(escape(line), styles["Heading2"]))
        elif line.strip():
            story.append(Paragraph(escape(line), styles["Normal"]))
        story.append(Spacer(1, 6))

    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        rightMargin=36,
        leftMargin=36,
        topMargin=36,
        bottomMargin=36,
    )

    doc.build(story)
    return path


# ==================================================
# DOCX EXPORT
# ==================================================
def export_statement_docx(customer, summary, payments) -> Path:
    path = _export_path(customer, "docx")

    doc = Document()

    for i, line in enumerate(statement_lines(customer, summary, payments)):
        if i == 0:
            doc.add_heading(line, level=1)
        elif line.endswith(":"):
            doc.add_heading(line.rstrip(":"), level=2)
        else:
            doc.add_paragraph(line)

    doc.save(path)
    return path
