"""
Invoice draft validation.

Pure: maps a draft to an ``InvoiceErrors`` map and never raises for bad
input. An empty map means the draft may be saved.
"""

from invoicedesk.models.invoice import Invoice, InvoiceLineItem
from invoicedesk.schemas.invoice import InvoiceDraft, InvoiceErrors, LineItemDraft
from invoicedesk.utils.dates import normalize_due_date
from invoicedesk.utils.numbers import fits_numeric, is_blank, is_valid_number, parse_decimal


REQUIRED_TEXT_FIELDS = {
    "company": "Company name is required",
    "company_address": "Company address is required",
    "client": "Client name is required",
    "client_address": "Client address is required",
    "invoice_number": "Invoice number is required",
}

MAX_DISCOUNT = 100


def _fits_column(value, column) -> bool:
    return fits_numeric(value, column.type.precision, column.type.scale)


def _range_message(label: str, column) -> str:
    limit = 10 ** (column.type.precision - column.type.scale)
    return f"{label} allows at most {column.type.scale} decimal places and must be below {limit}"


def validate_line_item(item: LineItemDraft, position: int) -> str | None:
    """
    Check one item; report only the first failing rule.

    Args:
        item: Draft line item
        position: 1-based row number used in the message
    """
    prefix = f"Item #{position}"
    columns = InvoiceLineItem.__table__.c

    if is_blank(item.description):
        return f"{prefix}: Description is required"

    quantity = parse_decimal(item.quantity)
    if not is_valid_number(item.quantity) or quantity is None or quantity <= 0:
        return f"{prefix}: Quantity must be a positive number"
    if not _fits_column(item.quantity, columns.quantity):
        return f"{prefix}: {_range_message('Quantity', columns.quantity)}"

    if not is_valid_number(item.price):
        return f"{prefix}: Price must be a valid number"
    if not _fits_column(item.price, columns.price):
        return f"{prefix}: {_range_message('Price', columns.price)}"

    if not is_valid_number(item.tax_rate):
        return f"{prefix}: Tax rate must be a valid number"
    if not _fits_column(item.tax_rate, columns.tax_rate):
        return f"{prefix}: {_range_message('Tax rate', columns.tax_rate)}"

    return None


def validate_invoice(draft: InvoiceDraft) -> InvoiceErrors:
    """Validate required header fields, the due date and every line item."""
    errors: dict = {}

    for field, message in REQUIRED_TEXT_FIELDS.items():
        if is_blank(getattr(draft, field)):
            errors[field] = message

    if is_blank(draft.due_date):
        errors["due_date"] = "Due date is required"
    elif normalize_due_date(draft.due_date) is None:
        errors["due_date"] = "Due date is invalid"

    discount = parse_decimal(draft.discount)
    if not is_valid_number(draft.discount) or (discount is not None and discount > MAX_DISCOUNT):
        errors["discount"] = f"Discount must be a percentage between 0 and {MAX_DISCOUNT}"
    elif not _fits_column(draft.discount, Invoice.__table__.c.discount):
        errors["discount"] = _range_message("Discount", Invoice.__table__.c.discount)

    if not draft.items:
        errors["general"] = "At least one line item is required"
    else:
        item_errors = [
            validate_line_item(item, position)
            for position, item in enumerate(draft.items, start=1)
        ]
        if any(item_errors):
            errors["items"] = item_errors

    return InvoiceErrors(**errors)
