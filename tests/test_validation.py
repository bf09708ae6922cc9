"""
Invoice draft validation tests.
"""

from invoicedesk.schemas.invoice import InvoiceDraft, LineItemDraft
from invoicedesk.services.validation import validate_invoice, validate_line_item


def _draft(**overrides) -> InvoiceDraft:
    values = {
        "company": "Acme Corp",
        "company_address": "1 Main St",
        "client": "Globex",
        "client_address": "2 Side St",
        "invoice_number": "INV-1",
        "due_date": "2026-11-18",
        "items": [LineItemDraft(description="Work", quantity="1", price="10")],
    }
    values.update(overrides)
    return InvoiceDraft(**values)


def test_valid_draft_has_no_errors():
    errors = validate_invoice(_draft())

    assert not errors.has_errors
    assert errors.as_dict() == {}


def test_missing_company_and_no_items_gives_exactly_two_errors():
    errors = validate_invoice(_draft(company="", items=[]))

    assert errors.as_dict() == {
        "company": "Company name is required",
        "general": "At least one line item is required",
    }
    assert errors.items is None


def test_blank_required_fields_are_each_reported():
    errors = validate_invoice(_draft(
        company="  ",
        company_address=None,
        client="",
        client_address="",
        invoice_number="",
    ))

    assert set(errors.as_dict()) == {
        "company",
        "company_address",
        "client",
        "client_address",
        "invoice_number",
    }


def test_missing_and_invalid_due_date():
    assert validate_invoice(_draft(due_date=None)).due_date == "Due date is required"
    assert validate_invoice(_draft(due_date="not a date")).due_date == "Due date is invalid"


def test_zero_quantity_names_position_and_later_items_are_checked():
    errors = validate_invoice(_draft(items=[
        LineItemDraft(description="Good", quantity="1", price="1"),
        LineItemDraft(description="Zero", quantity="0", price="1"),
        LineItemDraft(description="Bad price", quantity="1", price="-5"),
        LineItemDraft(description="Fine", quantity="3", price="2"),
    ]))

    assert errors.items == [
        None,
        "Item #2: Quantity must be a positive number",
        "Item #3: Price must be a valid number",
        None,
    ]


def test_only_first_failing_item_rule_is_reported():
    item = LineItemDraft(description="", quantity="abc", price="-1", tax_rate="x")

    assert validate_line_item(item, 1) == "Item #1: Description is required"


def test_item_rule_order():
    assert validate_line_item(
        LineItemDraft(description="A", quantity="", price="1"), 4
    ) == "Item #4: Quantity must be a positive number"
    assert validate_line_item(
        LineItemDraft(description="A", quantity="1", price="abc"), 1
    ) == "Item #1: Price must be a valid number"
    assert validate_line_item(
        LineItemDraft(description="A", quantity="1", price="1", tax_rate="-2"), 1
    ) == "Item #1: Tax rate must be a valid number"


def test_blank_price_and_tax_rate_are_accepted():
    item = LineItemDraft(description="A", quantity="1", price="", tax_rate=None)

    assert validate_line_item(item, 1) is None


def test_validation_does_not_touch_the_draft():
    draft = _draft(company="")
    before = draft.model_dump()

    validate_invoice(draft)

    assert draft.model_dump() == before


def test_values_the_item_columns_cannot_hold_are_rejected():
    assert validate_line_item(
        LineItemDraft(description="A", quantity="0.001", price="1"), 1
    ) == "Item #1: Quantity allows at most 2 decimal places and must be below 100000000"
    assert validate_line_item(
        LineItemDraft(description="A", quantity="1", price="19.999"), 2
    ) == "Item #2: Price allows at most 2 decimal places and must be below 10000000000"
    assert validate_line_item(
        LineItemDraft(description="A", quantity="1", price="1", tax_rate="7.125"), 3
    ) == "Item #3: Tax rate allows at most 2 decimal places and must be below 1000"
    assert validate_line_item(
        LineItemDraft(description="A", quantity="1", price="1", tax_rate="1000"), 1
    ) == "Item #1: Tax rate allows at most 2 decimal places and must be below 1000"


def test_fractional_values_within_two_places_are_accepted():
    item = LineItemDraft(description="A", quantity="1.50", price="19.99", tax_rate="7.25")

    assert validate_line_item(item, 1) is None


def test_discount_must_be_a_percentage():
    assert validate_invoice(_draft(discount="12.5")).discount is None
    assert validate_invoice(_draft(discount="")).discount is None
    assert validate_invoice(_draft(discount="abc")).discount == (
        "Discount must be a percentage between 0 and 100"
    )
    assert validate_invoice(_draft(discount="-5")).discount == (
        "Discount must be a percentage between 0 and 100"
    )
    assert validate_invoice(_draft(discount="150")).discount == (
        "Discount must be a percentage between 0 and 100"
    )
    assert validate_invoice(_draft(discount="10.005")).discount == (
        "Discount allows at most 2 decimal places and must be below 1000"
    )
