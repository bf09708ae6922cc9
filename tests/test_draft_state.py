"""
Draft reducer tests.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from invoicedesk.schemas.draft import (
    AddItem,
    AddProductToItems,
    AddTax,
    ClearLogo,
    CustomerRef,
    DraftAction,
    LoadInvoice,
    ProductRef,
    RemoveItem,
    RemoveTax,
    ResetInvoice,
    SetCurrency,
    SetCustomer,
    SetDiscount,
    SetLogo,
    SetLogoZoom,
    SetTemplate,
    ToggleField,
    UpdateField,
    UpdateItem,
    UpdateShipping,
    UpdateTaxName,
    UpdateTaxRate,
)
from invoicedesk.schemas.invoice import CurrencyInfo, InvoiceDraft, LineItemDraft, TaxInfo
from invoicedesk.services.draft_state import apply_action, new_draft


@pytest.fixture
def state() -> InvoiceDraft:
    return InvoiceDraft(
        company="Acme",
        items=[
            LineItemDraft(id="a", description="First"),
            LineItemDraft(id="b", description="Second"),
        ],
        taxes=[TaxInfo(id="vat", name="VAT", rate=Decimal("20"))],
    )


def test_new_draft_defaults():
    draft = new_draft(company="Acme", today=date(2026, 10, 19))

    assert draft.company == "Acme"
    assert draft.invoice_number == "INV-2026-1019"
    assert draft.due_date == "2026-11-18"
    assert draft.currency.code == "USD"
    assert draft.template_id == "professional"
    assert len(draft.items) == 1
    assert draft.items[0].quantity == Decimal("1")


def test_actions_never_mutate_input(state):
    before = state.model_dump()
    actions = [
        AddItem(),
        UpdateItem(id="a", field="description", value="Changed"),
        RemoveItem(id="b"),
        ToggleField(field="show_shipping"),
        UpdateShipping(city="Paris"),
        AddTax(tax=TaxInfo(name="GST", rate=Decimal("5"))),
        RemoveTax(id="vat"),
        UpdateTaxName(id="vat", name="Sales tax"),
        UpdateTaxRate(id="vat", rate=Decimal("7")),
        UpdateField(field="client", value="Globex"),
        SetDiscount(discount="5"),
        SetLogo(logo="https://example.com/logo.png"),
        ClearLogo(),
        SetLogoZoom(zoom=Decimal("1.5")),
        SetCurrency(currency=CurrencyInfo(code="EUR", symbol="€")),
        SetTemplate(template_id="modern"),
        SetCustomer(customer=CustomerRef(id=3, name="Globex", address="2 Side St")),
        AddProductToItems(product=ProductRef(id=9, name="Widget")),
        ResetInvoice(),
    ]

    for action in actions:
        apply_action(state, action)

    assert state.model_dump() == before


def test_add_and_remove_item(state):
    added = apply_action(state, AddItem())
    assert len(added.items) == 3
    assert added.items[-1].description == ""

    removed = apply_action(added, RemoveItem(id="a"))
    assert [item.id for item in removed.items] == ["b", added.items[-1].id]


def test_update_item_only_touches_target(state):
    updated = apply_action(state, UpdateItem(id="b", field="quantity", value="4"))

    assert updated.items[1].quantity == "4"
    assert updated.items[0] == state.items[0]


def test_toggle_field_flips_or_forces(state):
    flipped = apply_action(state, ToggleField(field="show_discount"))
    assert flipped.show_discount is True
    assert apply_action(flipped, ToggleField(field="show_discount")).show_discount is False
    assert apply_action(flipped, ToggleField(field="show_discount", value=True)).show_discount is True


def test_update_shipping_merges_set_fields(state):
    first = apply_action(state, UpdateShipping(city="Paris", cost=Decimal("5")))
    second = apply_action(first, UpdateShipping(country="FR"))

    assert second.shipping.city == "Paris"
    assert second.shipping.country == "FR"
    assert second.shipping.cost == Decimal("5")


def test_tax_actions(state):
    added = apply_action(state, AddTax(tax=TaxInfo(name="GST", rate=Decimal("5"))))
    assert [tax.name for tax in added.taxes] == ["VAT", "GST"]
    assert added.taxes[1].id

    renamed = apply_action(added, UpdateTaxName(id="vat", name="Sales tax"))
    rerated = apply_action(renamed, UpdateTaxRate(id="vat", rate=Decimal("8")))
    assert rerated.taxes[0].name == "Sales tax"
    assert rerated.taxes[0].rate == Decimal("8")

    removed = apply_action(rerated, RemoveTax(id="vat"))
    assert [tax.name for tax in removed.taxes] == ["GST"]


def test_logo_actions(state):
    with_logo = apply_action(state, SetLogo(logo="data:image/png;base64,AAA"))
    zoomed = apply_action(with_logo, SetLogoZoom(zoom=Decimal("2")))
    cleared = apply_action(zoomed, ClearLogo())

    assert zoomed.logo_zoom == Decimal("2")
    assert cleared.logo is None
    assert cleared.logo_zoom == Decimal("1")


def test_set_customer_copies_fields_and_currency(state):
    customer = CustomerRef(id=7, name="Globex", address="2 Side St", preferred_currency="gbp")

    result = apply_action(state, SetCustomer(customer=customer))

    assert result.client == "Globex"
    assert result.client_address == "2 Side St"
    assert result.customer_id == 7
    assert result.currency.code == "GBP"
    assert result.currency.symbol == "£"


def test_set_customer_without_currency_keeps_current(state):
    result = apply_action(state, SetCustomer(customer=CustomerRef(name="Globex")))

    assert result.currency == state.currency


def test_add_product_copies_defaults(state):
    product = ProductRef(id=9, name="Widget", default_price=Decimal("12.50"), default_tax_rate=Decimal("5"))

    result = apply_action(state, AddProductToItems(product=product))

    item = result.items[-1]
    assert item.description == "Widget"
    assert item.quantity == Decimal("1")
    assert item.price == Decimal("12.50")
    assert item.tax_rate == Decimal("5")
    assert item.product_id == 9


def test_header_discount_currency_and_template(state):
    result = apply_action(state, UpdateField(field="notes", value="Thanks"))
    result = apply_action(result, SetDiscount(discount="12.5"))
    result = apply_action(result, SetCurrency(currency=CurrencyInfo(code="JPY", symbol="¥")))
    result = apply_action(result, SetTemplate(template_id="minimal"))

    assert result.notes == "Thanks"
    assert result.discount == "12.5"
    assert result.currency.code == "JPY"
    assert result.template_id == "minimal"


def test_load_and_reset(state):
    other = InvoiceDraft(id=42, company="Loaded")

    loaded = apply_action(state, LoadInvoice(invoice=other))
    assert loaded == other
    assert loaded is not other

    reset = apply_action(loaded, ResetInvoice())
    assert reset.id is None
    assert len(reset.items) == 1


def test_actions_parse_by_type_tag():
    adapter = TypeAdapter(DraftAction)

    action = adapter.validate_python({"type": "update_item", "id": "a", "field": "price", "value": "3"})
    assert isinstance(action, UpdateItem)

    with pytest.raises(ValidationError):
        adapter.validate_python({"type": "explode"})

    with pytest.raises(ValidationError):
        adapter.validate_python({"type": "update_item", "id": "a", "field": "owner"})


def test_unknown_action_object_is_rejected(state):
    with pytest.raises(TypeError):
        apply_action(state, object())
