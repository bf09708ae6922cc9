"""
Draft state reducer.

``apply_action(state, action)`` returns a new draft and never mutates the
one it was given. Every action type from ``invoicedesk.schemas.draft`` has
exactly one handler.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable

from invoicedesk.core.config import settings
from invoicedesk.schemas.draft import (
    AddItem,
    AddProductToItems,
    AddTax,
    ClearLogo,
    DraftAction,
    LoadInvoice,
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
from invoicedesk.schemas.invoice import CurrencyInfo, InvoiceDraft, LineItemDraft
from invoicedesk.utils.currencies import currency_symbol


DEFAULT_PAYMENT_DAYS = 30


def new_draft(
    company: str = "",
    today: date | None = None,
) -> InvoiceDraft:
    """
    Blank draft: one empty item, due in 30 days, default currency and template.
    """
    today = today or date.today()
    code = settings.DEFAULT_CURRENCY
    return InvoiceDraft(
        company=company,
        invoice_number=f"INV-{today.year}-{today.strftime('%m%d')}",
        due_date=(today + timedelta(days=DEFAULT_PAYMENT_DAYS)).isoformat(),
        template_id=settings.DEFAULT_TEMPLATE_ID,
        currency=CurrencyInfo(code=code, symbol=currency_symbol(code)),
        items=[LineItemDraft()],
    )


def _add_item(state: InvoiceDraft, action: AddItem) -> InvoiceDraft:
    return state.model_copy(update={"items": [*state.items, LineItemDraft()]})


def _update_item(state: InvoiceDraft, action: UpdateItem) -> InvoiceDraft:
    items = [
        item.model_copy(update={action.field: action.value})
        if item.id == action.id else item
        for item in state.items
    ]
    return state.model_copy(update={"items": items})


def _remove_item(state: InvoiceDraft, action: RemoveItem) -> InvoiceDraft:
    items = [item for item in state.items if item.id != action.id]
    return state.model_copy(update={"items": items})


def _toggle_field(state: InvoiceDraft, action: ToggleField) -> InvoiceDraft:
    current = getattr(state, action.field)
    value = (not current) if action.value is None else action.value
    return state.model_copy(update={action.field: value})


def _update_shipping(state: InvoiceDraft, action: UpdateShipping) -> InvoiceDraft:
    changes = action.model_dump(exclude_unset=True, exclude={"type"})
    return state.model_copy(update={"shipping": state.shipping.model_copy(update=changes)})


def _add_tax(state: InvoiceDraft, action: AddTax) -> InvoiceDraft:
    return state.model_copy(update={"taxes": [*state.taxes, action.tax]})


def _remove_tax(state: InvoiceDraft, action: RemoveTax) -> InvoiceDraft:
    taxes = [tax for tax in state.taxes if tax.id != action.id]
    return state.model_copy(update={"taxes": taxes})


def _update_tax_name(state: InvoiceDraft, action: UpdateTaxName) -> InvoiceDraft:
    taxes = [
        tax.model_copy(update={"name": action.name}) if tax.id == action.id else tax
        for tax in state.taxes
    ]
    return state.model_copy(update={"taxes": taxes})


def _update_tax_rate(state: InvoiceDraft, action: UpdateTaxRate) -> InvoiceDraft:
    taxes = [
        tax.model_copy(update={"rate": action.rate}) if tax.id == action.id else tax
        for tax in state.taxes
    ]
    return state.model_copy(update={"taxes": taxes})


def _update_field(state: InvoiceDraft, action: UpdateField) -> InvoiceDraft:
    return state.model_copy(update={action.field: action.value})


def _set_discount(state: InvoiceDraft, action: SetDiscount) -> InvoiceDraft:
    return state.model_copy(update={"discount": action.discount})


def _set_logo(state: InvoiceDraft, action: SetLogo) -> InvoiceDraft:
    return state.model_copy(update={"logo": action.logo})


def _clear_logo(state: InvoiceDraft, action: ClearLogo) -> InvoiceDraft:
    return state.model_copy(update={"logo": None, "logo_zoom": Decimal("1")})


def _set_logo_zoom(state: InvoiceDraft, action: SetLogoZoom) -> InvoiceDraft:
    return state.model_copy(update={"logo_zoom": action.zoom})


def _set_currency(state: InvoiceDraft, action: SetCurrency) -> InvoiceDraft:
    return state.model_copy(update={"currency": action.currency})


def _set_template(state: InvoiceDraft, action: SetTemplate) -> InvoiceDraft:
    return state.model_copy(update={"template_id": action.template_id})


def _set_customer(state: InvoiceDraft, action: SetCustomer) -> InvoiceDraft:
    customer = action.customer
    update = {
        "client": customer.name,
        "client_address": customer.address,
        "customer_id": customer.id,
    }
    if customer.preferred_currency:
        code = customer.preferred_currency.upper()
        update["currency"] = CurrencyInfo(code=code, symbol=currency_symbol(code))
    return state.model_copy(update=update)


def _add_product_to_items(state: InvoiceDraft, action: AddProductToItems) -> InvoiceDraft:
    product = action.product
    item = LineItemDraft(
        description=product.name,
        quantity=Decimal("1"),
        price=product.default_price,
        tax_rate=product.default_tax_rate,
        product_id=product.id,
    )
    return state.model_copy(update={"items": [*state.items, item]})


def _load_invoice(state: InvoiceDraft, action: LoadInvoice) -> InvoiceDraft:
    return action.invoice.model_copy(deep=True)


def _reset_invoice(state: InvoiceDraft, action: ResetInvoice) -> InvoiceDraft:
    return new_draft()


_HANDLERS: dict[type, Callable[[InvoiceDraft, DraftAction], InvoiceDraft]] = {
    AddItem: _add_item,
    UpdateItem: _update_item,
    RemoveItem: _remove_item,
    ToggleField: _toggle_field,
    UpdateShipping: _update_shipping,
    AddTax: _add_tax,
    RemoveTax: _remove_tax,
    UpdateTaxName: _update_tax_name,
    UpdateTaxRate: _update_tax_rate,
    UpdateField: _update_field,
    SetDiscount: _set_discount,
    SetLogo: _set_logo,
    ClearLogo: _clear_logo,
    SetLogoZoom: _set_logo_zoom,
    SetCurrency: _set_currency,
    SetTemplate: _set_template,
    SetCustomer: _set_customer,
    AddProductToItems: _add_product_to_items,
    LoadInvoice: _load_invoice,
    ResetInvoice: _reset_invoice,
}


def apply_action(state: InvoiceDraft, action: DraftAction) -> InvoiceDraft:
    """Return the draft that results from applying ``action`` to ``state``."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported draft action: {type(action).__name__}")
    return handler(state, action)
