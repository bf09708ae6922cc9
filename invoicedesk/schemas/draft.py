"""
Draft editing actions.

Each action is its own schema tagged by ``type``; ``DraftAction`` is the
closed union of all of them. A payload with an unknown ``type`` or missing
fields fails schema validation before it reaches the reducer.
"""

from decimal import Decimal
from typing import Annotated, Literal, Union
from pydantic import Field

from invoicedesk.schemas.base import BaseSchema
from invoicedesk.schemas.invoice import (
    CurrencyInfo,
    InvoiceDraft,
    InvoiceErrors,
    InvoiceTotalsResponse,
    LooseNumber,
    TaxInfo,
)


LineItemField = Literal["description", "quantity", "price", "tax_rate"]

ToggleableField = Literal[
    "show_shipping",
    "show_discount",
    "show_tax_column",
    "show_signature",
    "show_payment_details",
]

HeaderField = Literal[
    "company",
    "company_address",
    "client",
    "client_address",
    "invoice_number",
    "due_date",
    "notes",
    "terms",
]


class CustomerRef(BaseSchema):
    """Customer fields copied into the draft."""

    id: int | None = None
    name: str
    address: str = ""
    preferred_currency: str | None = None


class ProductRef(BaseSchema):
    """Product defaults copied into a new line item."""

    id: int | None = None
    name: str
    default_price: Decimal = Decimal("0")
    default_tax_rate: Decimal = Decimal("0")


class AddItem(BaseSchema):
    type: Literal["add_item"] = "add_item"


class UpdateItem(BaseSchema):
    type: Literal["update_item"] = "update_item"
    id: int | str
    field: LineItemField
    value: str | Decimal | None = None


class RemoveItem(BaseSchema):
    type: Literal["remove_item"] = "remove_item"
    id: int | str


class ToggleField(BaseSchema):
    """Flip a display toggle, or force it when ``value`` is given."""

    type: Literal["toggle_field"] = "toggle_field"
    field: ToggleableField
    value: bool | None = None


class UpdateShipping(BaseSchema):
    """Partial shipping update; only fields that are set are merged."""

    type: Literal["update_shipping"] = "update_shipping"
    name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    method: str | None = None
    cost: Decimal | None = Field(None, ge=0)


class AddTax(BaseSchema):
    type: Literal["add_tax"] = "add_tax"
    tax: TaxInfo


class RemoveTax(BaseSchema):
    type: Literal["remove_tax"] = "remove_tax"
    id: str


class UpdateTaxName(BaseSchema):
    type: Literal["update_tax_name"] = "update_tax_name"
    id: str
    name: str


class UpdateTaxRate(BaseSchema):
    type: Literal["update_tax_rate"] = "update_tax_rate"
    id: str
    rate: Decimal = Field(..., ge=0)


class UpdateField(BaseSchema):
    type: Literal["update_field"] = "update_field"
    field: HeaderField
    value: str | None = None


class SetDiscount(BaseSchema):
    type: Literal["set_discount"] = "set_discount"
    discount: LooseNumber


class SetLogo(BaseSchema):
    type: Literal["set_logo"] = "set_logo"
    logo: str


class ClearLogo(BaseSchema):
    type: Literal["clear_logo"] = "clear_logo"


class SetLogoZoom(BaseSchema):
    type: Literal["set_logo_zoom"] = "set_logo_zoom"
    zoom: Decimal = Field(..., gt=0, le=10, decimal_places=2)


class SetCurrency(BaseSchema):
    type: Literal["set_currency"] = "set_currency"
    currency: CurrencyInfo


class SetTemplate(BaseSchema):
    type: Literal["set_template"] = "set_template"
    template_id: str = Field(..., min_length=1, max_length=50)


class SetCustomer(BaseSchema):
    type: Literal["set_customer"] = "set_customer"
    customer: CustomerRef


class AddProductToItems(BaseSchema):
    type: Literal["add_product_to_items"] = "add_product_to_items"
    product: ProductRef


class LoadInvoice(BaseSchema):
    type: Literal["load_invoice"] = "load_invoice"
    invoice: InvoiceDraft


class ResetInvoice(BaseSchema):
    type: Literal["reset_invoice"] = "reset_invoice"


DraftAction = Annotated[
    Union[
        AddItem,
        UpdateItem,
        RemoveItem,
        ToggleField,
        UpdateShipping,
        AddTax,
        RemoveTax,
        UpdateTaxName,
        UpdateTaxRate,
        UpdateField,
        SetDiscount,
        SetLogo,
        ClearLogo,
        SetLogoZoom,
        SetCurrency,
        SetTemplate,
        SetCustomer,
        AddProductToItems,
        LoadInvoice,
        ResetInvoice,
    ],
    Field(discriminator="type"),
]


class DraftApplyRequest(BaseSchema):
    """Current draft plus the action to apply to it."""

    state: InvoiceDraft
    action: DraftAction


class DraftStateResponse(BaseSchema):
    """Draft after an action, with its live totals and validation result."""

    state: InvoiceDraft
    totals: InvoiceTotalsResponse
    errors: InvoiceErrors
