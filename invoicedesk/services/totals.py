"""
Invoice totals calculator.

Pure functions over line items and invoice-level settings. All arithmetic is
done in Decimal without intermediate rounding; ``round_money`` is applied only
when presenting a value.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable

from invoicedesk.utils.numbers import ZERO, to_decimal


HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class LineTotals:
    """Amounts for one line item."""

    amount: Decimal
    tax: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    """Derived totals of an invoice."""

    lines: tuple[LineTotals, ...]
    subtotal: Decimal
    tax_total: Decimal
    discount_amount: Decimal
    shipping_amount: Decimal
    total: Decimal


def round_money(value: Decimal, places: Decimal = CENT) -> Decimal:
    """Round for display (half up, 2 places by default)."""
    return value.quantize(places, rounding=ROUND_HALF_UP)


def line_totals(quantity: Any, price: Any, tax_rate: Any) -> LineTotals:
    """Line amount = quantity x price; line tax = amount x rate / 100."""
    amount = to_decimal(quantity) * to_decimal(price)
    tax = amount * (to_decimal(tax_rate) / HUNDRED)
    return LineTotals(amount=amount, tax=tax)


def calculate_totals(
    items: Iterable[Any],
    discount: Any = ZERO,
    shipping_cost: Any = ZERO,
    show_shipping: bool = False,
    show_discount: bool = False,
) -> InvoiceTotals:
    """
    Compute subtotal, tax, discount, shipping and grand total.

    Items are read through their ``quantity``, ``price`` and ``tax_rate``
    attributes (or keys, for mappings). Unparseable numbers count as zero.
    Discount and shipping only apply when their display flag is on.
    """
    lines = tuple(
        line_totals(
            _field(item, "quantity"),
            _field(item, "price"),
            _field(item, "tax_rate"),
        )
        for item in items
    )

    subtotal = sum((line.amount for line in lines), ZERO)
    tax_total = sum((line.tax for line in lines), ZERO)
    discount_amount = subtotal * (to_decimal(discount) / HUNDRED) if show_discount else ZERO
    shipping_amount = to_decimal(shipping_cost) if show_shipping else ZERO

    return InvoiceTotals(
        lines=lines,
        subtotal=subtotal,
        tax_total=tax_total,
        discount_amount=discount_amount,
        shipping_amount=shipping_amount,
        total=subtotal - discount_amount + tax_total + shipping_amount,
    )


def calculate_invoice_totals(invoice: Any) -> InvoiceTotals:
    """Totals for anything shaped like an invoice (draft schema or response)."""
    shipping = getattr(invoice, "shipping", None)
    shipping_cost = getattr(shipping, "cost", None) if shipping is not None else None
    return calculate_totals(
        invoice.items,
        discount=getattr(invoice, "discount", ZERO),
        shipping_cost=shipping_cost,
        show_shipping=bool(getattr(invoice, "show_shipping", False)),
        show_discount=bool(getattr(invoice, "show_discount", False)),
    )


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)
