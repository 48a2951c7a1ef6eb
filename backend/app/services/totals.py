"""
Document Totals - line tax/discount math and document aggregates
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List

from app.core.exceptions import ValidationError

MONEY_QUANTIZER = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_money(value) -> Decimal:
    """Normalise *value* to a two-place Decimal, rounding half up."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(MONEY_QUANTIZER, rounding=ROUND_HALF_UP)


@dataclass
class LineTotals:
    taxable: Decimal
    tax_amount: Decimal
    total: Decimal


@dataclass
class DocumentTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    lines: List[LineTotals]


def calculate_line(quantity, unit_price, tax_rate, discount=ZERO, field: str = "items.0") -> LineTotals:
    """
    taxable = unit_price * quantity - discount
    tax     = taxable * tax_rate / 100
    total   = taxable + tax
    """
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError("must be a positive integer", field=f"{field}.quantity")

    unit_price = Decimal(str(unit_price))
    tax_rate = Decimal(str(tax_rate or 0))
    discount = Decimal(str(discount or 0))

    if unit_price < 0:
        raise ValidationError("must not be negative", field=f"{field}.unitPrice")
    if tax_rate < 0 or tax_rate > HUNDRED:
        raise ValidationError("must be between 0 and 100", field=f"{field}.taxRate")
    if discount < 0:
        raise ValidationError("must not be negative", field=f"{field}.discount")

    gross = unit_price * quantity
    if discount > gross:
        raise ValidationError("must not exceed the line amount", field=f"{field}.discount")

    taxable = to_money(gross - discount)
    tax_amount = to_money(taxable * tax_rate / HUNDRED)
    return LineTotals(taxable=taxable, tax_amount=tax_amount, total=taxable + tax_amount)


def calculate_document(items: Iterable) -> DocumentTotals:
    """
    Compute line and document totals for invoice or purchase order items.

    ``items`` are objects with ``quantity``, ``unit_price``, ``tax_rate`` and
    optionally ``discount`` attributes; purchase order items have no discount.
    """
    lines = []
    for index, item in enumerate(items):
        lines.append(calculate_line(
            item.quantity,
            item.unit_price,
            item.tax_rate,
            getattr(item, "discount", ZERO),
            field=f"items.{index}",
        ))

    subtotal = sum((line.taxable for line in lines), ZERO)
    tax_amount = sum((line.tax_amount for line in lines), ZERO)
    total = sum((line.total for line in lines), ZERO)
    return DocumentTotals(subtotal=subtotal, tax_amount=tax_amount, total=total, lines=lines)


def calculate_net_salary(basic_salary, allowances=ZERO, deductions=ZERO) -> Decimal:
    """net = basic + allowances - deductions; a negative result is rejected"""
    net = to_money(basic_salary) + to_money(allowances) - to_money(deductions)
    if net < 0:
        raise ValidationError("Deductions exceed basic salary plus allowances", field="deductions")
    return net
