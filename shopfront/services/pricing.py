"""
Pricing rules shared by cart views and order creation
All amounts are Decimal and quantized to cents
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

Number = Union[Decimal, int, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
FREE_SHIPPING_THRESHOLD = Decimal("100.00")
FLAT_SHIPPING_FEE = Decimal("9.99")
TAX_RATE = Decimal("0.10")

def to_money(value: Number) -> Decimal:
    """Quantize a value to cents using half-up rounding"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)

def effective_price(price: Number, discount_price: Optional[Number] = None) -> Decimal:
    """Discount price when set and positive, otherwise the list price"""
    if discount_price is not None and Decimal(str(discount_price)) > 0:
        return to_money(discount_price)
    return to_money(price)

def line_subtotal(unit_price: Number, quantity: int) -> Decimal:
    return to_money(Decimal(str(unit_price)) * quantity)

def shipping_cost(subtotal: Number) -> Decimal:
    """Free shipping from the threshold upwards, flat fee below it"""
    if Decimal(str(subtotal)) >= FREE_SHIPPING_THRESHOLD:
        return ZERO
    return FLAT_SHIPPING_FEE

def tax(subtotal: Number) -> Decimal:
    return to_money(Decimal(str(subtotal)) * TAX_RATE)

@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    discount: Decimal
    total_amount: Decimal

def order_totals(line_subtotals: Iterable[Number], discount: Number = ZERO) -> OrderTotals:
    """
    Price an order from its line subtotals.

    total_amount = subtotal + shipping_cost + tax - discount
    """
    subtotal = to_money(sum((Decimal(str(amount)) for amount in line_subtotals), ZERO))
    shipping = shipping_cost(subtotal)
    tax_amount = tax(subtotal)
    discount_amount = to_money(discount)

    return OrderTotals(
        subtotal=subtotal,
        shipping_cost=shipping,
        tax=tax_amount,
        discount=discount_amount,
        total_amount=to_money(subtotal + shipping + tax_amount - discount_amount),
    )
