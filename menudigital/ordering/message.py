"""
Order Message Formatter

Renders a cart and the shopper's order details into the WhatsApp text
the restaurant receives, and builds the wa.me deep link carrying it.

The template text, emoji labels, section order and number formatting
are what restaurants already parse by eye; keep them byte-for-byte.
"""

import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import TYPE_CHECKING, Iterable, Optional
from urllib.parse import quote

from menudigital.ordering.cart import CartItem

if TYPE_CHECKING:
    from menudigital.ordering.checkout import OrderDetails

logger = logging.getLogger(__name__)

ORDER_TYPE_LABELS = {
    "pickup": "Recoger en local",
    "delivery": "Servicio a domicilio",
}

PAYMENT_METHOD_LABELS = {
    "cash": "Efectivo",
    "transfer": "Transferencia",
}

MESSAGE_TEMPLATE = (
    "Hola, quiero hacer un pedido:\n"
    "\n"
    "🏪 Restaurante: {restaurant}\n"
    "\n"
    "👤 Cliente: {customer}\n"
    "📦 Tipo de pedido: {order_type}\n"
    "{address_line}"
    "💳 Pago: {payment}\n"
    "\n"
    "🛒 Pedido:\n"
    "{items}\n"
    "\n"
    "Total: ${total}\n"
    "\n"
    "Gracias!"
)

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


class MissingDestinationError(ValueError):
    """The restaurant has no WhatsApp number to send the order to."""


def format_amount(value: float) -> str:
    """
    Plain number rendering used for line totals.

    Whole amounts print without decimals (``7``), the rest use the
    shortest round-tripping digits (``7.5``, ``0.30000000000000004``).
    Exponent form is used only outside 1e-6 <= |value| < 1e21 and is
    written ``1e-7`` / ``1e+21``, as browsers print numbers.
    """
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(float(value)))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    k = len(digits)
    n = parts.exponent + k  # position of the decimal point

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * -n + digits
    else:
        exponent = n - 1
        mantissa = digits[0] + (f".{digits[1:]}" if k > 1 else "")
        body = f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"
    return sign + body


def format_fixed(value: float, digits: int = 2) -> str:
    """Fixed-point rendering, ties rounded away from zero on the exact binary value."""
    exponent = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def format_item_line(item: CartItem) -> str:
    return f"- {item.product.name} x{item.quantity} (${format_amount(item.line_total)})"


def format_order_message(
    restaurant_name: str,
    items: Iterable[CartItem],
    total: float,
    details: "OrderDetails",
) -> str:
    """
    Build the outbound order text.

    Args:
        restaurant_name: Tenant display name
        items: Cart lines, in cart order
        total: Cart grand total
        details: Validated customer details

    Returns:
        Multi-line message text
    """
    order_type = details.order_type.value
    address_line = ""
    if order_type == "delivery" and details.address:
        address_line = f"🏠 Dirección: {details.address}\n"

    return MESSAGE_TEMPLATE.format(
        restaurant=restaurant_name,
        customer=details.customer_name,
        order_type=ORDER_TYPE_LABELS[order_type],
        address_line=address_line,
        payment=PAYMENT_METHOD_LABELS[details.payment_method.value],
        items="\n".join(format_item_line(item) for item in items),
        total=format_fixed(total, 2),
    )


def normalize_whatsapp_number(number: Optional[str]) -> str:
    """Strip everything but digits (``+52 1 234-567`` -> ``521234567``)."""
    return re.sub(r"\D", "", number or "")


def build_whatsapp_url(
    number: Optional[str],
    message: str,
    base_url: str = "https://wa.me",
) -> str:
    """
    Build ``<base_url>/<number>?text=<percent-encoded message>``.

    Raises:
        MissingDestinationError: If no usable destination number is configured
    """
    destination = normalize_whatsapp_number(number)
    if not destination:
        raise MissingDestinationError("No se encontró el número de WhatsApp del restaurante")

    encoded = quote(message, safe=_URI_COMPONENT_SAFE)
    return f"{base_url.rstrip('/')}/{destination}?text={encoded}"
