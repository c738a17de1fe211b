"""
Ordering Module

Shopper cart, its persistence and the checkout flow that turns a cart
into a WhatsApp order link. Independent of the web layer.
"""

from menudigital.ordering.cart import Cart, CartItem, ProductSnapshot
from menudigital.ordering.cart_store import CartStore
from menudigital.ordering.checkout import (
    AddItem,
    BeginCheckout,
    CheckoutFlow,
    CheckoutStep,
    FlowResult,
    GoBack,
    OrderDetails,
    OrderType,
    OrderValidationError,
    PaymentMethod,
    RemoveItem,
    SubmitOrder,
    TenantInfo,
    UpdateQuantity,
    validate_order_details,
)
from menudigital.ordering.message import (
    MissingDestinationError,
    build_whatsapp_url,
    format_order_message,
)

__all__ = [
    "Cart",
    "CartItem",
    "ProductSnapshot",
    "CartStore",
    "CheckoutFlow",
    "CheckoutStep",
    "FlowResult",
    "OrderDetails",
    "OrderType",
    "OrderValidationError",
    "PaymentMethod",
    "TenantInfo",
    "AddItem",
    "UpdateQuantity",
    "RemoveItem",
    "BeginCheckout",
    "GoBack",
    "SubmitOrder",
    "validate_order_details",
    "MissingDestinationError",
    "build_whatsapp_url",
    "format_order_message",
]
