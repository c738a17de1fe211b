"""
Checkout Flow

Two-step state machine driving a shopper's order for one tenant:

    cart ──checkout──▶ customer-info ──submit──▶ cart (cart cleared)
                              │
                              └──back──▶ cart (details discarded)

The flow owns the tenant's cart, mirrors every cart mutation to the
CartStore, and is driven by explicit commands through `dispatch()`.
It has no web framework dependency; the HTTP layer translates
requests into commands and results into responses.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from menudigital.ordering.cart import Cart, ProductSnapshot
from menudigital.ordering.cart_store import CartStore
from menudigital.ordering.message import (
    MissingDestinationError,
    build_whatsapp_url,
    format_order_message,
)

logger = logging.getLogger(__name__)


class CheckoutStep(str, Enum):
    CART = "cart"
    CUSTOMER_INFO = "customer-info"


class OrderType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"


# User-facing notices
MSG_ADDED = "Agregado al carrito"
MSG_EMPTY_CART = "Tu carrito está vacío"
MSG_NAME_REQUIRED = "Por favor ingresa tu nombre"
MSG_ADDRESS_REQUIRED = "Por favor ingresa tu dirección"
MSG_NOT_IN_CHECKOUT = "Primero revisa tu carrito y continúa al pedido"
MSG_ORDER_SENT = "Pedido enviado con éxito. ¡Gracias por tu compra!"


@dataclass(frozen=True)
class TenantInfo:
    """What the flow needs to know about the restaurant."""
    name: str
    slug: str
    whatsapp: Optional[str] = None
    company_id: Optional[str] = None


@dataclass(frozen=True)
class OrderDetails:
    """Validated customer details. Never persisted."""
    customer_name: str
    order_type: OrderType
    payment_method: PaymentMethod
    address: Optional[str] = None


class OrderValidationError(ValueError):
    """Customer form rejected; `field` names the offending input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def validate_order_details(
    customer_name: Optional[str],
    order_type: Union[OrderType, str] = OrderType.PICKUP,
    payment_method: Union[PaymentMethod, str] = PaymentMethod.CASH,
    address: Optional[str] = None,
) -> OrderDetails:
    """
    Turn raw form input into OrderDetails.

    Name and address are trimmed. The address is required for delivery
    and dropped for pickup.

    Raises:
        OrderValidationError: On a blank name, a blank delivery address,
            or an unknown order type / payment method
    """
    try:
        order_type = OrderType(order_type)
    except ValueError:
        raise OrderValidationError(f"Tipo de pedido inválido: {order_type}", field="order_type")
    try:
        payment_method = PaymentMethod(payment_method)
    except ValueError:
        raise OrderValidationError(f"Método de pago inválido: {payment_method}", field="payment_method")

    name = (customer_name or "").strip()
    if not name:
        raise OrderValidationError(MSG_NAME_REQUIRED, field="customer_name")

    cleaned_address = (address or "").strip()
    if order_type == OrderType.DELIVERY and not cleaned_address:
        raise OrderValidationError(MSG_ADDRESS_REQUIRED, field="address")

    return OrderDetails(
        customer_name=name,
        order_type=order_type,
        payment_method=payment_method,
        address=cleaned_address if order_type == OrderType.DELIVERY else None,
    )


# =============================================================================
# COMMANDS
# =============================================================================

@dataclass(frozen=True)
class AddItem:
    product: ProductSnapshot


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    delta: int


@dataclass(frozen=True)
class RemoveItem:
    product_id: str


@dataclass(frozen=True)
class BeginCheckout:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class SubmitOrder:
    customer_name: Optional[str]
    order_type: Union[OrderType, str] = OrderType.PICKUP
    payment_method: Union[PaymentMethod, str] = PaymentMethod.CASH
    address: Optional[str] = None


Command = Union[AddItem, UpdateQuantity, RemoveItem, BeginCheckout, GoBack, SubmitOrder]


@dataclass
class FlowResult:
    """Outcome of one command."""
    success: bool
    message: Optional[str] = None
    field: Optional[str] = None
    whatsapp_url: Optional[str] = None
    order_message: Optional[str] = None


class CheckoutFlow:
    """
    Cart plus checkout step for one shopper and one tenant.

    Example:
        >>> flow = CheckoutFlow(tenant, CartStore(storage, tenant.slug))
        >>> flow.dispatch(AddItem(snapshot))
        >>> flow.dispatch(BeginCheckout())
        >>> result = flow.dispatch(SubmitOrder("Ana"))
        >>> result.whatsapp_url
        'https://wa.me/...'
    """

    def __init__(
        self,
        tenant: TenantInfo,
        store: CartStore,
        whatsapp_base_url: str = "https://wa.me",
    ):
        self.tenant = tenant
        self.store = store
        self.whatsapp_base_url = whatsapp_base_url
        self.cart: Cart = store.load()
        self.step = self._restore_step()
        self.cart_open = False

    def _restore_step(self) -> CheckoutStep:
        stored = self.store.load_step()
        try:
            step = CheckoutStep(stored) if stored else CheckoutStep.CART
        except ValueError:
            step = CheckoutStep.CART
        # An emptied cart cannot sit in the details step
        if step == CheckoutStep.CUSTOMER_INFO and self.cart.is_empty:
            step = CheckoutStep.CART
        return step

    def _set_step(self, step: CheckoutStep) -> None:
        if step != self.step:
            logger.info(f"Checkout [{self.tenant.slug}]: {self.step.value} -> {step.value}")
        self.step = step
        self.store.save_step(step.value)

    def _sync(self) -> None:
        self.store.save(self.cart)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def dispatch(self, command: Command) -> FlowResult:
        """Route a command to its handler."""
        handlers = {
            AddItem: lambda c: self.add_item(c.product),
            UpdateQuantity: lambda c: self.update_quantity(c.product_id, c.delta),
            RemoveItem: lambda c: self.remove_item(c.product_id),
            BeginCheckout: lambda c: self.begin_checkout(),
            GoBack: lambda c: self.go_back(),
            SubmitOrder: lambda c: self.submit(
                customer_name=c.customer_name,
                order_type=c.order_type,
                payment_method=c.payment_method,
                address=c.address,
            ),
        }
        handler = handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown checkout command: {command!r}")
        return handler(command)

    # =========================================================================
    # CART OPERATIONS
    # =========================================================================

    def add_item(self, product: ProductSnapshot) -> FlowResult:
        item = self.cart.add_item(product)
        self._sync()
        logger.info(f"Cart [{self.tenant.slug}]: {product.name} x{item.quantity}")
        return FlowResult(success=True, message=MSG_ADDED)

    def update_quantity(self, product_id: str, delta: int) -> FlowResult:
        self.cart.update_quantity(product_id, delta)
        self._sync()
        return FlowResult(success=True)

    def remove_item(self, product_id: str) -> FlowResult:
        self.cart.remove_item(product_id)
        self._sync()
        return FlowResult(success=True)

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def open_cart(self) -> None:
        """Opening the cart panel always starts at the review step."""
        self.cart_open = True
        self._set_step(CheckoutStep.CART)

    def begin_checkout(self) -> FlowResult:
        if self.cart.is_empty:
            return FlowResult(success=False, message=MSG_EMPTY_CART, field="cart")
        self._set_step(CheckoutStep.CUSTOMER_INFO)
        return FlowResult(success=True)

    def go_back(self) -> FlowResult:
        self._set_step(CheckoutStep.CART)
        return FlowResult(success=True)

    def submit(
        self,
        customer_name: Optional[str],
        order_type: Union[OrderType, str] = OrderType.PICKUP,
        payment_method: Union[PaymentMethod, str] = PaymentMethod.CASH,
        address: Optional[str] = None,
    ) -> FlowResult:
        """
        Validate the details, build the order link and reset the cart.

        Any failure leaves cart, step and stored state untouched.
        """
        if self.step != CheckoutStep.CUSTOMER_INFO:
            return FlowResult(success=False, message=MSG_NOT_IN_CHECKOUT, field="step")
        if self.cart.is_empty:
            return FlowResult(success=False, message=MSG_EMPTY_CART, field="cart")

        try:
            details = validate_order_details(customer_name, order_type, payment_method, address)
        except OrderValidationError as e:
            return FlowResult(success=False, message=e.message, field=e.field)

        message = format_order_message(
            restaurant_name=self.tenant.name,
            items=self.cart.items,
            total=self.cart.total(),
            details=details,
        )
        try:
            url = build_whatsapp_url(self.tenant.whatsapp, message, self.whatsapp_base_url)
        except MissingDestinationError as e:
            logger.warning(f"Order for {self.tenant.slug} refused: no WhatsApp number")
            return FlowResult(success=False, message=str(e), field="whatsapp")

        logger.info(
            f"Order sent [{self.tenant.slug}]: {self.cart.count()} items, "
            f"total {self.cart.total():.2f}, {details.order_type.value}"
        )

        self.cart.clear()
        self.store.clear()
        self._set_step(CheckoutStep.CART)
        self.cart_open = False

        return FlowResult(
            success=True,
            message=MSG_ORDER_SENT,
            whatsapp_url=url,
            order_message=message,
        )
