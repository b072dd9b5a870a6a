"""
Payment gateway integration modules

Provides adapters for payment processing platforms behind a single
authorize/capture/refund/vault interface.
"""

from .base import (
    CardBrand,
    CreditCard,
    GatewayError,
    PaymentGateway,
    PaymentGatewayFactory,
    PaymentGatewayType,
    PaymentMethod,
    PaymentMethodKind,
    Response,
    format_amount,
)
from .braintree_adapter import BraintreeBlueAdapter

PaymentGatewayFactory.register_gateway(PaymentGatewayType.BRAINTREE_BLUE, BraintreeBlueAdapter)

__all__ = [
    "BraintreeBlueAdapter",
    "CardBrand",
    "CreditCard",
    "GatewayError",
    "PaymentGateway",
    "PaymentGatewayFactory",
    "PaymentGatewayType",
    "PaymentMethod",
    "PaymentMethodKind",
    "Response",
    "format_amount",
]
