from merchant_gateway.integrations.payment_gateways import (
    BraintreeBlueAdapter,
    CreditCard,
    GatewayError,
    PaymentGatewayFactory,
    PaymentGatewayType,
    PaymentMethod,
    Response,
)

__version__ = "0.1.0"

__all__ = [
    "BraintreeBlueAdapter",
    "CreditCard",
    "GatewayError",
    "PaymentGatewayFactory",
    "PaymentGatewayType",
    "PaymentMethod",
    "Response",
]
