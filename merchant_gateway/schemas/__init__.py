from merchant_gateway.schemas.gateway import AddressInput, GatewayOptions

__all__ = [
    "AddressInput",
    "GatewayOptions",
]
