"""
Payment Gateway Base Classes and Interfaces

Defines the generic contract that every gateway adapter implements:
authorize, capture, purchase, credit, refund, void and the card vault
operations (store, update, unstore). Adapters translate these calls into
their processor's SDK and answer with a processor-neutral ``Response``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from merchant_gateway.schemas.gateway import GatewayOptions

OptionsLike = Union[GatewayOptions, Mapping[str, Any], None]


class PaymentGatewayType(str, Enum):
    """Supported payment gateway types."""
    BRAINTREE_BLUE = "braintree_blue"


class PaymentMethodKind(str, Enum):
    """What a payment method carries: a vaulted reference or raw card details."""
    TOKEN = "token"
    CARD_DETAILS = "card_details"


class CardBrand(str, Enum):
    VISA = "visa"
    MASTER = "master"
    AMERICAN_EXPRESS = "american_express"
    DISCOVER = "discover"
    JCB = "jcb"


class GatewayError(Exception):
    """Raised for caller mistakes the adapter detects before any remote call."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_message = message
        self.error_code = error_code
        self.provider = provider


@dataclass
class CreditCard:
    """Card holder and card data for a single request."""
    first_name: str
    last_name: str
    number: str
    month: int
    year: int
    verification_value: Optional[str] = None

    @property
    def last_digits(self) -> str:
        return self.number[-4:] if self.number else ""

    def __repr__(self) -> str:
        return (
            f"CreditCard(first_name={self.first_name!r}, last_name={self.last_name!r}, "
            f"number='XXXX-{self.last_digits}', month={self.month!r}, year={self.year!r})"
        )


@dataclass(frozen=True)
class PaymentMethod:
    """
    Either a previously vaulted token or inline card details.

    Build one with ``from_token``/``from_card`` or let ``coerce`` inspect a
    raw caller value once at the boundary.
    """
    kind: PaymentMethodKind
    token: Optional[str] = None
    card: Optional[CreditCard] = None

    def __post_init__(self):
        if self.kind == PaymentMethodKind.TOKEN and self.token is None:
            raise ValueError("token payment method requires a token")
        if self.kind == PaymentMethodKind.CARD_DETAILS and self.card is None:
            raise ValueError("card payment method requires card details")

    @classmethod
    def from_token(cls, token: Union[str, int]) -> "PaymentMethod":
        return cls(kind=PaymentMethodKind.TOKEN, token=str(token))

    @classmethod
    def from_card(cls, card: CreditCard) -> "PaymentMethod":
        return cls(kind=PaymentMethodKind.CARD_DETAILS, card=card)

    @classmethod
    def coerce(cls, value: Union["PaymentMethod", CreditCard, str, int]) -> "PaymentMethod":
        if isinstance(value, PaymentMethod):
            return value
        if isinstance(value, CreditCard):
            return cls.from_card(value)
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return cls.from_token(value)
        raise TypeError(f"Unsupported payment method: {type(value).__name__}")


@dataclass(frozen=True)
class Response:
    """Result of a gateway operation."""
    success: bool
    message: str
    extra_params: Mapping[str, Any] = field(default_factory=dict)
    extra_options: Mapping[str, Any] = field(default_factory=dict)
    test: bool = False

    def __post_init__(self):
        object.__setattr__(self, "extra_params", MappingProxyType(dict(self.extra_params)))
        object.__setattr__(self, "extra_options", MappingProxyType(dict(self.extra_options)))

    @property
    def authorization(self) -> Optional[str]:
        return self.extra_options.get("authorization")

    @property
    def avs_result(self) -> Optional[Mapping[str, Any]]:
        return self.extra_options.get("avs_result")

    @property
    def cvv_result(self) -> Optional[Mapping[str, Any]]:
        return self.extra_options.get("cvv_result")


def format_amount(money: Optional[int]) -> Optional[str]:
    """
    Render an integer amount of minor currency units as a decimal string.

    ``1000`` becomes ``"10.00"``. ``None`` is passed through so callers can
    express "no amount" (a full refund, for example).

    Raises:
        GatewayError: If money is not a non-negative integer
    """
    if money is None:
        return None
    if isinstance(money, bool) or not isinstance(money, int):
        raise GatewayError(
            message="money amount must be a positive Integer in cents.",
            error_code="invalid_amount",
        )
    if money < 0:
        raise GatewayError(
            message="money amount must not be negative.",
            error_code="invalid_amount",
        )
    return str((Decimal(money) / 100).quantize(Decimal("0.01")))


class PaymentGateway(ABC):
    """Abstract base class for payment gateway adapters."""

    display_name: str = ""
    homepage_url: str = ""
    supported_countries: ClassVar[Tuple[str, ...]] = ()
    supported_card_types: ClassVar[Tuple[CardBrand, ...]] = ()

    def __init__(self, test: bool = False, **config):
        """Initialize the payment gateway with configuration."""
        self.config = config
        self.test = test
        self.gateway_type = self._get_gateway_type()

    @abstractmethod
    def _get_gateway_type(self) -> PaymentGatewayType:
        """Return the gateway type identifier."""
        pass

    @abstractmethod
    def authorize(self, money: int, payment_method, options: OptionsLike = None) -> Response:
        """
        Reserve funds on a card or vaulted customer.

        Args:
            money: Amount in minor currency units
            payment_method: PaymentMethod, CreditCard or vault token
            options: GatewayOptions or an equivalent mapping

        Returns:
            Response with the authorization id on success
        """
        pass

    @abstractmethod
    def capture(self, money: int, authorization: str, options: OptionsLike = None) -> Response:
        """Settle a previous authorization for the given amount."""
        pass

    def purchase(self, money: int, payment_method, options: OptionsLike = None) -> Response:
        """Authorize and submit for settlement in a single call."""
        options = GatewayOptions.coerce(options).merge(submit_for_settlement=True)
        return self.authorize(money, payment_method, options)

    @abstractmethod
    def credit(self, money: int, payment_method, options: OptionsLike = None) -> Response:
        """Send money to a card or vaulted customer."""
        pass

    def refund(self, *args, options: OptionsLike = None) -> Response:
        """
        Refund a settled transaction.

        Accepts ``refund(transaction_id)`` for a full refund and
        ``refund(money, transaction_id)`` for a specific amount. Options may
        be passed as a trailing positional mapping or as a keyword.

        Raises:
            TypeError: If called with any other number of positional arguments
        """
        if args and isinstance(args[-1], (Mapping, GatewayOptions)):
            if options is not None:
                raise TypeError("options given both positionally and as a keyword")
            *args, options = args
        if len(args) == 1:
            return self.refund_transaction(args[0], options)
        if len(args) == 2:
            return self.refund_amount(args[0], args[1], options)
        raise TypeError(f"wrong number of arguments ({len(args)} for 2)")

    @abstractmethod
    def refund_transaction(self, transaction_id: str, options: OptionsLike = None) -> Response:
        """Refund the full amount of a transaction."""
        pass

    @abstractmethod
    def refund_amount(
        self,
        money: Optional[int],
        transaction_id: str,
        options: OptionsLike = None,
    ) -> Response:
        """Refund part (or, with money=None, all) of a transaction."""
        pass

    @abstractmethod
    def void(self, authorization: str, options: OptionsLike = None) -> Response:
        """Cancel a transaction that has not settled yet."""
        pass

    @abstractmethod
    def store(self, credit_card: CreditCard, options: OptionsLike = None) -> Response:
        """
        Vault a card under a new customer profile.

        Returns:
            Response with the new vault id on success
        """
        pass

    @abstractmethod
    def update(self, vault_id: str, credit_card: CreditCard, options: OptionsLike = None) -> Response:
        """Replace the holder and default card details of a vaulted customer."""
        pass

    @abstractmethod
    def unstore(self, vault_id: str, options: OptionsLike = None) -> Response:
        """Remove a vaulted customer."""
        pass

    def delete(self, vault_id: str, options: OptionsLike = None) -> Response:
        return self.unstore(vault_id, options)


class PaymentGatewayFactory:
    """Factory for creating payment gateway instances."""

    _gateways: Dict[PaymentGatewayType, type] = {}

    @classmethod
    def register_gateway(
        cls,
        gateway_type: PaymentGatewayType,
        gateway_class: type[PaymentGateway]
    ):
        """Register a payment gateway implementation."""
        cls._gateways[gateway_type] = gateway_class

    @classmethod
    def create_gateway(
        cls,
        gateway_type: Union[PaymentGatewayType, str],
        **config
    ) -> PaymentGateway:
        """
        Create a payment gateway instance.

        Args:
            gateway_type: Registered gateway type or its string value
            **config: Keyword arguments for the gateway constructor

        Raises:
            ValueError: If no gateway is registered for the type
        """
        try:
            gateway_class = cls._gateways[PaymentGatewayType(gateway_type)]
        except (KeyError, ValueError):
            raise ValueError(f"Unsupported gateway type: {gateway_type}") from None
        return gateway_class(**config)

    @classmethod
    def get_supported_gateways(cls) -> List[PaymentGatewayType]:
        """Get list of registered gateway types."""
        return list(cls._gateways.keys())
