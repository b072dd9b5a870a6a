"""
Braintree Payment Gateway Adapter

Maps the generic gateway contract onto the Braintree (Blue platform) SDK
and flattens its transaction and customer results into ``Response``
objects.
"""

from typing import Any, Callable, Dict, Optional

import braintree
from braintree.exceptions.braintree_error import BraintreeError

from merchant_gateway.core.config import BraintreeSettings
from merchant_gateway.core.logging import get_logger
from merchant_gateway.schemas.gateway import AddressInput, GatewayOptions

from .base import (
    CardBrand,
    CreditCard,
    GatewayError,
    OptionsLike,
    PaymentGateway,
    PaymentGatewayType,
    PaymentMethod,
    PaymentMethodKind,
    Response,
    format_amount,
)

logger = get_logger(__name__)

GATEWAY_REJECTED_MESSAGE = "Transaction declined - gateway rejected"
NOT_FOUND_MESSAGE = "NotFoundError"

ENVIRONMENTS = {
    "sandbox": braintree.Environment.Sandbox,
    "production": braintree.Environment.Production,
    "development": braintree.Environment.Development,
    "qa": braintree.Environment.QA,
}

ADDRESS_FIELDS = (
    "street_address",
    "extended_address",
    "company",
    "locality",
    "region",
    "postal_code",
    "country_name",
)


def map_address(address: Optional[AddressInput]) -> Dict[str, Optional[str]]:
    """Translate an address into Braintree's address field names."""
    if address is None:
        return {}
    return {
        "street_address": address.address1,
        "extended_address": address.address2,
        "company": address.company,
        "locality": address.city,
        "region": address.state,
        "postal_code": address.zip,
        "country_name": address.country,
    }


def message_from_result(result) -> str:
    if result.is_success:
        return "OK"
    errors = [f"{error.message} ({error.code})" for error in result.errors.deep_errors]
    if errors:
        return " ".join(errors)
    return getattr(result, "message", None) or ""


def transaction_message(transaction) -> str:
    if transaction.status == braintree.Transaction.Status.GatewayRejected:
        return GATEWAY_REJECTED_MESSAGE
    return f"{transaction.processor_response_code} {transaction.processor_response_text}"


def _address_snapshot(details) -> Dict[str, Any]:
    return {name: getattr(details, name) for name in ADDRESS_FIELDS}


def transaction_snapshot(transaction) -> Dict[str, Any]:
    """Plain-dict view of a Braintree transaction."""
    vault_customer = transaction.vault_customer
    if vault_customer is not None:
        vault_customer = {
            "credit_cards": [{"bin": card.bin} for card in vault_customer.credit_cards],
        }

    return {
        "order_id": transaction.order_id,
        "status": transaction.status,
        "customer_details": {
            "id": transaction.customer_details.id,
            "email": transaction.customer_details.email,
        },
        "billing_details": _address_snapshot(transaction.billing_details),
        "shipping_details": _address_snapshot(transaction.shipping_details),
        "vault_customer": vault_customer,
        "merchant_account_id": transaction.merchant_account_id,
    }


def customer_snapshot(customer) -> Dict[str, Any]:
    """Plain-dict view of a Braintree customer."""
    return {
        "email": customer.email,
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "credit_cards": [
            {"bin": card.bin, "expiration_date": card.expiration_date}
            for card in customer.credit_cards
        ],
    }


def _card_expiration(credit_card: CreditCard) -> Dict[str, str]:
    return {
        "expiration_month": str(credit_card.month).rjust(2, "0"),
        "expiration_year": str(credit_card.year),
    }


def _default_credit_card(customer):
    for card in customer.credit_cards:
        if getattr(card, "default", False):
            return card
    return None


class BraintreeBlueAdapter(PaymentGateway):
    """Braintree (Blue platform) payment gateway adapter."""

    display_name = "Braintree (Blue Platform)"
    homepage_url = "https://www.braintreepayments.com"
    supported_countries = ("US",)
    supported_card_types = (
        CardBrand.VISA,
        CardBrand.MASTER,
        CardBrand.AMERICAN_EXPRESS,
        CardBrand.DISCOVER,
        CardBrand.JCB,
    )

    def __init__(
        self,
        merchant_id: Optional[str] = None,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        merchant_account_id: Optional[str] = None,
        environment: Optional[str] = None,
        test: bool = False,
        client: Optional[Any] = None,
        **config
    ):
        """
        Initialize Braintree adapter.

        Args:
            merchant_id: Braintree merchant ID
            public_key: Braintree public key
            private_key: Braintree private key
            merchant_account_id: Default merchant account for transactions
            environment: sandbox, production, development or qa; defaults to
                sandbox in test mode and production otherwise
            test: Whether responses are flagged as test responses
            client: Pre-built BraintreeGateway (or compatible) to use instead
                of constructing one from the credentials
            **config: Additional configuration

        Raises:
            GatewayError: If a credential is missing or the environment is unknown
        """
        missing = [
            name for name, value in (
                ("merchant_id", merchant_id),
                ("public_key", public_key),
                ("private_key", private_key),
            )
            if not value
        ]
        if missing:
            raise GatewayError(
                message=f"Missing required parameter: {', '.join(missing)}",
                error_code="missing_credentials",
                provider="braintree",
            )

        super().__init__(test=test, merchant_id=merchant_id, merchant_account_id=merchant_account_id, **config)
        self.merchant_id = merchant_id
        self.merchant_account_id = merchant_account_id
        self.environment = environment or ("sandbox" if test else "production")
        if self.environment not in ENVIRONMENTS:
            raise GatewayError(
                message=f"Unsupported Braintree environment: {self.environment}",
                error_code="invalid_environment",
                provider="braintree",
            )

        if client is None:
            client = braintree.BraintreeGateway(
                braintree.Configuration(
                    environment=ENVIRONMENTS[self.environment],
                    merchant_id=merchant_id,
                    public_key=public_key,
                    private_key=private_key,
                )
            )
        self.client = client

    @classmethod
    def from_settings(cls, settings: BraintreeSettings, **overrides) -> "BraintreeBlueAdapter":
        """
        Build an adapter from BraintreeSettings; keyword overrides win.

        Raises:
            GatewayError: If neither the settings nor the overrides carry
                a complete set of credentials
        """
        credential_overrides = {"merchant_id", "public_key", "private_key"} & overrides.keys()
        if not settings.has_credentials and not credential_overrides:
            raise GatewayError(
                message=(
                    "Braintree credentials are not configured; set BRAINTREE_MERCHANT_ID, "
                    "BRAINTREE_PUBLIC_KEY and BRAINTREE_PRIVATE_KEY"
                ),
                error_code="missing_credentials",
                provider="braintree",
            )
        config = {
            "merchant_id": settings.merchant_id,
            "public_key": settings.public_key,
            "private_key": settings.private_key,
            "merchant_account_id": settings.merchant_account_id,
            "environment": settings.environment,
            "test": settings.test,
        }
        config.update(overrides)
        return cls(**config)

    def _get_gateway_type(self) -> PaymentGatewayType:
        """Return the gateway type identifier."""
        return PaymentGatewayType.BRAINTREE_BLUE

    def authorize(self, money: int, payment_method, options: OptionsLike = None) -> Response:
        """
        Create a sale transaction against a card or a vaulted customer.

        Args:
            money: Amount in minor currency units
            payment_method: PaymentMethod, CreditCard or vault token
            options: GatewayOptions or an equivalent mapping

        Returns:
            Response carrying the transaction snapshot, the customer vault id
            and the authorization id on success
        """
        return self._create_transaction("sale", money, payment_method, options)

    def capture(self, money: int, authorization: str, options: OptionsLike = None) -> Response:
        amount = format_amount(money)

        def submit():
            result = self.client.transaction.submit_for_settlement(authorization, amount)
            return self._response(result.is_success, message_from_result(result))

        return self._commit("transaction.submit_for_settlement", submit)

    def credit(self, money: int, payment_method, options: OptionsLike = None) -> Response:
        return self._create_transaction("credit", money, payment_method, options)

    def refund_transaction(self, transaction_id: str, options: OptionsLike = None) -> Response:
        return self.refund_amount(None, transaction_id, options)

    def refund_amount(
        self,
        money: Optional[int],
        transaction_id: str,
        options: OptionsLike = None,
    ) -> Response:
        """
        Refund a settled transaction.

        Args:
            money: Amount in minor currency units, or None for the full amount
            transaction_id: Braintree transaction id to refund
            options: Unused; accepted for interface compatibility

        Returns:
            Response with the refund transaction snapshot and id on success
        """
        amount = format_amount(money)

        def refund():
            result = self.client.transaction.refund(transaction_id, amount)
            return self._transaction_result_response(result)

        return self._commit("transaction.refund", refund)

    def void(self, authorization: str, options: OptionsLike = None) -> Response:
        def void():
            result = self.client.transaction.void(authorization)
            return self._transaction_result_response(result)

        return self._commit("transaction.void", void)

    def store(self, credit_card: CreditCard, options: OptionsLike = None) -> Response:
        """
        Vault a card by creating a customer that owns it.

        Returns:
            Response with braintree_customer and customer_vault_id on success
        """
        options = GatewayOptions.coerce(options)
        card_params = {
            "number": credit_card.number,
            "cvv": credit_card.verification_value,
            **_card_expiration(credit_card),
        }
        if options.billing_address:
            card_params["billing_address"] = map_address(options.billing_address)

        def create_customer():
            result = self.client.customer.create({
                "first_name": credit_card.first_name,
                "last_name": credit_card.last_name,
                "email": options.email,
                "credit_card": card_params,
            })
            params = {}
            if result.is_success:
                params["braintree_customer"] = customer_snapshot(result.customer)
                params["customer_vault_id"] = result.customer.id
            return self._response(result.is_success, message_from_result(result), params)

        return self._commit("customer.create", create_customer)

    def update(self, vault_id: str, credit_card: CreditCard, options: OptionsLike = None) -> Response:
        """
        Update a vaulted customer's holder details and default card.

        The customer is updated first; the card update only runs if that
        succeeded, otherwise the customer update's Response is returned as is.
        A customer without a default card yields a not-found Response and no
        updates are attempted.
        """
        options = GatewayOptions.coerce(options)
        default_card = None

        def update_customer():
            nonlocal default_card
            default_card = _default_credit_card(self.client.customer.find(vault_id))
            if default_card is None:
                logger.info("braintree.update.no_default_card", vault_id=vault_id)
                return self._response(False, NOT_FOUND_MESSAGE)

            result = self.client.customer.update(vault_id, {
                "first_name": credit_card.first_name,
                "last_name": credit_card.last_name,
                "email": options.email,
            })
            return self._response(
                result.is_success,
                message_from_result(result),
                self._vaulted_customer_params(vault_id, result.is_success),
            )

        customer_update = self._commit("customer.update", update_customer)
        if not customer_update.success:
            return customer_update

        def update_card():
            result = self.client.credit_card.update(default_card.token, {
                "number": credit_card.number,
                **_card_expiration(credit_card),
            })
            return self._response(
                result.is_success,
                message_from_result(result),
                self._vaulted_customer_params(vault_id, result.is_success),
            )

        return self._commit("credit_card.update", update_card)

    def unstore(self, vault_id: str, options: OptionsLike = None) -> Response:
        def delete_customer():
            self.client.customer.delete(vault_id)
            return self._response(True, "OK")

        return self._commit("customer.delete", delete_customer)

    def _commit(self, operation: str, call: Callable[[], Response]) -> Response:
        try:
            return call()
        except BraintreeError as e:
            error_kind = type(e).__name__
            logger.warning("braintree.request.failed", operation=operation, error=error_kind)
            return self._response(False, error_kind)

    def _response(
        self,
        success: bool,
        message: str,
        params: Optional[Dict[str, Any]] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Response:
        return Response(
            success=success,
            message=message,
            extra_params=params or {},
            extra_options=options or {},
            test=self.test,
        )

    def _vaulted_customer_params(self, vault_id: str, success: bool) -> Dict[str, Any]:
        if not success:
            return {}
        return {"braintree_customer": customer_snapshot(self.client.customer.find(vault_id))}

    def _transaction_result_response(self, result) -> Response:
        params, options = {}, {}
        if result.is_success:
            params["braintree_transaction"] = transaction_snapshot(result.transaction)
            options["authorization"] = result.transaction.id
        return self._response(result.is_success, message_from_result(result), params, options)

    def _create_transaction(
        self,
        transaction_type: str,
        money: int,
        payment_method,
        options: OptionsLike,
    ) -> Response:
        parameters = self._transaction_parameters(money, payment_method, GatewayOptions.coerce(options))

        def create():
            result = getattr(self.client.transaction, transaction_type)(parameters)
            transaction = getattr(result, "transaction", None)
            params, response_options = {}, {}

            if result.is_success:
                params["braintree_transaction"] = transaction_snapshot(transaction)
                params["customer_vault_id"] = transaction.customer_details.id
                response_options["authorization"] = transaction.id

            if transaction is not None:
                response_options["avs_result"] = {
                    "code": None,
                    "message": None,
                    "street_match": transaction.avs_street_address_response_code,
                    "postal_match": transaction.avs_postal_code_response_code,
                }
                response_options["cvv_result"] = {
                    "code": transaction.cvv_response_code,
                    "message": "",
                }
                message = transaction_message(transaction)
            else:
                message = message_from_result(result)

            logger.debug(
                "braintree.transaction.completed",
                transaction_type=transaction_type,
                success=result.is_success,
                transaction_id=response_options.get("authorization"),
            )
            return self._response(result.is_success, message, params, response_options)

        return self._commit(f"transaction.{transaction_type}", create)

    def _transaction_parameters(
        self,
        money: int,
        payment_method,
        options: GatewayOptions,
    ) -> Dict[str, Any]:
        payment_method = PaymentMethod.coerce(payment_method)
        parameters: Dict[str, Any] = {
            "amount": format_amount(money),
            "order_id": options.order_id,
            "customer": {
                "id": "" if options.store is True else (options.store or None),
                "email": options.email,
            },
            "options": {
                "store_in_vault": bool(options.store),
                "submit_for_settlement": options.submit_for_settlement,
            },
        }

        merchant_account_id = options.merchant_account_id or self.merchant_account_id
        if merchant_account_id:
            parameters["merchant_account_id"] = merchant_account_id

        if payment_method.kind == PaymentMethodKind.TOKEN:
            parameters["customer_id"] = payment_method.token
        else:
            card = payment_method.card
            parameters["customer"].update({
                "first_name": card.first_name,
                "last_name": card.last_name,
            })
            parameters["credit_card"] = {
                "number": card.number,
                "cvv": card.verification_value,
                **_card_expiration(card),
            }

        if options.billing_address:
            parameters["billing"] = map_address(options.billing_address)
        if options.shipping_address:
            parameters["shipping"] = map_address(options.shipping_address)
        return parameters
