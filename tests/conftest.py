"""
Shared test configuration and fixtures for the gateway adapter test suite.

Braintree SDK results are stood in for by SimpleNamespace objects shaped
like braintree.SuccessfulResult / braintree.ErrorResult, and the SDK
gateway itself by a Mock injected through the adapter's ``client`` argument.
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from merchant_gateway.core.config import clear_settings_cache
from merchant_gateway.integrations.payment_gateways import BraintreeBlueAdapter, CreditCard


def make_address(**overrides) -> SimpleNamespace:
    fields = {
        "street_address": "1 Main St",
        "extended_address": "Suite 100",
        "company": "Widgets Inc",
        "locality": "Chicago",
        "region": "IL",
        "postal_code": "60622",
        "country_name": "United States of America",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_transaction(**overrides) -> SimpleNamespace:
    fields: Dict[str, Any] = {
        "id": "txn123",
        "status": "authorized",
        "order_id": "order-1",
        "processor_response_code": "1000",
        "processor_response_text": "Approved",
        "avs_street_address_response_code": "M",
        "avs_postal_code_response_code": "M",
        "cvv_response_code": "M",
        "customer_details": SimpleNamespace(id="cust-1", email="a@b.com"),
        "billing_details": make_address(),
        "shipping_details": make_address(),
        "vault_customer": None,
        "merchant_account_id": "main-account",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_stored_card(token: str = "card-token", default: bool = True) -> SimpleNamespace:
    return SimpleNamespace(token=token, default=default, bin="411111", expiration_date="09/2030")


def make_customer(credit_cards: Optional[List[SimpleNamespace]] = None, **overrides) -> SimpleNamespace:
    fields: Dict[str, Any] = {
        "id": "cust-1",
        "email": "a@b.com",
        "first_name": "Longbob",
        "last_name": "Longsen",
        "credit_cards": [make_stored_card()] if credit_cards is None else credit_cards,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def success_result(**attributes) -> SimpleNamespace:
    return SimpleNamespace(is_success=True, **attributes)


def error_result(errors=(("Amount is required.", "81502"),), transaction=None, message="Error") -> SimpleNamespace:
    deep_errors = [SimpleNamespace(message=text, code=code) for text, code in errors]
    return SimpleNamespace(
        is_success=False,
        errors=SimpleNamespace(deep_errors=deep_errors),
        message=message,
        transaction=transaction,
    )


@pytest.fixture(autouse=True)
def reset_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def braintree_client():
    return Mock()


@pytest.fixture
def braintree_config():
    return {
        "merchant_id": "merchant_123",
        "public_key": "public_123",
        "private_key": "private_123",
        "test": True,
    }


@pytest.fixture
def adapter(braintree_config, braintree_client):
    return BraintreeBlueAdapter(client=braintree_client, **braintree_config)


@pytest.fixture
def credit_card():
    return CreditCard(
        first_name="Longbob",
        last_name="Longsen",
        number="4111111111111111",
        month=9,
        year=2030,
        verification_value="123",
    )
