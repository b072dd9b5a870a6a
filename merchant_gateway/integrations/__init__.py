"""
Integration modules for external payment processors.

Contains adapters that translate the generic gateway interface into
processor SDK calls:
- Payment gateways (Braintree Blue)
"""
