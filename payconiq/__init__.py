"""Synchronous client for the Payconiq merchant payments API (v3)."""
import logging

from .client import PaymentClient
from .exceptions import (
    PayconiqError,
    CreatePaymentFailed,
    RetrievePaymentFailed,
    GetPaymentsListFailed,
    RefundFailed,
    GetRefundIbanFailed,
)
from .schemas.payments import Payment, PaymentSearchResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "PaymentClient",
    "PayconiqError",
    "CreatePaymentFailed",
    "RetrievePaymentFailed",
    "GetPaymentsListFailed",
    "RefundFailed",
    "GetRefundIbanFailed",
    "Payment",
    "PaymentSearchResult",
]
