"""
Errors raised by PaymentClient.

One error per operation. Failure is decided from the decoded response body
(missing paymentId / size / iban), never from the HTTP status code, so each
error keeps the upstream message together with whatever was decoded.
"""
from typing import Any, Dict, Optional


class PayconiqError(Exception):
    """Base class for every failed Payconiq API call."""

    default_message = "Payconiq request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        response: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message or self.default_message)
        self.message = message
        self.response = response or {}
        self.status_code = status_code


class CreatePaymentFailed(PayconiqError):
    default_message = "Creating the payment failed"


class RetrievePaymentFailed(PayconiqError):
    default_message = "Retrieving the payment failed"


class GetPaymentsListFailed(PayconiqError):
    default_message = "Fetching the payments list failed"


class RefundFailed(PayconiqError):
    default_message = "Refunding the payment failed"


class GetRefundIbanFailed(PayconiqError):
    default_message = "Fetching the refund IBAN failed"
