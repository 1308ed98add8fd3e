import logging
from typing import Dict, Any, List, NoReturn, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from .settings import Settings
from .utils.http import client, DEFAULT_TIMEOUT_SEC, DEFAULT_CONNECT_TIMEOUT_SEC
from .exceptions import (
    PayconiqError,
    CreatePaymentFailed,
    RetrievePaymentFailed,
    GetPaymentsListFailed,
    RefundFailed,
    GetRefundIbanFailed,
)
from .schemas.payments import (
    PaymentRequest,
    RefundRequest,
    ReferenceSearch,
    DateRangeSearch,
    Payment,
    PaymentSearchResult,
    RefundIban,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class PaymentClient:
    """
    Payconiq merchant API (v3):
    - POST /payments                           create
    - GET  /payments/{id}                      retrieve
    - POST /payments/search[?page=&size=]      search by reference / date range
    - POST /payments/{id}                      refund
    - GET  /payments/{id}/debtor/refundIban    refund IBAN

    Success is judged by the decoded body only (paymentId / size / iban present
    and non-empty); HTTP status codes are not consulted.

    The client is not safe for concurrent reconfiguration. With a fixed
    api_key/endpoint it can be shared between threads.
    """

    ENVIRONMENT_PROD = "prod"
    ENVIRONMENT_EXT = "ext"

    ENDPOINT_PROD = "https://api.payconiq.com/v3"
    ENDPOINT_EXT = "https://api.ext.payconiq.com/v3"

    def __init__(
        self,
        api_key: Optional[str] = None,
        environment: str = ENVIRONMENT_PROD,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        connect_timeout_sec: float = DEFAULT_CONNECT_TIMEOUT_SEC,
    ):
        self.api_key = api_key
        self.endpoint = self.ENDPOINT_PROD if environment == self.ENVIRONMENT_PROD else self.ENDPOINT_EXT
        self.transport = transport
        self.timeout_sec = timeout_sec
        self.connect_timeout_sec = connect_timeout_sec

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "PaymentClient":
        """Build a client from PAYCONIQ_* / HTTP_* env vars (or .env) unless settings are given."""
        s = settings or Settings()
        if s.PAYCONIQ_ENDPOINT:
            endpoint = s.PAYCONIQ_ENDPOINT
        elif s.PAYCONIQ_ENVIRONMENT == cls.ENVIRONMENT_PROD:
            endpoint = s.PAYCONIQ_PROD_URL
        else:
            endpoint = s.PAYCONIQ_EXT_URL
        inst = cls(
            s.PAYCONIQ_API_KEY,
            s.PAYCONIQ_ENVIRONMENT,
            transport=transport,
            timeout_sec=s.HTTP_TIMEOUT_SEC,
            connect_timeout_sec=s.HTTP_CONNECT_TIMEOUT_SEC,
        )
        return inst.set_endpoint(endpoint)

    # ---- Configuration ----
    def set_endpoint(self, url: str) -> "PaymentClient":
        self.endpoint = url
        return self

    def set_endpoint_test(self) -> "PaymentClient":
        self.endpoint = self.ENDPOINT_EXT
        return self

    def set_api_key(self, api_key: str) -> "PaymentClient":
        self.api_key = api_key
        return self

    # ---- Transport ----
    def _url(self, route: str) -> str:
        return f"{self.endpoint.rstrip('/')}{route}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Cache-Control": "no-cache",
            "Authorization": f"Bearer {self.api_key or ''}",
        }

    def _request(
        self,
        method: str,
        route: str,
        error_cls: Type[PayconiqError],
        json_payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, Any], int]:
        url = self._url(route)
        logger.debug("Payconiq %s %s params=%s", method, url, params)
        try:
            with client(self.timeout_sec, self.connect_timeout_sec, transport=self.transport) as c:
                resp = c.request(method, url, json=json_payload, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning("Payconiq %s %s failed: %s", method, url, e)
            raise error_cls(str(e) or type(e).__name__) from e

        logger.debug("Payconiq %s %s -> %s", method, url, resp.status_code)
        try:
            js = resp.json()
        except ValueError:
            logger.warning("Payconiq %s %s returned a non-JSON body (status %s)", method, url, resp.status_code)
            js = {}
        if not isinstance(js, dict):
            logger.warning("Payconiq %s %s returned %s instead of an object", method, url, type(js).__name__)
            js = {}
        return js, resp.status_code

    def _decode(
        self,
        model: Type[M],
        js: Dict[str, Any],
        status_code: int,
        error_cls: Type[PayconiqError],
    ) -> M:
        try:
            return model.model_validate(js)
        except ValidationError as e:
            logger.warning("Unexpected %s response shape (status %s): %s", model.__name__, status_code, e)
            raise error_cls(str(e), response=js, status_code=status_code) from e

    def _call(
        self,
        model: Type[M],
        error_cls: Type[PayconiqError],
        method: str,
        route: str,
        json_payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[M, Dict[str, Any], int]:
        js, status_code = self._request(method, route, error_cls, json_payload=json_payload, params=params)
        return self._decode(model, js, status_code, error_cls), js, status_code

    @staticmethod
    def _fail(error_cls: Type[PayconiqError], message: Optional[str], js: Dict[str, Any], status_code: int) -> NoReturn:
        logger.warning("%s (status %s): %s", error_cls.__name__, status_code, message)
        raise error_cls(message, response=js, status_code=status_code)

    # ---- Operations ----
    def create_payment(
        self,
        amount: int,
        currency: str = "EUR",
        description: str = "",
        reference: str = "",
        callback_url: str = "",
        return_url: Optional[str] = None,
    ) -> Payment:
        body = PaymentRequest(
            amount=amount,
            currency=currency,
            description=description,
            reference=reference,
            callbackUrl=callback_url,
            returnUrl=return_url,
        ).payload()
        payment, js, status_code = self._call(Payment, CreatePaymentFailed, "POST", "/payments", json_payload=body)
        if not payment.paymentId:
            self._fail(CreatePaymentFailed, payment.message, js, status_code)
        return payment

    def retrieve_payment(self, payment_id: str) -> Payment:
        payment, js, status_code = self._call(
            Payment, RetrievePaymentFailed, "GET", f"/payments/{quote(payment_id, safe='')}"
        )
        if not payment.paymentId:
            self._fail(RetrievePaymentFailed, payment.message, js, status_code)
        return payment

    def get_payments_list_by_reference(self, reference: str) -> List[Payment]:
        body = ReferenceSearch(reference=reference).payload()
        result, js, status_code = self._call(
            PaymentSearchResult, GetPaymentsListFailed, "POST", "/payments/search", json_payload=body
        )
        # size == 0 counts as a failure too
        if not result.size:
            self._fail(GetPaymentsListFailed, result.message, js, status_code)
        return result.payments

    def get_payments_list_by_date_range(self, from_date: str = "", to_date: str = "", size: int = 50) -> List[Payment]:
        """
        Successful payments in [from_date, to_date], all pages concatenated.

        Dates use YYYY-MM-ddTHH:mm:ss.SSSZ; upstream defaults are now - 1 day
        and now. Only the first page is checked for a non-empty size.
        """
        body = DateRangeSearch(from_date=from_date or None, to_date=to_date or None).payload()
        page = 0
        result, js, status_code = self._search_page(body, page, size)
        if not result.size:
            self._fail(GetPaymentsListFailed, result.message, js, status_code)

        details = result.payments
        while result.totalPages and result.totalPages > 1 and page < result.totalPages - 1:
            if result.number is None:
                next_page = page + 1
            else:
                if result.number != page:
                    logger.warning("Payconiq search returned page %s when page %s was requested", result.number, page)
                # never step backwards or repeat a page
                next_page = max(result.number + 1, page + 1)
            page = next_page
            result, js, status_code = self._search_page(body, page, size)
            # size is not re-checked here, but a page without details is an error body
            if result.details is None:
                self._fail(GetPaymentsListFailed, result.message, js, status_code)
            details.extend(result.payments)
        return details

    def _search_page(self, body: Dict[str, Any], page: int, size: int):
        return self._call(
            PaymentSearchResult,
            GetPaymentsListFailed,
            "POST",
            "/payments/search",
            json_payload=body,
            params={"page": int(page), "size": int(size)},
        )

    def refund_payment(self, payment_id: str, amount: int, currency: str = "EUR", description: str = "") -> Payment:
        body = RefundRequest(amount=amount, currency=currency, description=description).payload()
        # TODO: confirm the dedicated refund route with Payconiq; this posts to the payment resource itself
        payment, js, status_code = self._call(
            Payment, RefundFailed, "POST", f"/payments/{quote(payment_id, safe='')}", json_payload=body
        )
        if not payment.paymentId:
            self._fail(RefundFailed, payment.message, js, status_code)
        return payment

    def get_refund_iban(self, payment_id: str) -> str:
        refund_iban, js, status_code = self._call(
            RefundIban, GetRefundIbanFailed, "GET", f"/payments/{quote(payment_id, safe='')}/debtor/refundIban"
        )
        if not refund_iban.iban:
            self._fail(GetRefundIbanFailed, refund_iban.message, js, status_code)
        return refund_iban.iban
