from pydantic import BaseModel, Field
from typing import Optional, Any, Dict, List


# ====== Request bodies ======

class PaymentRequest(BaseModel):
    amount: int                     # smallest currency unit (cents)
    currency: str = "EUR"           # ISO 4217
    description: str = ""
    reference: str = ""
    callbackUrl: str = ""
    returnUrl: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        body = self.model_dump(exclude={"returnUrl"})
        # returnUrl is left out entirely, never sent as null or ""
        if self.returnUrl:
            body["returnUrl"] = self.returnUrl
        return body


class RefundRequest(BaseModel):
    amount: int
    currency: str = "EUR"
    description: str = ""

    def payload(self) -> Dict[str, Any]:
        return self.model_dump()


class ReferenceSearch(BaseModel):
    reference: str

    def payload(self) -> Dict[str, Any]:
        return self.model_dump()


class DateRangeSearch(BaseModel):
    model_config = {"populate_by_name": True}

    paymentStatuses: List[str] = Field(default_factory=lambda: ["SUCCEEDED"])
    from_date: Optional[str] = Field(default=None, alias="from")  # YYYY-MM-ddTHH:mm:ss.SSSZ
    to_date: Optional[str] = Field(default=None, alias="to")

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"paymentStatuses": list(self.paymentStatuses)}
        if self.from_date:
            body["from"] = self.from_date
        if self.to_date:
            body["to"] = self.to_date
        return body


# ====== Responses ======
# Upstream fields are passed through as-is; only the ones we check are declared.

class Payment(BaseModel):
    paymentId: Optional[str] = None
    message: Optional[str] = None
    model_config = {"extra": "allow"}


class PaymentSearchResult(BaseModel):
    size: Optional[int] = None
    details: Optional[List[Payment]] = None
    totalPages: Optional[int] = None
    number: Optional[int] = None      # zero-based index of the returned page
    message: Optional[str] = None
    model_config = {"extra": "allow"}

    @property
    def payments(self) -> List[Payment]:
        return list(self.details or [])


class RefundIban(BaseModel):
    iban: Optional[str] = None
    message: Optional[str] = None
    model_config = {"extra": "allow"}
