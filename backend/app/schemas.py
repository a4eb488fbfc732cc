from pydantic import BaseModel
from typing import Optional, List, Any


class TransactionUser(BaseModel):
    name: str = ""
    account: str = ""


class Transaction(BaseModel):
    id: str
    sender: TransactionUser
    receiver: TransactionUser
    amount_with_currency: str
    amount: float
    amount_in_base_currency: float
    fee: float
    currency: str
    cause: str
    sender_caption: str
    receiver_caption: str
    created_at_time: int
    is_topup: bool
    is_outgoing_transfer: bool
    fee_vat: float
    fee_before_vat: float


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class PaginatedTransactions(BaseModel):
    data: List[Transaction]
    pagination: Pagination
    # Passed through verbatim from YaYa Wallet when present
    incomingSum: Optional[Any] = None
    outgoingSum: Optional[Any] = None
    lastPage: Optional[Any] = None
    perPage: Optional[Any] = None


class SearchTransactionRequest(BaseModel):
    # Loosely typed so that validation.py answers every bad value with 400
    query: Optional[Any] = None
    page: Optional[Any] = None
    limit: Optional[Any] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
