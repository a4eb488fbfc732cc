from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from ..schemas import PaginatedTransactions, SearchTransactionRequest
from ..dependencies import get_wallet_gateway
from ..validation import parse_page, parse_limit, require_query
from ..wallet_integration import YayaWalletGateway, WalletGatewayError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=PaginatedTransactions, response_model_exclude_none=True)
async def get_transactions(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    gateway: YayaWalletGateway = Depends(get_wallet_gateway)
):
    """List the account owner's transactions page by page"""
    page_num = parse_page(page)
    limit_num = parse_limit(limit)

    try:
        return await gateway.fetch_by_user(page_num, limit_num)
    except WalletGatewayError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/search", response_model=PaginatedTransactions, response_model_exclude_none=True)
async def search_transactions(
    request: SearchTransactionRequest,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    gateway: YayaWalletGateway = Depends(get_wallet_gateway)
):
    """
    Search transactions by sender, receiver or transaction id.

    page/limit may come from the URL or the body; the URL wins.
    """
    query = require_query(request.query)
    page_num = parse_page(page if page is not None else request.page)
    limit_num = parse_limit(limit if limit is not None else request.limit)

    try:
        return await gateway.search_by_query(query, page_num, limit_num)
    except WalletGatewayError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
